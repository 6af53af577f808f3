# autentication_controller.py
import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from infrastructure.database import get_db
from infrastructure.audit import audited
from infrastructure.rate_limiter import auth_rate_limit
from domain.models.user_models import UserRead, LoginRequest, RefreshRequest
from domain.entities.user_classes import UserEntity
from application.use_cases.autentication_use_cases import AuthenticationUseCases
from application.use_cases.security import get_current_user, csrf_guard
from application.utils.utils import envelope

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)

@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit), Depends(audited("auth.register"))],
)
def register(payload: dict, request: Request, db: Session = Depends(get_db)):
    uc = AuthenticationUseCases(db)
    user, access_token, refresh_token = uc.register_user(payload)
    request.state.user_id = user.id
    return envelope(
        {
            "user": UserRead.model_validate(user).to_json(),
            "accessToken": access_token,
            "refreshToken": refresh_token,
        },
        message="User registered successfully",
    )

@router.post("/login", dependencies=[Depends(auth_rate_limit), Depends(audited("auth.login"))])
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    uc = AuthenticationUseCases(db)
    user, access_token, refresh_token = uc.login(email=payload.email, password=payload.password)
    request.state.user_id = user.id
    return envelope(
        {
            "user": UserRead.model_validate(user).to_json(),
            "accessToken": access_token,
            "refreshToken": refresh_token,
        },
        message="Login successful",
    )

@router.post("/refresh")
def refresh_token(payload: RefreshRequest, db: Session = Depends(get_db)):
    uc = AuthenticationUseCases(db)
    return envelope({"accessToken": uc.refresh(payload.refresh_token)})

@router.post("/logout", dependencies=[Depends(csrf_guard), Depends(audited("auth.logout"))])
def logout(db: Session = Depends(get_db), current: UserEntity = Depends(get_current_user)):
    AuthenticationUseCases(db).logout(current.id)
    return envelope(message="Logout successful")

@router.get("/me", dependencies=[Depends(csrf_guard)])
def me(db: Session = Depends(get_db), current: UserEntity = Depends(get_current_user)):
    user = AuthenticationUseCases(db).get_profile(current.id)
    return envelope({"user": UserRead.model_validate(user).to_json()})
