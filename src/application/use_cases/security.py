# security.py
import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Literal

from dotenv import load_dotenv
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from infrastructure.database import get_db
from domain.entities.user_entity import User as UserORM
from domain.entities.user_classes import UserEntity, RoleType
from domain.exceptions import AuthError, TokenError
from infrastructure.csrf import csrf_protection, CSRF_HEADER, SAFE_METHODS

load_dotenv()

logger = logging.getLogger(__name__)

TokenKind = Literal["access", "refresh"]

pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
)

http_bearer = HTTPBearer(auto_error=False)

JWT_SECRET = os.environ.get("JWT_SECRET", "change_this_in_prod")
# sem segredo próprio, o refresh usa o mesmo do access
JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET") or JWT_SECRET
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.environ.get("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
JWT_LEEWAY_SECONDS = int(os.environ.get("JWT_LEEWAY_SECONDS", "0"))

def hash_password(raw: str) -> str:
    if not isinstance(raw, str):
        raise TypeError("Password must be a string")
    return pwd_context.hash(raw)

def verify_password(raw: str, hashed: str | None) -> bool:
    if not isinstance(raw, str) or not hashed:
        return False
    return pwd_context.verify(raw, hashed)

def _secret_for(kind: TokenKind) -> str:
    return JWT_REFRESH_SECRET if kind == "refresh" else JWT_SECRET

def _encode(user_id: int, kind: TokenKind, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "typ": kind,
        "iat": now,
        "exp": now + lifetime,
        # dois tokens emitidos no mesmo segundo nunca são iguais
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, _secret_for(kind), algorithm=ALGORITHM)

def create_access_token(user_id: int, *, expires_minutes: int | None = None) -> str:
    minutes = ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    return _encode(user_id, "access", timedelta(minutes=minutes))

def create_refresh_token(user_id: int, *, days: int | None = None) -> str:
    days = REFRESH_TOKEN_EXPIRE_DAYS if days is None else days
    return _encode(user_id, "refresh", timedelta(days=days))

def decode_token(token: str, kind: TokenKind) -> int:
    """Verify signature, expiry and token kind; return the user id it was issued for."""
    if not token or not isinstance(token, str):
        raise TokenError("Token not provided")
    try:
        payload = jwt.decode(
            token,
            _secret_for(kind),
            algorithms=[ALGORITHM],
            options={"verify_exp": True, "leeway": JWT_LEEWAY_SECONDS},
        )
    except JWTError:
        raise TokenError("Invalid or expired token")

    if payload.get("typ") != kind:
        raise TokenError("Invalid or expired token")
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise TokenError("Invalid or expired token")

def to_user_entity(user: UserORM) -> UserEntity:
    role_value = user.role.value if hasattr(user.role, "value") else user.role
    return UserEntity(
        id=user.id,
        name=user.name,
        email=user.email,
        role=RoleType(role_value),
        created_at=user.created_at,
    )

def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> UserEntity:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Not authorized, token missing")

    user_id = decode_token(credentials.credentials, "access")
    user: UserORM | None = db.get(UserORM, user_id)
    if not user:
        logger.warning("Access token for unknown user id %s", user_id)
        raise AuthError("User not found")

    request.state.user_id = user.id
    return to_user_entity(user)

def csrf_guard(
    request: Request,
    response: Response,
    current: UserEntity = Depends(get_current_user),
) -> None:
    """Emite o token CSRF em leituras e exige o header em escritas, quando habilitado."""
    if not csrf_protection.enabled:
        return
    key = str(current.id)
    if request.method in SAFE_METHODS:
        response.headers[CSRF_HEADER] = csrf_protection.issue(key)
        return
    csrf_protection.verify(key, request.headers.get(CSRF_HEADER))
