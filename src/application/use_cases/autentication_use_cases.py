import hmac
import logging
from dataclasses import replace
from typing import Tuple
from sqlalchemy.orm import Session
from adapters.repository.autentication_repository import AuthenticationRepository
from adapters.repository.user_repository import UserRepository
from application.use_cases.security import create_access_token, create_refresh_token, decode_token
from application.utils.validators import validate_email, validate_user_data
from domain.entities.user_entity import User
from domain.entities.user_classes import RoleType
from domain.exceptions import AuthError, NotFoundError, TokenError

logger = logging.getLogger(__name__)

class AuthenticationUseCases:
    """Application business rules for auth."""

    def __init__(self, db: Session):
        self.repo = AuthenticationRepository(db)
        self.repo_user = UserRepository(db)

    def _issue_tokens(self, user: User) -> Tuple[str, str]:
        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token(user.id)
        # o refresh mais recente invalida os anteriores
        self.repo_user.update_refresh_token(user.id, refresh_token)
        return access_token, refresh_token

    def register_user(self, payload: dict) -> Tuple[User, str, str]:
        record = validate_user_data(payload)
        # auto-cadastro nunca cria administrador
        user = self.repo.create_user(replace(record, role=RoleType.user))
        access_token, refresh_token = self._issue_tokens(user)
        return user, access_token, refresh_token

    def login(self, *, email: str, password: str) -> Tuple[User, str, str]:
        user = self.repo.verify_credentials(email=validate_email(email), password=password)
        if not user:
            logger.warning("Failed login attempt")
            raise AuthError("Invalid credentials")

        access_token, refresh_token = self._issue_tokens(user)
        return user, access_token, refresh_token

    def refresh(self, refresh_token: str | None) -> str:
        if not refresh_token:
            raise AuthError("Refresh token not provided")

        user_id = decode_token(refresh_token, "refresh")
        stored = self.repo_user.get_refresh_token(user_id)
        if not stored or not hmac.compare_digest(stored, refresh_token):
            raise TokenError("Invalid refresh token")

        # o refresh token não é rotacionado aqui
        return create_access_token(user_id)

    def logout(self, user_id: int) -> None:
        self.repo_user.update_refresh_token(user_id, None)

    def get_profile(self, user_id: int) -> User:
        user = self.repo_user.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
