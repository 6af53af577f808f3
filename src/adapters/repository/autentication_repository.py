# autentication_repository.py
import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from domain.entities.user_entity import User as UserORM
from domain.entities.user_classes import RoleType
from domain.entities.records import UserRecord
from domain.exceptions import ConflictError
from application.use_cases.security import hash_password, verify_password

logger = logging.getLogger(__name__)

class AuthenticationRepository:
    """Data access for users/auth (SQLAlchemy implementation)."""

    def __init__(self, db: Session):
        self.db = db

    # Queries
    def get_user_by_email(self, email: str) -> Optional[UserORM]:
        return self.db.execute(select(UserORM).where(UserORM.email == email)).scalar_one_or_none()

    # Commands
    def create_user(self, record: UserRecord) -> UserORM:
        if self.get_user_by_email(record.email):
            raise ConflictError("Email already registered", field="email")

        user = UserORM(
            name=record.name,
            email=record.email,
            hashed_password=hash_password(record.password),
            role=record.role or RoleType.user,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # corrida entre a checagem acima e o insert
            self.db.rollback()
            raise ConflictError("Email already registered", field="email")
        self.db.refresh(user)
        logger.info("User %s registered", user.id)
        return user

    def verify_credentials(self, *, email: str, password: str) -> Optional[UserORM]:
        user = self.get_user_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user
