# models.py
from datetime import datetime
from sqlalchemy import String, Text, Enum as SAEnum, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from infrastructure.database import Base
from domain.entities.user_classes import RoleType


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[RoleType] = mapped_column(
        SAEnum(RoleType, name="roletype"), nullable=False, default=RoleType.user
    )
    # apenas o último refresh emitido é válido
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
