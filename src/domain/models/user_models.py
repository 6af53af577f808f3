# schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from domain.models.base_models import ApiModel
from domain.entities.user_classes import RoleType

class UserRead(ApiModel):
    id: int
    name: str
    email: str
    role: RoleType
    created_at: datetime | None = None

class LoginRequest(BaseModel):
    email: str
    password: str

class RefreshRequest(BaseModel):
    refresh_token: str | None = Field(default=None, alias="refreshToken")
