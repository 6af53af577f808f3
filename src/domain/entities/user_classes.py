# entities.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

class RoleType(str, Enum):
    admin = "admin"
    user = "user"

@dataclass(frozen=True)
class UserEntity:
    id: int
    name: str
    email: str
    role: RoleType
    created_at: datetime | None = None
