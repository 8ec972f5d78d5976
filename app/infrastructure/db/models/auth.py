from datetime import datetime
from typing import Optional

from sqlmodel import Field

from app.core.enums import UserRole
from app.infrastructure.db.models.base import BaseModelWithTimestamp


class User(BaseModelWithTimestamp, table=True):
    """Operator account used to authenticate against the admin API."""
    __tablename__ = "users"

    username: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: Optional[str] = None
    password: str
    role: str = Field(default=UserRole.ADMIN.value, max_length=20)
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = Field(default=None)
