from .connection import (
    DatabaseManager,
    database_manager,
    get_session_dependency,
)

from .repositories.base import BaseRepository
from .models.base import BaseModel, TimestampMixin

__all__ = [
    # Connection
    "DatabaseManager",
    "database_manager",
    "get_session_dependency",

    # Repository
    "BaseRepository",

    # Models
    "BaseModel",
    "TimestampMixin",
]
