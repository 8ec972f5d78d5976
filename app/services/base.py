"""
Base service class providing common functionality for all services.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.exceptions import DatabaseError
from app.core.logging import get_logger


class BaseService(ABC):
    """Base class for all services."""

    def __init__(self, db_session: Session):
        self.db = db_session
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log service operation."""
        log_msg = f"Service operation: {operation}"
        if details:
            log_msg += f" - Details: {details}"
        self.logger.info(log_msg)

    def commit(self, operation: str) -> None:
        """Commit the unit of work, rolling back and wrapping store errors."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"Commit failed in {operation}: {e}")
            raise DatabaseError("Failed to save changes", operation=operation) from e

    @abstractmethod
    def get_service_name(self) -> str:
        """Return the service name."""
        pass
