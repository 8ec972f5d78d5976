import logging
from typing import Optional

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseRepository
from ..models.auth import User
from ..models.base import utcnow
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    User repository implementation.
    """

    def __init__(self, session: Session):
        super().__init__(User, session)

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Args:
            username: Username

        Returns:
            User instance or None if not found
        """
        try:
            statement = select(User).where(User.username == username)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by username {username}: {e}")
            raise DatabaseError("Failed to get user by username", operation="get_by_username")

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            statement = select(User).where(User.email == email)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise DatabaseError("Failed to get user by email", operation="get_by_email")

    def update_last_login(self, user: User) -> None:
        user.last_login = utcnow()
        self.session.add(user)
        self.session.flush()
        logger.debug(f"Updated last login for user {user.id}")
