"""
Authentication service for operator accounts.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

from sqlmodel import Session

from app.core.config import get_settings
from app.core.enums import UserRole
from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.logging import audit_log
from app.core.security import create_access_token, hash_password, verify_password
from app.infrastructure.db.models.auth import User
from app.infrastructure.db.repositories.user_repository import UserRepository
from app.services.base import BaseService


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.users = UserRepository(db_session)

    def get_service_name(self) -> str:
        return "AuthService"

    def authenticate_user(self, username: str, password: str) -> User:
        """
        Check credentials and record the login.

        Raises:
            UnauthorizedError: Unknown user, wrong password, or inactive account
        """
        self.log_operation("authenticate_user", {"username": username})

        user = self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password):
            audit_log("LOGIN", "USER", details={"username": username}, success=False)
            raise UnauthorizedError("Incorrect username or password")
        if not user.is_active:
            raise UnauthorizedError("User account is inactive")

        self.users.update_last_login(user)
        self.commit("authenticate_user")
        audit_log("LOGIN", "USER", user_id=user.id)
        return user

    def generate_access_token(self, user: User) -> Dict[str, Any]:
        settings = get_settings()
        expires = timedelta(minutes=settings.security.access_token_expire)
        token = create_access_token(
            {"sub": user.id, "username": user.username, "role": user.role},
            expires_delta=expires,
        )
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": int(expires.total_seconds()),
        }

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        role: UserRole = UserRole.ADMIN,
        full_name: Optional[str] = None,
    ) -> User:
        """
        Create an operator account.

        Raises:
            ConflictError: Username or email already taken
        """
        self.log_operation("create_user", {"username": username, "role": role.value})

        if self.users.get_by_username(username) or self.users.get_by_email(email):
            raise ConflictError("Username or email already registered", resource="User")

        user = self.users.create(
            User(
                username=username,
                email=email,
                full_name=full_name,
                password=hash_password(password),
                role=role.value,
            )
        )
        self.commit("create_user")
        return user
