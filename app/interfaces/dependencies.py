from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.core.exceptions import AuthorizationError, UnauthorizedError
from app.core.security import verify_token
from app.infrastructure.cache.base import OtpStore
from app.infrastructure.db.connection import get_session_dependency
from app.infrastructure.db.models.auth import User
from app.infrastructure.db.repositories.user_repository import UserRepository
from app.infrastructure.sms.base import SmsGateway
from app.infrastructure.storage.base import StorageBackend
from app.services.otp_service import OtpService

# Security
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_session_dependency),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    token_data = verify_token(credentials.credentials)

    user = UserRepository(db).get(token_data.user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User account is inactive")

    return user


def require_admin(
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> User:
    """Get current admin user"""
    if current_user.role != settings.security.admin_role:
        raise AuthorizationError("Only admins can perform this action", role=settings.security.admin_role)
    return current_user


def get_otp_store(request: Request) -> OtpStore:
    return request.app.state.otp_store


def get_blob_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def get_sms_gateway(request: Request) -> SmsGateway:
    return request.app.state.sms_gateway


def get_otp_service(
    store: OtpStore = Depends(get_otp_store),
    sms: SmsGateway = Depends(get_sms_gateway),
    settings: Settings = Depends(get_settings),
) -> OtpService:
    return OtpService(store, sms, settings.otp)
