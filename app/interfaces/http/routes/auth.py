from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from app.core.exceptions import BadRequestError
from app.infrastructure.db.connection import get_session_dependency
from app.infrastructure.db.models.auth import User
from app.interfaces.dependencies import get_current_user, get_otp_service
from app.schemas.base import MessageResponse
from app.schemas.auth import (
    OtpSendRequest,
    OtpVerifyRequest,
    PasswordResetInitiateRequest,
    PasswordResetRequest,
    Token,
    UserRead,
)
from app.services.auth_service import AuthService
from app.services.otp_service import OtpService
from app.services.password_reset_service import PasswordResetService, clean_phone

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session_dependency),
) -> Dict[str, Any]:
    """Login and get access token"""
    auth_service = AuthService(db)
    user = auth_service.authenticate_user(form_data.username, form_data.password)
    return auth_service.generate_access_token(user)


@router.get("/me", response_model=UserRead)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> UserRead:
    """Get current user information"""
    return UserRead.model_validate(current_user)


@router.post("/otp/send")
def send_otp(
    payload: OtpSendRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> Dict[str, Any]:
    """Issue an OTP to a 10-digit phone number"""
    phone = clean_phone(payload.phone)
    if phone is None:
        raise BadRequestError("Please provide a valid 10-digit phone number")
    entry = otp_service.send(phone)
    return {
        "success": True,
        "message": "OTP sent successfully",
        "expiresIn": int(entry.expires_at - otp_service.store.now()),
    }


@router.post("/otp/verify", response_model=MessageResponse)
def verify_otp(
    payload: OtpVerifyRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> Dict[str, Any]:
    """Verify and consume an OTP"""
    phone = clean_phone(payload.phone)
    if phone is None:
        raise BadRequestError("Invalid phone number")
    otp_service.verify(phone, payload.otp)
    return {"success": True, "message": "Phone number verified successfully"}


@router.post("/password-reset/initiate")
def initiate_password_reset(
    payload: PasswordResetInitiateRequest,
    db: Session = Depends(get_session_dependency),
    otp_service: OtpService = Depends(get_otp_service),
) -> Dict[str, Any]:
    """Confirm a retailer phone number before the OTP step"""
    return PasswordResetService(db, otp_service).initiate(payload.phone)


@router.post("/password-reset", response_model=MessageResponse)
def reset_password(
    payload: PasswordResetRequest,
    db: Session = Depends(get_session_dependency),
    otp_service: OtpService = Depends(get_otp_service),
) -> Dict[str, Any]:
    """Verify the OTP and set a new retailer password"""
    return PasswordResetService(db, otp_service).reset(payload.phone, payload.otp, payload.new_password)
