"""
Retailer password reset over OTP.
"""

from typing import Any, Dict, Optional

from sqlmodel import Session

from app.core.exceptions import BadRequestError, NotFoundError
from app.core.logging import audit_log
from app.core.security import hash_password, mask_sensitive_data
from app.infrastructure.db.repositories.party_repository import RetailerRepository
from app.services.base import BaseService
from app.services.otp_service import OtpService
from app.utils.security import normalize_phone

MIN_PASSWORD_LENGTH = 6


def clean_phone(phone: Any) -> Optional[str]:
    """Digits of ``phone`` when exactly ten remain, otherwise ``None``."""
    digits = normalize_phone(phone)
    if digits is None or len(digits) != 10:
        return None
    return digits


class PasswordResetService(BaseService):
    """Two-step reset: confirm the phone is registered, then swap the password."""

    def __init__(self, db_session: Session, otp_service: OtpService):
        super().__init__(db_session)
        self.otp = otp_service
        self.retailers = RetailerRepository(db_session)

    def get_service_name(self) -> str:
        return "PasswordResetService"

    def initiate(self, phone: Any) -> Dict[str, Any]:
        """
        Confirm that a retailer owns ``phone`` and flag it for reset.

        Stored contacts are matched as-is, with a ``91`` country code, or
        with a leading zero.
        """
        cleaned = clean_phone(phone)
        if cleaned is None:
            raise BadRequestError("Please provide a valid 10-digit phone number")

        self.log_operation("initiate_password_reset", {"phone": mask_sensitive_data(cleaned)})

        retailer = self.retailers.find_by_phone_variants(cleaned)
        if retailer is None:
            raise NotFoundError(
                resource="Retailer",
                message="Phone number not registered. Please check and try again.",
            )

        self.otp.store.set_reset_flag(cleaned, True)
        return {
            "success": True,
            "message": "Phone number verified. Please request OTP to proceed.",
            "phoneExists": True,
        }

    def reset(self, phone: Any, otp: Optional[str], new_password: Optional[str]) -> Dict[str, Any]:
        """
        Verify the OTP and store the new password.

        Raises:
            BadRequestError: Bad phone, short password, or malformed OTP
            OtpError: See ``OtpService.check``
            NotFoundError: No retailer with this contact number
        """
        cleaned = clean_phone(phone)
        if cleaned is None:
            raise BadRequestError("Invalid phone number")

        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        if not otp or len(otp) != self.otp.settings.length:
            raise BadRequestError("Invalid OTP format")

        self.otp.check(cleaned, otp)

        retailer = self.retailers.find_by_contact(cleaned)
        if retailer is None:
            raise NotFoundError(resource="Retailer", message="Retailer not found")

        retailer.password = hash_password(new_password)
        self.db.add(retailer)
        self.commit("reset_password")

        self.otp.store.delete(cleaned)
        audit_log("PASSWORD_RESET", "RETAILER", user_id=retailer.id)
        return {"success": True, "message": "Password reset successfully"}
