"""
OTP issue and verification.
"""

import logging
from typing import Optional

from app.core.config import OtpSettings
from app.core.exceptions import (
    OtpAttemptsExceededError,
    OtpExpiredError,
    OtpMismatchError,
    OtpNotFoundError,
)
from app.core.security import mask_sensitive_data
from app.infrastructure.cache.base import OtpEntry, OtpStore
from app.infrastructure.sms.base import SmsGateway
from app.utils.security import generate_otp

logger = logging.getLogger(__name__)

OTP_MESSAGE = "Your verification code is {otp}. It expires in {minutes} minutes."


class OtpService:
    """
    Issues OTPs through the SMS gateway and checks them against the store.

    Args:
        store: OTP store
        sms: SMS gateway
        settings: TTL, length and attempt limits
    """

    def __init__(self, store: OtpStore, sms: SmsGateway, settings: OtpSettings):
        self.store = store
        self.sms = sms
        self.settings = settings

    def send(self, phone: str) -> OtpEntry:
        otp = generate_otp(self.settings.length)
        entry = self.store.set(phone, otp, self.settings.ttl_seconds)
        minutes = max(1, self.settings.ttl_seconds // 60)
        self.sms.send(phone, OTP_MESSAGE.format(otp=otp, minutes=minutes))
        logger.info(f"OTP issued to {mask_sensitive_data(phone)}")
        return entry

    def check(self, phone: str, otp: Optional[str]) -> OtpEntry:
        """
        Verify ``otp`` without consuming it.

        Expired entries and entries past the attempt limit are deleted; a
        mismatch counts as one attempt.

        Raises:
            OtpNotFoundError: No OTP issued (404)
            OtpExpiredError: TTL elapsed (410)
            OtpAttemptsExceededError: Too many failed attempts (429)
            OtpMismatchError: Wrong code (401)
        """
        entry = self.store.get(phone)
        if entry is None:
            raise OtpNotFoundError()

        if self.store.is_expired(phone):
            self.store.delete(phone)
            raise OtpExpiredError()

        if entry.attempts >= self.settings.max_attempts:
            self.store.delete(phone)
            raise OtpAttemptsExceededError()

        if entry.otp != otp:
            attempts = self.store.increment_attempts(phone)
            logger.warning(f"OTP mismatch for {mask_sensitive_data(phone)} (attempt {attempts})")
            raise OtpMismatchError()

        return entry

    def verify(self, phone: str, otp: Optional[str]) -> None:
        """Verify and consume an OTP."""
        self.check(phone, otp)
        self.store.delete(phone)
        logger.info(f"OTP verified for {mask_sensitive_data(phone)}")
