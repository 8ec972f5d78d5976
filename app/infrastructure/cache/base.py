"""
Base interface for one-time-password stores.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class OtpEntry:
    """
    OTP issued to one phone number.

    ``expires_at`` is a unix timestamp. Entries outlive their expiry so a
    late verification can be told apart from a missing one.
    """
    otp: str
    expires_at: float
    attempts: int = 0
    is_reset: bool = False


class OtpStore(ABC):
    """
    Key-value store for OTPs keyed by phone number, with per-key TTL and an
    attempt counter.
    """

    @abstractmethod
    def get(self, phone: str) -> Optional[OtpEntry]:
        """Return the entry for ``phone`` or ``None``."""

    @abstractmethod
    def set(self, phone: str, otp: str, ttl_seconds: int) -> OtpEntry:
        """Store a fresh OTP for ``phone``, replacing any previous one."""

    @abstractmethod
    def delete(self, phone: str) -> bool:
        """Remove the entry for ``phone``. Returns whether one existed."""

    @abstractmethod
    def increment_attempts(self, phone: str) -> int:
        """Record a failed verification and return the new attempt count."""

    @abstractmethod
    def set_reset_flag(self, phone: str, value: bool = True) -> None:
        """Mark ``phone`` as going through the password reset flow."""

    @abstractmethod
    def now(self) -> float:
        """Current time, as the store sees it."""

    def has(self, phone: str) -> bool:
        return self.get(phone) is not None

    def is_expired(self, phone: str) -> bool:
        """True when an entry exists and its TTL has elapsed."""
        entry = self.get(phone)
        return entry is not None and self.now() > entry.expires_at

    def health_check(self) -> bool:
        return True
