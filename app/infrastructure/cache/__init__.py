"""
OTP store package.

Exposes the store interface, both implementations, and a factory that picks
one from settings.
"""

from .base import OtpEntry, OtpStore
from .memory_cache import MemoryOtpStore
from .redis_cache import RedisOtpStore
from ...core.config import OtpSettings

__all__ = [
    "OtpEntry",
    "OtpStore",
    "MemoryOtpStore",
    "RedisOtpStore",
    "create_otp_store",
]


def create_otp_store(settings: OtpSettings) -> OtpStore:
    """Build the OTP store selected by ``settings.backend``."""
    backend = settings.backend.lower()
    if backend == "redis":
        return RedisOtpStore(url=settings.redis_url, key_prefix=settings.key_prefix)
    if backend == "memory":
        return MemoryOtpStore()
    raise ValueError(f"Unsupported OTP backend: {settings.backend}")
