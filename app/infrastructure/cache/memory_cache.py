"""
In-memory OTP store for development, tests, and single-process deployments.
"""

import logging
import threading
import time
from dataclasses import replace
from typing import Callable, Dict, Optional

from .base import OtpEntry, OtpStore

logger = logging.getLogger(__name__)


class MemoryOtpStore(OtpStore):
    """
    Thread-safe in-memory OTP store.

    Args:
        clock: Callable returning the current unix time; tests pass a fake one
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._entries: Dict[str, OtpEntry] = {}
        self._reset_flags: Dict[str, bool] = {}
        self._lock = threading.RLock()

    def now(self) -> float:
        return self._clock()

    def get(self, phone: str) -> Optional[OtpEntry]:
        with self._lock:
            entry = self._entries.get(phone)
            # copies keep callers from mutating stored state
            return replace(entry) if entry is not None else None

    def set(self, phone: str, otp: str, ttl_seconds: int) -> OtpEntry:
        with self._lock:
            entry = OtpEntry(
                otp=otp,
                expires_at=self.now() + ttl_seconds,
                is_reset=self._reset_flags.get(phone, False),
            )
            self._entries[phone] = entry
            return replace(entry)

    def delete(self, phone: str) -> bool:
        with self._lock:
            self._reset_flags.pop(phone, None)
            return self._entries.pop(phone, None) is not None

    def increment_attempts(self, phone: str) -> int:
        with self._lock:
            entry = self._entries.get(phone)
            if entry is None:
                return 0
            entry.attempts += 1
            return entry.attempts

    def set_reset_flag(self, phone: str, value: bool = True) -> None:
        with self._lock:
            self._reset_flags[phone] = value
            entry = self._entries.get(phone)
            if entry is not None:
                entry.is_reset = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._reset_flags.clear()
            logger.debug("OTP store cleared")
