"""
Redis-backed OTP store for multi-process deployments.
"""

import logging
import math
import time
from typing import Optional

import redis
from redis.exceptions import RedisError

from .base import OtpEntry, OtpStore

logger = logging.getLogger(__name__)


class RedisOtpStore(OtpStore):
    """
    OTP store keeping one Redis hash per phone number.

    Keys are kept for twice the OTP lifetime so an expired OTP is still
    reported as expired rather than missing.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key_prefix: str = "otp:",
        client: Optional[redis.Redis] = None,
    ):
        self.url = url
        self.key_prefix = key_prefix
        self._client = client
        self.reset_flag_ttl = 3600

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.url, decode_responses=True)
        return self._client

    def _key(self, phone: str) -> str:
        return f"{self.key_prefix}{phone}"

    def _reset_key(self, phone: str) -> str:
        return f"{self.key_prefix}reset:{phone}"

    def now(self) -> float:
        return time.time()

    def get(self, phone: str) -> Optional[OtpEntry]:
        data = self.client.hgetall(self._key(phone))
        if not data:
            return None
        return OtpEntry(
            otp=data["otp"],
            expires_at=float(data["expires_at"]),
            attempts=int(data.get("attempts", 0)),
            is_reset=bool(self.client.exists(self._reset_key(phone))),
        )

    def set(self, phone: str, otp: str, ttl_seconds: int) -> OtpEntry:
        key = self._key(phone)
        entry = OtpEntry(otp=otp, expires_at=self.now() + ttl_seconds)
        pipe = self.client.pipeline()
        pipe.delete(key)
        pipe.hset(key, mapping={"otp": otp, "expires_at": entry.expires_at, "attempts": 0})
        pipe.expire(key, max(1, math.ceil(ttl_seconds * 2)))
        pipe.execute()
        entry.is_reset = bool(self.client.exists(self._reset_key(phone)))
        return entry

    def delete(self, phone: str) -> bool:
        removed = self.client.delete(self._key(phone), self._reset_key(phone))
        return removed > 0

    def increment_attempts(self, phone: str) -> int:
        key = self._key(phone)
        if not self.client.exists(key):
            return 0
        return int(self.client.hincrby(key, "attempts", 1))

    def set_reset_flag(self, phone: str, value: bool = True) -> None:
        if value:
            self.client.set(self._reset_key(phone), 1, ex=self.reset_flag_ttl)
        else:
            self.client.delete(self._reset_key(phone))

    def health_check(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
