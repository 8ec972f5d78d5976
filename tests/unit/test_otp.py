from __future__ import annotations

import pytest

from app.core.config import OtpSettings
from app.core.exceptions import (
    OtpAttemptsExceededError,
    OtpExpiredError,
    OtpMismatchError,
    OtpNotFoundError,
)
from app.infrastructure.cache import MemoryOtpStore, RedisOtpStore, create_otp_store
from app.services.otp_service import OtpService
from tests.factories import FakeClock, RecordingSmsGateway

PHONE = "9876500001"


class FakePipeline:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return queue

    def execute(self):
        return [getattr(self.client, name)(*args, **kwargs) for name, args, kwargs in self.calls]


class FakeRedis:
    """Enough of the redis client surface for the OTP store."""

    def __init__(self):
        self.hashes = {}
        self.values = {}
        self.ttls = {}

    def pipeline(self):
        return FakePipeline(self)

    def hgetall(self, key):
        return {k: str(v) for k, v in self.hashes.get(key, {}).items()}

    def hset(self, key, mapping):
        self.hashes.setdefault(key, {}).update(mapping)

    def hincrby(self, key, field, amount):
        value = int(self.hashes[key].get(field, 0)) + amount
        self.hashes[key][field] = value
        return value

    def expire(self, key, seconds):
        self.ttls[key] = seconds

    def set(self, key, value, ex=None):
        self.values[key] = value
        self.ttls[key] = ex

    def exists(self, key):
        return int(key in self.hashes or key in self.values)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += int(self.hashes.pop(key, None) is not None)
            removed += int(self.values.pop(key, None) is not None)
        return removed

    def ping(self):
        return True


@pytest.fixture()
def settings():
    return OtpSettings(ttl_seconds=300, max_attempts=3, length=6)


@pytest.fixture()
def service(otp_store, sms_gateway, settings):
    return OtpService(otp_store, sms_gateway, settings)


def test_send_stores_and_delivers(service, otp_store, sms_gateway, clock):
    entry = service.send(PHONE)

    assert len(entry.otp) == 6 and entry.otp.isdigit()
    assert entry.expires_at == clock.now + 300
    assert otp_store.get(PHONE).otp == entry.otp
    phone, message = sms_gateway.messages[0]
    assert phone == PHONE and entry.otp in message


def test_verify_consumes_entry(service, otp_store):
    otp = service.send(PHONE).otp

    service.verify(PHONE, otp)

    assert not otp_store.has(PHONE)
    with pytest.raises(OtpNotFoundError):
        service.verify(PHONE, otp)


def test_mismatch_counts_attempts_until_limit(service, otp_store):
    otp = service.send(PHONE).otp
    wrong = "000000" if otp != "000000" else "111111"

    for expected in (1, 2, 3):
        with pytest.raises(OtpMismatchError):
            service.verify(PHONE, wrong)
        assert otp_store.get(PHONE).attempts == expected

    with pytest.raises(OtpAttemptsExceededError) as exc:
        service.verify(PHONE, otp)
    assert exc.value.status_code == 429
    assert not otp_store.has(PHONE)


def test_expired_otp_is_deleted(service, otp_store, clock):
    otp = service.send(PHONE).otp
    clock.advance(301)

    with pytest.raises(OtpExpiredError) as exc:
        service.verify(PHONE, otp)

    assert exc.value.status_code == 410
    assert not otp_store.has(PHONE)


def test_resend_replaces_entry_and_resets_attempts(service, otp_store):
    service.send(PHONE)
    with pytest.raises(OtpMismatchError):
        service.check(PHONE, "x")

    fresh = service.send(PHONE)

    assert otp_store.get(PHONE).attempts == 0
    assert otp_store.get(PHONE).otp == fresh.otp


def test_memory_store_returns_copies(clock):
    store = MemoryOtpStore(clock=clock)
    store.set(PHONE, "123456", 60)

    entry = store.get(PHONE)
    entry.attempts = 99

    assert store.get(PHONE).attempts == 0


def test_memory_store_reset_flag_carries_into_next_otp(clock):
    store = MemoryOtpStore(clock=clock)
    store.set_reset_flag(PHONE)

    assert store.set(PHONE, "123456", 60).is_reset is True
    store.delete(PHONE)
    assert store.set(PHONE, "654321", 60).is_reset is False


def test_redis_store_round_trip():
    client = FakeRedis()
    store = RedisOtpStore(key_prefix="otp:", client=client)

    store.set(PHONE, "123456", 300)
    assert client.ttls["otp:" + PHONE] == 600

    entry = store.get(PHONE)
    assert entry.otp == "123456" and entry.attempts == 0 and entry.is_reset is False
    assert store.increment_attempts(PHONE) == 1
    assert store.get(PHONE).attempts == 1

    store.set_reset_flag(PHONE)
    assert client.ttls["otp:reset:" + PHONE] == 3600
    assert store.get(PHONE).is_reset is True

    assert store.delete(PHONE) is True
    assert store.get(PHONE) is None
    assert store.increment_attempts(PHONE) == 0
    assert store.health_check() is True


def test_service_works_over_redis_store():
    service = OtpService(RedisOtpStore(client=FakeRedis()), RecordingSmsGateway(), OtpSettings())
    otp = service.send(PHONE).otp
    service.verify(PHONE, otp)
    assert not service.store.has(PHONE)


def test_create_otp_store_backends():
    assert isinstance(create_otp_store(OtpSettings(backend="memory")), MemoryOtpStore)
    assert isinstance(create_otp_store(OtpSettings(backend="redis")), RedisOtpStore)
    with pytest.raises(ValueError):
        create_otp_store(OtpSettings(backend="memcached"))


def test_fake_clock_is_injected():
    clock = FakeClock(start=10.0)
    store = MemoryOtpStore(clock=clock)
    store.set(PHONE, "123456", 5)
    clock.advance(5)
    assert not store.is_expired(PHONE)
    clock.advance(1)
    assert store.is_expired(PHONE)
