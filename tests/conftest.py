# Shared pytest fixtures
from __future__ import annotations

import os
import tempfile
from typing import Dict, Iterator

# Settings are read once and cached; configure the environment before any app import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECURITY_BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECURITY_SECRET_KEY", "test-secret-key")
os.environ.setdefault("OTP_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["STORAGE_LOCAL_STORAGE_PATH"] = tempfile.mkdtemp(prefix="retailhub-test-uploads-")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from app.core.config import get_settings  # noqa: E402
from app.core.enums import UserRole  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.infrastructure.cache import MemoryOtpStore  # noqa: E402
from app.infrastructure.db.connection import database_manager  # noqa: E402
from app.interfaces.dependencies import get_otp_store, get_sms_gateway  # noqa: E402
from app.main import app  # noqa: E402
from app.services.auth_service import AuthService  # noqa: E402

from tests.factories import ADMIN_PASSWORD, FakeClock, RecordingSmsGateway  # noqa: E402


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def database() -> Iterator[None]:
    """Fresh in-memory schema per test."""
    database_manager.create_tables()
    yield
    database_manager.disconnect()


@pytest.fixture()
def session(database) -> Iterator[Session]:
    db = Session(database_manager.get_engine(), expire_on_commit=False)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def otp_store(clock) -> MemoryOtpStore:
    return MemoryOtpStore(clock=clock)


@pytest.fixture()
def sms_gateway() -> RecordingSmsGateway:
    return RecordingSmsGateway()


@pytest.fixture()
def client(database, otp_store, sms_gateway) -> Iterator[TestClient]:
    app.dependency_overrides[get_otp_store] = lambda: otp_store
    app.dependency_overrides[get_sms_gateway] = lambda: sms_gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(username: str, role: UserRole):
    with database_manager.get_session() as db:
        return AuthService(db).create_user(
            username=username,
            email=f"{username}@example.com",
            password=ADMIN_PASSWORD,
            role=role,
        )


@pytest.fixture()
def admin_user(database):
    return _create_user("admin", UserRole.ADMIN)


@pytest.fixture()
def employee_user(database):
    return _create_user("fieldstaff", UserRole.EMPLOYEE)


def _bearer(user) -> Dict[str, str]:
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(admin_user) -> Dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture()
def employee_headers(employee_user) -> Dict[str, str]:
    return _bearer(employee_user)
