"""
Shared test fixtures and utilities.

Provides settings from a patched environment, an in-memory SQLite store,
a notification sink that records deliveries, and helpers to pull action
tokens out of rendered emails.
"""

import re
from datetime import date, timedelta
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from meetmax.application.services.account_service import AccountService
from meetmax.core.app_factory import create_application
from meetmax.core.config import Settings
from meetmax.domain.exceptions import DeliveryError
from meetmax.domain.models import Gender, User
from meetmax.infrastructure.repositories.user_repository import SQLiteUserRepository
from meetmax.services.passwords import PasswordHasher
from meetmax.services.token_codec import TokenCodec, TokenPurpose

ACCESS_SECRET = "test-access-secret-with-enough-entropy-0001"
REFRESH_SECRET = "test-refresh-secret-with-enough-entropy-0002"
EMAIL_SECRET = "test-email-secret-with-enough-entropy-00003"

_ACTION_URL_RE = re.compile(r"/api/auth/(verify|new-password)/([A-Za-z0-9_\-\.]+)")


class RecordingSink:
    """Notification sink that keeps every delivery in memory."""

    def __init__(self) -> None:
        self.deliveries: List[Tuple[str, str, str]] = []
        self.fail = False

    async def deliver(self, recipient: str, subject: str, body: str) -> None:
        if self.fail:
            raise DeliveryError()
        self.deliveries.append((recipient, subject, body))

    def last_token(self, kind: str = "verify") -> Optional[str]:
        for _, _, body in reversed(self.deliveries):
            match = _ACTION_URL_RE.search(body)
            if match and match.group(1) == kind:
                return match.group(2)
        return None


def make_codec(**overrides) -> TokenCodec:
    lifetimes = {
        TokenPurpose.ACCESS: timedelta(minutes=15),
        TokenPurpose.REFRESH: timedelta(days=7),
        TokenPurpose.EMAIL_ACTION: timedelta(minutes=5),
    }
    return TokenCodec(
        secrets={
            TokenPurpose.ACCESS: ACCESS_SECRET,
            TokenPurpose.REFRESH: REFRESH_SECRET,
            TokenPurpose.EMAIL_ACTION: EMAIL_SECRET,
        },
        lifetimes=lifetimes,
        **overrides,
    )


def registration(**overrides) -> dict:
    payload = {
        "email": "a@b.com",
        "firstname": "Ada",
        "lastname": "Lovelace",
        "password": "longenough1",
        "date_of_birth": "1990-12-10",
        "gender": "Female",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", ACCESS_SECRET)
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", REFRESH_SECRET)
    monkeypatch.setenv("USER_VERIFICATION_TOKEN_SECRET", EMAIL_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("DATABASE_PATH", ":memory:")
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "100")
    monkeypatch.setenv("APP_BASE_URL", "https://meetmax.test")
    for key in (
        "SMTP_HOST",
        "SMTP_USERNAME",
        "SMTP_FROM_EMAIL",
        "REFRESH_COOKIE_NAME",
        "REFRESH_COOKIE_PATH",
        "CORS_ALLOW_ORIGINS",
        "ACCESS_TOKEN_EXP_MINUTES",
        "REFRESH_TOKEN_EXP_DAYS",
        "EMAIL_TOKEN_EXP_MINUTES",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def settings(env) -> Settings:
    return Settings()


@pytest.fixture
def repository():
    repo = SQLiteUserRepository(":memory:")
    yield repo
    repo.close()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def codec() -> TokenCodec:
    return make_codec()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def account_service(repository, sink, codec, hasher) -> AccountService:
    return AccountService(
        users=repository,
        notifier=sink,
        tokens=codec,
        hasher=hasher,
        app_base_url="https://meetmax.test",
    )


@pytest.fixture
def make_user(repository, hasher):
    """Insert a user directly into the store."""

    def _make_user(
        email: str = "jane@example.com",
        password: str = "password123",
        is_verified: bool = True,
        firstname: str = "Jane",
        lastname: str = "Doe",
    ) -> User:
        return repository.create(
            User(
                id=None,
                email=email,
                firstname=firstname,
                lastname=lastname,
                password_hash=hasher.hash(password),
                date_of_birth=date(1992, 3, 14),
                gender=Gender.FEMALE,
                is_verified=is_verified,
            )
        )

    return _make_user


@pytest.fixture
def app(settings, repository, sink):
    return create_application(settings, user_repository=repository, notification_sink=sink)


@pytest.fixture
def client(app):
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


@pytest.fixture
def auth_headers(codec):
    def _auth_headers(email: str = "jane@example.com") -> dict:
        token = codec.issue(email, TokenPurpose.ACCESS)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
