"""Pytest configuration and fixtures for taskauth.

SessionStore runs against fakeredis; AuthService gets a low-cost hasher and
a controllable clock. HTTP tests build the app with create_app() and put the
test AuthService on app.state (ASGITransport does not run the lifespan).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production-0123456789")

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskauth.application.services.auth_service import AuthService
from taskauth.core.config import Settings, get_settings
from taskauth.core.limiter import limiter
from taskauth.infrastructure.cache.session_store import SessionStore
from taskauth.infrastructure.persistence import InMemoryUserRepository
from taskauth.infrastructure.security import OtpGenerator, PasswordHasher, TokenService

get_settings.cache_clear()
# Rate limits are per-process; many tests share one client address.
limiter.enabled = False

# bcrypt's minimum cost; production settings enforce 12.
TEST_BCRYPT_ROUNDS = 4
TEST_PASSWORD = "Abcdef1!"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingEmailSender:
    """IEmailSender that records messages, or raises when fail is set."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise ConnectionRefusedError("SMTP server unreachable")
        self.sent.append((to, subject, body))


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
async def redis_client():
    """Isolated in-memory Redis per test."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def session_store(redis_client, settings: Settings) -> SessionStore:
    store = SessionStore(redis_client=redis_client, settings=settings)
    await store.connect()
    return store


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.now(UTC))


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(settings.secret_key.get_secret_value(), settings.algorithm)


@pytest.fixture
def auth_service(
    user_repo: InMemoryUserRepository,
    session_store: SessionStore,
    password_hasher: PasswordHasher,
    token_service: TokenService,
    email_sender: RecordingEmailSender,
    settings: Settings,
    clock: FakeClock,
) -> AuthService:
    return AuthService(
        user_repo=user_repo,
        session_store=session_store,
        password_hasher=password_hasher,
        token_service=token_service,
        otp_generator=OtpGenerator(settings.otp_length),
        email_sender=email_sender,
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def app(auth_service: AuthService, session_store: SessionStore) -> FastAPI:
    from taskauth.main import create_app

    application = create_app()
    application.state.auth_service = auth_service
    application.state.session_store = session_store
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
