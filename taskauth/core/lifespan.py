"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py; no
business logic here, only wiring of infrastructure (session store, auth
service, telemetry).

The default user repository is InMemoryUserRepository: accounts live only
as long as the process. Deployments with a durable user store pass their
IUserRepository to build_auth_service().
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskauth.application.interfaces.repositories import IUserRepository
from taskauth.application.services.auth_service import AuthService
from taskauth.core.config import Settings, get_settings
from taskauth.infrastructure.cache.session_store import SessionStore
from taskauth.infrastructure.external.email import SmtpEmailSender
from taskauth.infrastructure.persistence import InMemoryUserRepository
from taskauth.infrastructure.security import OtpGenerator, PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def build_auth_service(
    settings: Settings,
    session_store: SessionStore,
    user_repo: IUserRepository | None = None,
) -> AuthService:
    """Wire AuthService with production collaborators.

    Args:
        user_repo: Durable user store; defaults to an in-process repository
            (development only, emptied on restart).
    """
    return AuthService(
        user_repo=user_repo if user_repo is not None else InMemoryUserRepository(),
        session_store=session_store,
        password_hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        token_service=TokenService(
            settings.secret_key.get_secret_value(), settings.algorithm
        ),
        refresh_token_service=TokenService(
            settings.refresh_signing_key().get_secret_value(), settings.algorithm
        ),
        otp_generator=OtpGenerator(settings.otp_length),
        email_sender=SmtpEmailSender.from_settings(settings),
        settings=settings,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), session store, auth service.
    Shutdown order: session store disconnect, telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from taskauth.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_redis()
        logger.info("Telemetry initialized")

    session_store = SessionStore(settings=settings)
    await session_store.connect()
    if not session_store.is_connected():
        logger.warning("Starting without session store; auth endpoints will return 503")
    app.state.session_store = session_store
    app.state.auth_service = build_auth_service(settings, session_store)

    yield

    # ---- Shutdown ----
    await session_store.disconnect()

    from taskauth.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")
