"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY is validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults except secret_key, which is checked in
    validate_required.
    """

    # App
    app_name: str = "taskauth"
    app_version: str = "1.0.0"
    debug: bool = False

    # Tokens
    secret_key: SecretStr = SecretStr("")
    # Separate signing key for refresh tokens; falls back to secret_key when unset.
    refresh_secret_key: SecretStr | None = None
    algorithm: str = "HS256"
    access_token_expire_seconds: int = 15 * 60
    refresh_token_expire_seconds: int = 7 * 24 * 3600
    reset_token_expire_seconds: int = 15 * 60

    # Sessions, OTP and reminders
    session_ttl_seconds: int = 24 * 3600
    otp_length: int = 6
    otp_ttl_seconds: int = 10 * 60
    # Extra time the challenge is kept after expiry so late codes report OTP_EXPIRED.
    otp_grace_seconds: int = 5 * 60
    reminder_ttl_seconds: int = 30 * 24 * 3600

    # Password hashing
    bcrypt_rounds: int = 12

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Redis (session store)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_timeout: float = 5.0

    # SMTP (OTP delivery). Unset host = dev mode (messages are logged, not sent).
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: SecretStr | None = None
    smtp_use_tls: bool = True
    smtp_from_email: str | None = None
    smtp_from_name: str = "Task Management System"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required secrets and numeric bounds."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.bcrypt_rounds < 12:
            raise ValueError("BCRYPT_ROUNDS must be at least 12")
        if self.otp_length < 4:
            raise ValueError("OTP_LENGTH must be at least 4")
        return self

    def refresh_signing_key(self) -> SecretStr:
        """Return the key used to sign refresh tokens."""
        if self.refresh_secret_key and self.refresh_secret_key.get_secret_value():
            return self.refresh_secret_key
        return self.secret_key


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
