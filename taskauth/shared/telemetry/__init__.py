"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from taskauth.shared.telemetry.logging import setup_logging
from taskauth.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from taskauth.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
]
