"""Request-scoped context (request ID) for log correlation.

Set by RequestIDMiddleware for the duration of a request; read by the
logging filter installed in setup_logging().
"""

import logging
from contextvars import ContextVar

current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


class RequestIdLogFilter(logging.Filter):
    """Attach request_id to every record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id.get() or "-"
        return True
