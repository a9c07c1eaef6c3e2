"""HTTP middleware: request ID and security headers.

Applied in the main app; order matters (last added = outermost).
"""

from taskauth.middleware.request_id import RequestIDMiddleware
from taskauth.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
]
