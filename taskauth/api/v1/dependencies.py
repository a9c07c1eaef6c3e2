"""FastAPI dependencies for API v1.

AuthService and the session store are created once in the lifespan and read
from app.state; routes never construct infrastructure themselves.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskauth.application.services.auth_service import AuthService
from taskauth.domain.exceptions import InvalidTokenException, StoreUnavailableException
from taskauth.infrastructure.cache.session_store import SessionStore
from taskauth.infrastructure.security.jwt import TokenClaims

_http_bearer = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Return the process-wide AuthService."""
    service = getattr(request.app.state, "auth_service", None)
    if service is None:
        raise StoreUnavailableException("Auth service not initialized")
    return service


def get_session_store(request: Request) -> SessionStore | None:
    """Return the process-wide session store, or None before startup."""
    return getattr(request.app.state, "session_store", None)


async def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenClaims:
    """Return verified access-token claims; raise 401 if missing or invalid.

    Requires Authorization: Bearer <token>.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenException("Missing bearer token")
    return await auth_service.verify_access_token(credentials.credentials)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
