"""Health check endpoints for liveness and readiness probes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from taskauth.api.v1.dependencies import get_session_store
from taskauth.infrastructure.cache.session_store import SessionStore
from taskauth.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Session store unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    session_store: Annotated[SessionStore | None, Depends(get_session_store)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 if the session store answers PING; 503 otherwise."""
    if session_store is not None and await session_store.ping():
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            status="not_ready",
            message="Session store unavailable",
        ).model_dump(),
    )
