"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from taskauth.api.v1.endpoints import auth, health
from taskauth.schemas.common import ErrorResponse

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"],
    responses={
        status: {"model": ErrorResponse} for status in (400, 401, 404, 409, 503)
    },
)
