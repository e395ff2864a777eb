"""
Health Check Endpoints.

Status endpoints used by load balancers and deployment checks. The readiness
probe also verifies that the database answers.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from booktalks_buddy.core.logging_config import get_logger
from booktalks_buddy.server.core import constant
from booktalks_buddy.server.services.deps import SessionDep

router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/health/ready",
    summary="Readiness Check",
    description="Check that the API server can reach its database.",
    response_description="Status object; 503 when the database is unreachable.",
)
async def readiness_check(session: SessionDep):
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "unavailable", "database": "error"}
        )
    return {"status": "ok", "database": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return {"name": constant.PROJECT_NAME, "version": constant.VERSION, "schema_version": constant.SCHEMA_VERSION}
