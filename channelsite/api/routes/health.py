"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Readiness checks (database + LLM provider configuration)
"""
from datetime import datetime

from fastapi import APIRouter

from channelsite import __version__
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.llm.client import get_llm_client
from channelsite.models.common import HealthResponse, ReadinessResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns 200 OK while the API process is up. No dependency checks."
)
async def health_check() -> HealthResponse:
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check endpoint",
    description="""
    Returns whether the service is ready to accept requests.

    Verifies:
    - Database connectivity
    - Which LLM providers have a key configured
    """
)
def readiness_check() -> ReadinessResponse:
    """
    Perform a readiness check.

    Status is "ready" only when the database answers and at least one
    provider is configured; otherwise "degraded". Providers are listed
    even when the database is down, since env keys still work. Generation
    still works without providers (fallback template), so this never
    returns 503.
    """
    logger.debug("Readiness check requested")

    database_ok = get_database().check_connection()
    providers = get_llm_client().available_providers()

    return ReadinessResponse(
        status="ready" if database_ok and providers else "degraded",
        database="connected" if database_ok else "unavailable",
        providers=providers,
        timestamp=datetime.utcnow()
    )
