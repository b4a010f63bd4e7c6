"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.dependencies import get_store
from core.config import settings
from core.errors import StorageUnavailableError
from core.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "saju-accounts",
    }


@router.get("/ready")
def readiness_check():
    """
    Readiness check.

    Returns 200 if the configured store answers a read of the account
    collection, 503 otherwise.
    """
    try:
        get_store().get(settings.users_storage_key)
    except (RuntimeError, StorageUnavailableError) as e:
        logger.warning("Readiness check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "checks": {"storage": "error"},
            },
        )

    return {
        "status": "ready",
        "checks": {
            "storage": "ok",
        },
    }
