# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import StorageDep

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str
    storage: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
def health_check(storage: StorageDep):
    """
    Health check endpoint.

    Returns basic health status and the active storage backend.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
        storage=storage.name,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(storage: StorageDep):
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks that the storage backend answers.
    """
    available = storage.check_availability()
    checks = ChecksResponse(
        storage=f"{storage.name}: healthy" if available else f"{storage.name}: unavailable"
    )

    return ReadinessResponse(
        status="ready" if available else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
