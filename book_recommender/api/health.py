"""
Book Recommender - Health API Routes

GET /health: liveness, always 200 with service info
GET /ready: readiness, 503 until the lifespan handler finished startup

Patterns Applied:
- Health Check Pattern with a HealthService class
- Pydantic response models

Anti-Patterns Avoided:
- Bare except clauses
- Missing response models
"""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from book_recommender.core.config import get_settings
from book_recommender.core.logging import get_logger

router = APIRouter(tags=["health"])

logger = get_logger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]


# =============================================================================
# Health Service
# =============================================================================


class HealthService:
    """Service class for health check operations."""

    def __init__(self, service_name: str, version: str):
        self._service_name = service_name
        self._version = version
        self._initialized = False

    def check_health(self) -> dict[str, Any]:
        """Check basic service health.

        Returns:
            Health status dictionary with status, version, service
        """
        return {
            "status": "healthy",
            "version": self._version,
            "service": self._service_name,
        }

    def check_readiness(self) -> tuple[dict[str, Any], bool]:
        """Check if service is ready to accept requests.

        The recommender loads no models; it is ready once startup completed.

        Returns:
            Tuple of (readiness dict, is_ready bool)
        """
        checks = {"initialized": self._initialized}
        is_ready = all(checks.values())

        return {
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        }, is_ready

    def set_initialized(self, initialized: bool) -> None:
        """Set startup status. Called by the lifespan handler."""
        self._initialized = initialized


_health_service: HealthService | None = None


def get_health_service() -> HealthService:
    """Get the health service, created on first use from Settings."""
    global _health_service
    if _health_service is None:
        settings = get_settings()
        _health_service = HealthService(settings.service_name, settings.version)
    return _health_service


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Liveness probe",
)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    data = get_health_service().check_health()
    logger.debug("health_check", status=data["status"])
    return HealthResponse(**data)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready"},
    },
    summary="Readiness Check",
    description="Readiness probe",
)
async def readiness_check() -> JSONResponse:
    """Readiness check endpoint.

    Returns:
        200 if ready, 503 if not ready
    """
    data, is_ready = get_health_service().check_readiness()
    status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.debug("readiness_check", status=data["status"], is_ready=is_ready)
    return JSONResponse(content=data, status_code=status_code)
