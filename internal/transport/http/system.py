"""
Service endpoints: health check, Prometheus metrics, service info.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from internal.infrastructure.metrics import HEALTH_CHECK_STATUS
from internal.transport.http.dependencies import HealthCheck, get_health_check
from internal.transport.http.dto import HealthResponse
from pkg.logger.logger import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "product-catalog-service"

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Storage unavailable"}},
)
async def healthz(health_check: HealthCheck = Depends(get_health_check)) -> JSONResponse:
    """
    Health check endpoint.

    Probes the storage backend; 503 when it does not answer.
    """
    healthy = False
    if health_check is not None:
        try:
            healthy = await health_check()
        except Exception as e:
            logger.error("Health check failed", error=str(e))

    health_status = "healthy" if healthy else "unhealthy"
    HEALTH_CHECK_STATUS.labels(status=health_status).inc()

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthResponse(status=health_status, service=SERVICE_NAME).model_dump(),
    )


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": SERVICE_NAME,
        "version": "1.0.0",
        "status": "running",
    }
