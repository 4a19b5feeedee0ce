"""
Health check endpoint.

Reports catalog state and weight store backend; checks database
connectivity when the postgres backend is in use.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config.settings import settings
from ..config.logging import get_logger
from ..database.connection import db_pool

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    checks: Dict[str, Any]


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint.

    Checks:
    - Scenario catalog loaded
    - Weight store configured (and database reachable for the postgres backend)
    """
    checks: Dict[str, Any] = {}
    overall_healthy = True

    catalog = getattr(request.app.state, "catalog", None)
    if catalog is not None:
        checks["catalog"] = {"status": "healthy", "version": catalog.version, "scenarios": len(catalog)}
    else:
        checks["catalog"] = {"status": "unhealthy", "error": "Catalog not loaded"}
        overall_healthy = False

    store = getattr(request.app.state, "weight_store", None)
    checks["weight_store"] = {
        "status": "healthy" if store is not None else "unhealthy",
        "backend": store.name if store is not None else settings.weight_store_backend,
    }
    if store is None:
        overall_healthy = False

    if settings.weight_store_backend == "postgres":
        try:
            if db_pool.is_connected:
                await db_pool.fetchval("SELECT 1")
                checks["database"] = {"status": "healthy", "connected": True}
            else:
                checks["database"] = {"status": "unhealthy", "connected": False, "error": "Not connected"}
                overall_healthy = False
        except Exception as e:
            logger.error("Database health check failed", error=str(e), exc_info=True)
            checks["database"] = {"status": "unhealthy", "connected": False, "error": str(e)}
            overall_healthy = False

    response = HealthResponse(
        status="healthy" if overall_healthy else "unhealthy",
        service=settings.scenario_matcher_service_name,
        checks=checks,
    )
    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=response.model_dump())
