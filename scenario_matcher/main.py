"""
Main application entry point.

Initializes FastAPI application with routing, middleware, and startup/shutdown handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from . import __version__
from .config.settings import settings
from .config.logging import configure_logging, get_logger
from .config.exceptions import (
    CatalogLoadError,
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseQueryError,
    EncodingError,
    ScenarioMatcherError,
    ScenarioNotFoundError,
    WeightStoreError,
)
from .database.connection import db_pool
from .api.router import api_router, APIKeyMiddleware, TraceIDMiddleware
from .api.middleware import RequestResponseLoggingMiddleware
from .api.health import router as health_router
from .api.matches import router as matches_router
from .api.scenarios import router as scenarios_router
from .services.match_selector import MatchSelector
from .services.scenario_catalog import load_catalog
from .services.weight_store import create_weight_store

configure_logging()
logger = get_logger(__name__)

# Map exception types to HTTP status codes
STATUS_CODE_MAP = {
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    EncodingError: status.HTTP_400_BAD_REQUEST,
    CatalogLoadError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ScenarioNotFoundError: status.HTTP_404_NOT_FOUND,
    WeightStoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DatabaseConnectionError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DatabaseQueryError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: validate configuration, load the scenario catalog, build the
    weight store (opening the database pool for the postgres backend) and
    the match selector. Shutdown: close the database pool.
    """
    logger.info("Starting scenario matcher", service_name=settings.scenario_matcher_service_name)

    settings.validate_on_startup()

    catalog = load_catalog()
    weight_store = create_weight_store()
    if settings.weight_store_backend == "postgres":
        await db_pool.create_pool()

    app.state.catalog = catalog
    app.state.weight_store = weight_store
    app.state.match_selector = MatchSelector(catalog, weight_store)
    logger.info(
        "Scenario matcher started",
        catalog_version=catalog.version,
        scenarios=len(catalog),
        weight_store_backend=weight_store.name,
    )

    try:
        yield
    finally:
        if settings.weight_store_backend == "postgres":
            await db_pool.close_pool()
        logger.info("Scenario matcher stopped")


app = FastAPI(
    title="Scenario Matcher",
    description="Four-candle pattern matching against the trading scenario catalog",
    version=__version__,
    lifespan=lifespan,
)

# Last added runs first: trace id is bound before anything logs
app.add_middleware(APIKeyMiddleware)
app.add_middleware(RequestResponseLoggingMiddleware)
app.add_middleware(TraceIDMiddleware)

api_router.include_router(matches_router)
api_router.include_router(scenarios_router)
app.include_router(health_router)
app.include_router(api_router)


@app.exception_handler(ScenarioMatcherError)
async def scenario_matcher_error_handler(request: Request, exc: ScenarioMatcherError):
    """Map service errors to JSON responses with a matching status code."""
    status_code = STATUS_CODE_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    log = logger.warning if status_code < 500 else logger.error
    log(
        "Scenario matcher error",
        error=str(exc),
        error_type=type(exc).__name__,
        status_code=status_code,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "detail": str(exc),
            "type": "ScenarioMatcherError",
        },
    )


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "scenario_matcher.main:app",
        host="0.0.0.0",
        port=settings.scenario_matcher_port,
        log_level=settings.scenario_matcher_log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
