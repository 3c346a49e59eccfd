"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

import redis.asyncio as aioredis
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from holidayscout import __app_name__, __version__
from holidayscout.config import settings
from holidayscout.exceptions import (
    ConfigurationException,
    DestinationNotFoundError,
    InvalidSearchRequestError,
)
from holidayscout.orchestration.package_orchestrator import PackageSearchOrchestrator
from holidayscout.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Store Redis client globally
redis_client = None


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(Exception),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def connect_to_redis() -> aioredis.Redis:
    """
    Connect to Redis with retry logic.

    Retries up to 5 times with exponential backoff (2-10 seconds).

    Returns:
        Redis client instance
    """
    try:
        client = aioredis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
        )
        await client.ping()
        logger.info("Redis connection established")
        return client
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        raise  # Re-raise to trigger retry


def validate_startup_config() -> None:
    """Warn about optional features that are not configured."""
    warnings = []

    if settings.use_amadeus and not (settings.amadeus_client_id and settings.amadeus_client_secret):
        warnings.append("USE_AMADEUS is set but Amadeus credentials are missing")

    if not settings.redis_url:
        warnings.append("REDIS_URL not set - provider caches are per-process")

    if warnings:
        logger.warning("Startup configuration warnings:")
        for warning in warnings:
            logger.warning(f"  - {warning}")
    else:
        logger.info("Startup configuration validated successfully")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Connects Redis (if configured) and builds the search orchestrator.
    """
    setup_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
    )
    logger.info(f"Starting {__app_name__} v{__version__}")
    logger.info(f"Environment: {settings.environment}")

    validate_startup_config()

    global redis_client
    if settings.redis_url:
        try:
            redis_client = await connect_to_redis()
        except Exception as e:
            logger.error(
                f"Failed to connect to Redis after retries: {e}\n"
                f"To fix: Ensure Redis is running and REDIS_URL is correctly set in .env",
                exc_info=True,
            )
            raise RuntimeError(f"Redis connection failed: {e}")

    app.state.orchestrator = PackageSearchOrchestrator.from_settings(
        settings, redis_client=redis_client
    )
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    await app.state.orchestrator.aclose()
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Budget holiday package finder",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(InvalidSearchRequestError)
async def invalid_request_handler(request: Request, exc: InvalidSearchRequestError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid search request", "field": exc.field, "message": exc.issue},
    )


@app.exception_handler(DestinationNotFoundError)
async def destination_not_found_handler(request: Request, exc: DestinationNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Destination not found", "iata_code": exc.iata_code},
    )


@app.exception_handler(ConfigurationException)
async def configuration_error_handler(request: Request, exc: ConfigurationException) -> JSONResponse:
    logger.error(f"Configuration error during {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Service misconfigured", "message": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions."""
    logger.error(
        f"Unhandled exception during {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )

    if settings.debug:
        content = {
            "error": "Internal server error",
            "message": str(exc),
            "type": exc.__class__.__name__,
            "path": str(request.url.path),
        }
    else:
        content = {
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please check the logs.",
        }

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
async def health_check() -> JSONResponse:
    """
    Health check endpoint.

    Redis is reported but only counts against health when it is configured.
    """
    redis_state = "not configured"
    redis_healthy = True
    if redis_client:
        try:
            await redis_client.ping()
            redis_state = "healthy"
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            redis_state = "unhealthy"
            redis_healthy = False

    response: Dict[str, Any] = {
        "status": "healthy" if redis_healthy else "unhealthy",
        "version": __version__,
        "environment": settings.environment,
        "dependencies": {"redis": redis_state},
    }
    status_code = status.HTTP_200_OK if redis_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response, status_code=status_code)


from holidayscout.api.routes import packages  # noqa: E402

app.include_router(packages.router, prefix="/api", tags=["Packages"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("holidayscout.api.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
