"""Main application entry point with FastAPI."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .config import get_settings
from .database import check_database_health, dispose_engine
from .dependencies import get_preference_extractor
from .errors import EngineError
from .routes import achievements_router, meals_router, recommendations_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def validate_environment():
    """Validate all required environment variables on startup."""
    try:
        settings = get_settings()
        logger.info("Environment variables validated successfully")
        return settings
    except ValidationError as e:
        logger.error("ERROR: Missing or invalid environment variables:")
        logger.error(str(e))
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    # Startup
    logger.info("Starting Savorly engine...")

    validate_environment()

    if check_database_health():
        logger.info("Database connection OK")
    else:
        logger.warning("Database is not reachable, requests will fail until it is")

    # Build the extractor eagerly so configuration problems show at startup
    get_preference_extractor()

    logger.info("Savorly engine started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Savorly engine...")
    dispose_engine()
    logger.info("Savorly engine shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Savorly Engine",
    description="Swipe-based recipe recommendations and achievements",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(recommendations_router)
app.include_router(achievements_router)
app.include_router(meals_router)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _error_response(f"Invalid request: {details}", 400)


@app.get("/health")
async def health_check():
    """Health check endpoint.

    Verifies database connection and returns status.
    """
    db_healthy = check_database_health()

    if db_healthy:
        return {
            "status": "healthy",
            "database": "connected",
        }
    else:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
            },
        )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Savorly Engine",
        "status": "running",
        "version": __version__,
    }
