"""FastAPI application entry point for the survey resume service.

This module initializes the FastAPI application, sets up logging, builds the
storage services, registers routers, and handles global exception handling.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.dependencies import build_services
from app.logging_config import setup_logging, get_logger
from app.routes import emails, health, survey

# Initialize logger (will be configured during startup)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Select the storage backend and build the resume services

    Shutdown:
    - Wait for pending audit writes
    - Drop the in-memory store and dispose of the database engine

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    settings = get_settings()
    setup_logging(settings)

    services = build_services(settings)
    app.state.services = services

    logger.info(
        f"Survey resume service starting - "
        f"Environment: {settings.environment}, "
        f"Storage: {services.store.storage_mode}, "
        f"Version: {settings.git_commit_sha}"
    )

    yield

    await services.close()
    logger.info("Survey resume service shutting down")


# Initialize FastAPI application
app = FastAPI(
    title="Survey Resume Service",
    description="Save-and-resume persistence for multi-step surveys",
    version="1.0.0",
    lifespan=lifespan
)


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information.

    Returns:
        dict: API information and status
    """
    settings = get_settings()
    return {
        "service": "Survey Resume Service",
        "version": "1.0.0",
        "environment": settings.environment,
        "status": "operational"
    }


# Register routers
app.include_router(health.router, tags=["Health"])
app.include_router(survey.router, tags=["Survey"])
app.include_router(emails.router, tags=["Emails"])


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking sensitive information.

    Args:
        request: FastAPI request object
        exc: Exception that was raised

    Returns:
        JSONResponse: Generic error response
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url.path}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )
