"""Health check endpoint for monitoring and deployment verification.

Reports which storage the service started with and whether the database is
reachable right now. An unreachable database does not make the service
unhealthy: requests are served from the fallback store meanwhile. The probe
blocks the event loop for as long as the database takes to answer.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import ResumeServices, get_services
from app.logging_config import get_logger
from app.models.database import probe_connection

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(services: ResumeServices = Depends(get_services)) -> dict:
    """Health check endpoint.

    Returns:
        dict: Health status, storage mode and database state

    Example response:
        {
            "status": "healthy",
            "storage": "database",
            "database": "connected"
        }
    """
    if services.engine is None:
        return {
            "status": "healthy",
            "storage": services.store.storage_mode,
            "database": "disabled",
        }

    try:
        probe_connection(services.engine)
    except SQLAlchemyError as e:
        logger.warning(f"Health check: database unreachable: {e}")
        return {
            "status": "degraded",
            "storage": services.store.storage_mode,
            "database": "unavailable",
        }

    logger.debug("Health check passed")
    return {
        "status": "healthy",
        "storage": services.store.storage_mode,
        "database": "connected",
    }
