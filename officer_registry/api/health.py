"""
Health check endpoint.

Reports database and cache connectivity. A cache outage only
degrades the service, since every cached view can be computed
directly.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from officer_registry.dependencies import get_cache
from officer_registry.models.base import get_db
from officer_registry.services.cache import CacheGateway

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    cache: CacheGateway = Depends(get_cache),
):
    """Return application health including database and cache status."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        db_status = "unhealthy"

    cache_status = "healthy" if cache.is_healthy() else "unhealthy"

    return {
        "status": (
            "healthy"
            if db_status == "healthy" and cache_status == "healthy"
            else "degraded"
        ),
        "service": "officer-registry",
        "database": db_status,
        "cache": cache_status,
    }
