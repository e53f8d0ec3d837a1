"""
Officer Registry — FastAPI Application.

This is the entry point for the application. All routers are
registered here, and the lifespan owns the process-wide audit
recorder and cache gateway.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from officer_registry.config import get_settings
from officer_registry.logging_config import configure_logging
from officer_registry.models.base import SessionLocal
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import (
    CacheGateway,
    MemoryBackend,
    create_redis_backend,
)
from officer_registry.api.health import router as health_router
from officer_registry.api.officers import router as officers_router
from officer_registry.api.evaluations import router as evaluations_router
from officer_registry.api.audit import router as audit_router
from officer_registry.api.analytics import router as analytics_router

settings = get_settings()
logger = logging.getLogger(__name__)


def build_cache() -> CacheGateway:
    if settings.REDIS_URL:
        backend = create_redis_backend(
            settings.REDIS_URL, settings.CACHE_SOCKET_TIMEOUT
        )
        logger.info("Using Redis cache backend")
    else:
        backend = MemoryBackend()
        logger.info("REDIS_URL not set, using in-process cache backend")
    return CacheGateway(backend, ttl_seconds=settings.CACHE_TTL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    app.state.cache = build_cache()
    app.state.audit_recorder = AuditRecorder.with_thread_pool(
        SessionLocal,
        settings.AUDIT_WORKERS,
        max_pending=settings.AUDIT_MAX_PENDING,
    )
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    try:
        yield
    finally:
        # Let queued audit writes finish before the process exits
        app.state.audit_recorder.shutdown(wait=True)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Officer records, skill evaluations, audit trail and analytics",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(officers_router)
app.include_router(evaluations_router)
app.include_router(audit_router)
app.include_router(analytics_router)
