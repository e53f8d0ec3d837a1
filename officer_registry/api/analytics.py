"""
Analytics API endpoints — dashboard totals, per-officer
statistics and the leaderboard.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from officer_registry.dependencies import get_cache
from officer_registry.models.base import get_db
from officer_registry.schemas.analytics import (
    AnalyticsSummary,
    OfficerAnalytics,
    RankingEntry,
)
from officer_registry.services.analytics_service import AnalyticsService
from officer_registry.services.cache import CacheGateway

router = APIRouter(tags=["Analytics"])


def get_analytics_service(
    db: Session = Depends(get_db),
    cache: CacheGateway = Depends(get_cache),
) -> AnalyticsService:
    return AnalyticsService(db, cache)


@router.get("/analytics", response_model=AnalyticsSummary)
def analytics_summary(
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.summary()


@router.get("/analytics/{officer_id}", response_model=OfficerAnalytics)
def officer_analytics(
    officer_id: int,
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Statistics for one officer, grouped by rank at evaluation time."""
    return service.officer_statistics(officer_id)


@router.get("/ranking", response_model=list[RankingEntry])
def ranking(service: AnalyticsService = Depends(get_analytics_service)):
    """Top ten officers by average evaluation score."""
    return service.ranking()
