"""Business logic services."""

from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.audit_service import AuditLogService
from officer_registry.services.cache import CacheGateway, MemoryBackend
from officer_registry.services.mutations import MutationCoordinator
from officer_registry.services.officer_service import OfficerService
from officer_registry.services.evaluation_service import EvaluationService
from officer_registry.services.analytics_service import AnalyticsService

__all__ = [
    "AuditRecorder",
    "AuditLogService",
    "CacheGateway",
    "MemoryBackend",
    "MutationCoordinator",
    "OfficerService",
    "EvaluationService",
    "AnalyticsService",
]
