"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from officer_registry.models.base import Base
from officer_registry.models.ranks import RANK_HIERARCHY, RankHierarchy
from officer_registry.models.audit_log import AuditLog
from officer_registry.models.officer import Officer
from officer_registry.models.evaluation import Evaluation, SKILL_NAMES

__all__ = [
    "Base",
    "RANK_HIERARCHY",
    "RankHierarchy",
    "AuditLog",
    "Officer",
    "Evaluation",
    "SKILL_NAMES",
]
