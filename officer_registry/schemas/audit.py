"""
Pydantic schemas for the audit log read API.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from officer_registry.models.audit_log import AuditLog
from officer_registry.schemas.common import CamelModel


class AuditActor(BaseModel):
    id: int | None
    username: str | None
    role: str | None


class AuditTarget(BaseModel):
    entity: str
    id: str | None


class AuditLogResponse(BaseModel):
    id: int
    action: str
    method: str | None
    endpoint: str | None
    user: AuditActor | None
    target: AuditTarget
    metadata: dict[str, Any]
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: AuditLog) -> "AuditLogResponse":
        user = None
        if entry.actor_id is not None or entry.actor_username is not None:
            user = AuditActor(
                id=entry.actor_id,
                username=entry.actor_username,
                role=entry.actor_role,
            )
        return cls(
            id=entry.id,
            action=entry.action,
            method=entry.method,
            endpoint=entry.endpoint,
            user=user,
            target=AuditTarget(entity=entry.target_entity, id=entry.target_id),
            metadata=entry.details or {},
            timestamp=entry.timestamp,
        )


class AuditLogPage(CamelModel):
    page: int
    limit: int
    total_pages: int
    total_results: int
    results: list[AuditLogResponse]
