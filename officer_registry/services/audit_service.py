"""
Audit log queries.

Filters are exact matches pushed down to SQL. Without a search
term, counting and paging run in SQL as well. Free-text search
runs afterwards, in Python, over a fixed set of text fields.
Pagination comes last, so counts and page numbers describe the
searched result set, not the raw table.
"""

import math

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from officer_registry.models.audit_log import AuditLog
from officer_registry.schemas.audit import AuditLogPage, AuditLogResponse

# Metadata keys that hold a human-readable name
SEARCHABLE_METADATA_KEYS = ("name", "officerName")


def matches_search(entry: AuditLog, term: str) -> bool:
    """Case-insensitive substring match over the searchable fields."""
    needle = term.lower()
    details = entry.details or {}
    haystack = [entry.target_entity, entry.action, entry.endpoint]
    haystack.extend(details.get(key) for key in SEARCHABLE_METADATA_KEYS)
    return any(
        isinstance(value, str) and needle in value.lower()
        for value in haystack
    )


class AuditLogService:

    def __init__(self, db: Session):
        self.db = db

    def search(
        self,
        *,
        user: int | None = None,
        action: str | None = None,
        entity: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> AuditLogPage:
        """
        Return one page of audit entries, newest first.

        Pages are 1-based. A page past the end is empty, not an
        error.
        """
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        query = select(AuditLog)
        if user is not None:
            query = query.where(AuditLog.actor_id == user)
        if action:
            query = query.where(AuditLog.action == action)
        if entity:
            query = query.where(AuditLog.target_entity == entity)
        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        start = (page - 1) * limit

        if search:
            entries = [
                e for e in self.db.execute(query).scalars()
                if matches_search(e, search)
            ]
            total = len(entries)
            page_entries = entries[start:start + limit]
        else:
            total = self.db.execute(
                select(func.count()).select_from(query.order_by(None).subquery())
            ).scalar()
            page_entries = self.db.execute(
                query.offset(start).limit(limit)
            ).scalars().all()

        return AuditLogPage(
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
            total_results=total,
            results=[AuditLogResponse.from_entry(e) for e in page_entries],
        )
