"""
Mutation coordinator — the sequence every write follows.

    1. commit the primary write
    2. record the audit entry (fire-and-forget)
    3. invalidate the cache keys the write made stale
    4. return to the caller

Invalidation is last so that a reader who misses the cache
after it recomputes from data that already includes the write.

The three steps are not transactional with each other. Only
the primary commit can fail the operation; audit and cache
failures are logged by their own components and swallowed.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from officer_registry.schemas.context import RequestContext
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway

logger = logging.getLogger(__name__)


def _comparable(value: Any) -> Any:
    """Render dates as ISO strings so diffs are JSON and compare by value."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def diff_fields(
    current: object, changes: dict[str, Any], fields: Iterable[str]
) -> dict[str, dict[str, Any]]:
    """
    Describe which named fields an update actually changes.

    Returns ``{field: {"before": old, "after": new}}`` for every
    field in ``fields`` that is present in ``changes`` with a value
    different from the one on ``current``. Fields that are absent
    or unchanged are left out, so an empty result means the update
    is a no-op.
    """
    diff = {}
    for field in fields:
        if field not in changes:
            continue
        before = _comparable(getattr(current, field))
        after = _comparable(changes[field])
        if before != after:
            diff[field] = {"before": before, "after": after}
    return diff


class MutationCoordinator:

    def __init__(self, db: Session, recorder: AuditRecorder, cache: CacheGateway):
        self.db = db
        self.recorder = recorder
        self.cache = cache

    def commit(
        self,
        *,
        action: str,
        context: RequestContext,
        target_entity: str,
        target_id: Any,
        metadata: dict,
        invalidate: Iterable[str],
    ) -> None:
        """
        Commit the pending primary write, then audit and invalidate.

        If the commit fails, the session is rolled back and the
        error propagates: nothing changed, so nothing is audited
        and nothing is invalidated.
        """
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Primary write failed for %s %s:%s",
                action, target_entity, target_id,
            )
            raise

        logger.info("%s %s:%s committed", action, target_entity, target_id)
        self.recorder.record(action, context, target_entity, target_id, metadata)
        self.cache.delete(*invalidate)
