"""
Audit recorder — appends one entry per state-changing action.

By the time record() is called the business operation has
already committed. The audit write is best-effort: a failure is
logged for operators and then dropped. It never fails or rolls
back the caller's operation and is never retried inline.

Writes use their own session so they are independent of the
request's session. When an executor is supplied the write runs
there as a detached task and the caller does not wait for it.
Without one the write runs inline, which is what the tests use.

At most max_pending background writes may be queued or running.
Past that, new entries are dropped and logged instead of piling
up in memory while the audit store is slow.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

from sqlalchemy.orm import Session

from officer_registry.models.audit_log import AuditLog
from officer_registry.schemas.context import RequestContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 1000


class AuditRecorder:

    def __init__(
        self,
        session_factory: Callable[[], Session],
        executor: Executor | None = None,
        max_pending: int = DEFAULT_MAX_PENDING,
    ):
        self._session_factory = session_factory
        self._executor = executor
        self._slots = threading.BoundedSemaphore(max_pending)

    @classmethod
    def with_thread_pool(
        cls,
        session_factory: Callable[[], Session],
        workers: int,
        max_pending: int = DEFAULT_MAX_PENDING,
    ) -> "AuditRecorder":
        """Recorder that writes on a bounded pool of background threads."""
        executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="audit"
        )
        return cls(session_factory, executor, max_pending)

    def record(
        self,
        action: str,
        context: RequestContext,
        target_entity: str,
        target_id: Any,
        metadata: dict | None = None,
    ) -> None:
        """Append an audit entry. Never raises."""
        actor = context.actor
        entry = {
            "action": action,
            "method": context.method,
            "endpoint": context.endpoint,
            "actor_id": actor.id if actor else None,
            "actor_username": actor.username if actor else None,
            "actor_role": actor.role if actor else None,
            "target_entity": target_entity,
            "target_id": None if target_id is None else str(target_id),
            "details": metadata or {},
        }

        if self._executor is None:
            self._write(entry)
            return

        if not self._slots.acquire(blocking=False):
            logger.error(
                "Dropped audit entry %s %s:%s: write queue is full",
                action, target_entity, target_id,
            )
            return

        try:
            future = self._executor.submit(self._write, entry)
        except RuntimeError as e:
            # Executor already shut down
            self._slots.release()
            logger.error(
                "Dropped audit entry %s %s:%s: %s",
                action, target_entity, target_id, e,
            )
            return
        future.add_done_callback(self._finish)

    def _write(self, entry: dict) -> None:
        session = None
        try:
            session = self._session_factory()
            session.add(AuditLog(**entry))
            session.commit()
        except Exception:  # noqa: BLE001
            if session is not None:
                session.rollback()
            logger.exception(
                "Failed to write audit entry %s %s:%s",
                entry["action"], entry["target_entity"], entry["target_id"],
            )
        finally:
            if session is not None:
                session.close()

    def _finish(self, future: Future) -> None:
        self._slots.release()
        if future.cancelled():
            logger.error("Audit write was cancelled before it ran")
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Audit write task failed: %r", exc)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting writes; with wait=True, drain pending ones."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
