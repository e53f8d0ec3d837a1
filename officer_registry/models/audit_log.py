"""
Audit log model.

Records who did what to which entity, and when. The target is
a polymorphic reference (entity name + id as text), so there is
no foreign key: an entry outlives the record it describes.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON, event
from sqlalchemy.orm import Mapped, mapped_column

from officer_registry.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a state-changing action.

    Audit logs are append-only. You never update or delete an
    audit record; the mapper events below refuse to.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    method: Mapped[str | None] = mapped_column(String(10), nullable=True)
    endpoint: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Actor is absent for unauthenticated actions
    actor_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    actor_username: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    actor_role: Mapped[str | None] = mapped_column(String(50), nullable=True)

    target_entity: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    target_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # "metadata" is reserved on declarative classes, so the
    # attribute is named details and mapped onto that column.
    details: Mapped[dict] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.target_entity}:{self.target_id}>"


@event.listens_for(AuditLog, "before_update")
def _refuse_update(mapper, connection, target):
    raise ValueError("Audit log entries are immutable")


@event.listens_for(AuditLog, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise ValueError("Audit log entries cannot be deleted")
