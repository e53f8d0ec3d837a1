"""
Audit log API endpoint. Admins only.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from officer_registry.dependencies import require_admin
from officer_registry.models.base import get_db
from officer_registry.schemas.audit import AuditLogPage
from officer_registry.services.audit_service import AuditLogService

router = APIRouter(tags=["Audit"])


@router.get(
    "/audit-logs",
    response_model=AuditLogPage,
    dependencies=[Depends(require_admin)],
)
def list_audit_logs(
    user: int | None = None,
    action: str | None = None,
    entity: str | None = None,
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Search the audit trail.

    user, action and entity are exact-match filters; search is a
    case-insensitive substring match over entity, action, endpoint
    and the name fields of the metadata.
    """
    return AuditLogService(db).search(
        user=user,
        action=action,
        entity=entity,
        search=search,
        page=page,
        limit=limit,
    )
