"""
FastAPI dependencies: the acting principal, the request context
and the process-wide audit recorder and cache gateway.

The recorder and the cache are created at startup and kept on
``app.state``. Handlers receive them through these functions, so
tests swap them out with ``app.dependency_overrides``.
"""

from fastapi import Depends, Header, HTTPException, Request

from officer_registry.schemas.context import Principal, RequestContext
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway


def get_audit_recorder(request: Request) -> AuditRecorder:
    return request.app.state.audit_recorder


def get_cache(request: Request) -> CacheGateway:
    return request.app.state.cache


def get_principal(
    x_user_id: int | None = Header(default=None),
    x_username: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Principal | None:
    """
    Read the principal forwarded by the authenticating gateway.

    Token verification happens upstream; the identity headers are
    trusted as-is.
    """
    if x_user_id is None:
        return None
    return Principal(id=x_user_id, username=x_username, role=x_user_role)


def require_principal(
    principal: Principal | None = Depends(get_principal),
) -> Principal:
    if principal is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return principal


def require_admin(
    principal: Principal = Depends(require_principal),
) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return principal


def get_request_context(
    request: Request,
    principal: Principal = Depends(require_principal),
) -> RequestContext:
    return RequestContext(
        actor=principal,
        method=request.method,
        endpoint=request.url.path,
    )


def get_admin_context(
    request: Request,
    principal: Principal = Depends(require_admin),
) -> RequestContext:
    return RequestContext(
        actor=principal,
        method=request.method,
        endpoint=request.url.path,
    )
