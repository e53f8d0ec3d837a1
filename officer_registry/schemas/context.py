"""
Who is acting, and through which request.

The principal is verified upstream and forwarded to this
service; it is trusted as-is.
"""

from pydantic import BaseModel


class Principal(BaseModel):
    id: int
    username: str | None = None
    role: str | None = None

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class RequestContext(BaseModel):
    """The actor and originating request of a mutation."""
    actor: Principal | None = None
    method: str | None = None
    endpoint: str | None = None

    model_config = {"frozen": True}
