"""
Service-layer errors.

Both subclass ValueError so callers that only care about
"the request was rejected" can keep catching ValueError.
The API layer uses the subclass to pick the status code.
"""


class NotFoundError(ValueError):
    """A referenced officer or evaluation does not exist."""


class RuleViolation(ValueError):
    """The request is well formed but a business rule forbids it."""
