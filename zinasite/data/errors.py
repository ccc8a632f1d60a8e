"""
Typed failure conditions raised by the data access layer.

A missing hosted client is deliberately absent here: the client provider
reports it by returning None so callers can pick another path.
"""

from typing import Optional


class DataAccessError(Exception):
    """Base class for every condition surfaced by a resource operation."""

    status_code: int = 500
    code: str = "backend_failure"

    def __init__(self, message: str, *, resource: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.resource = resource


class NotAuthenticated(DataAccessError):
    """Privileged operation attempted without an active session."""

    status_code = 401
    code = "not_authenticated"

    def __init__(self, message: str = "Not authenticated. Please log in again.", **kwargs):
        super().__init__(message, **kwargs)


class NotFound(DataAccessError):
    """Update or delete targeted a record that does not exist."""

    status_code = 404
    code = "not_found"


class ValidationFailed(DataAccessError):
    """Required field missing or status outside {draft, published}."""

    status_code = 400
    code = "validation_failed"


class RelationMissing(DataAccessError):
    """The backing table has not been provisioned yet."""

    status_code = 503
    code = "relation_missing"


class BackendFailure(DataAccessError):
    """Any other network or backend error; the underlying message is kept."""

    status_code = 502
    code = "backend_failure"
