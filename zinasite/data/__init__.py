"""
Environment-adaptive data access layer.

Design rules:
- Pages and the gateway call ONLY the facades exposed here.
- One hosted client per process, shared through ClientRegistry.
- Each call picks exactly one backend, tries it once and reports the outcome.
"""

from zinasite.data.auth_service import AuthService
from zinasite.data.backend_selector import (
    Backend,
    BackendSelector,
    DeploymentSignals,
    Privilege,
    select_backend,
)
from zinasite.data.client_registry import (
    ClientRegistry,
    HostedClientProvider,
    default_registry,
)
from zinasite.data.errors import (
    BackendFailure,
    DataAccessError,
    NotAuthenticated,
    NotFound,
    RelationMissing,
    ValidationFailed,
)
from zinasite.data.facade import DataService, ResourceFacade
from zinasite.data.pagination import PageWindow, compute_window

__all__ = [
    "AuthService",
    "Backend",
    "BackendSelector",
    "DeploymentSignals",
    "Privilege",
    "select_backend",
    "ClientRegistry",
    "HostedClientProvider",
    "default_registry",
    "BackendFailure",
    "DataAccessError",
    "NotAuthenticated",
    "NotFound",
    "RelationMissing",
    "ValidationFailed",
    "DataService",
    "ResourceFacade",
    "PageWindow",
    "compute_window",
]
