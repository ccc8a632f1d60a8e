"""
Session guard for privileged operations.
"""

from typing import Any

from zinasite.data.client_registry import HostedClientProvider
from zinasite.data.errors import BackendFailure, NotAuthenticated
from zinasite.logging_config import get_logger

logger = get_logger(__name__)


async def require_session(client: Any) -> Any:
    """
    Return the active session on client or raise NotAuthenticated.

    A failing session lookup counts as no session.
    """
    try:
        session = await client.auth.get_session()
    except Exception as e:
        logger.warning("Session check failed: %s", e)
        raise NotAuthenticated("Authentication session not found. Please log in again.") from e
    if not session:
        raise NotAuthenticated()
    return session


class SessionGuard:
    """Resolves the shared client and confirms it carries a session."""

    def __init__(self, provider: HostedClientProvider):
        self.provider = provider

    async def authorize(self) -> Any:
        """Shared client with a verified session; no resource I/O happens before this."""
        client = await self.provider.get_client()
        if client is None:
            raise BackendFailure("Hosted backend client is not available")
        await require_session(client)
        return client
