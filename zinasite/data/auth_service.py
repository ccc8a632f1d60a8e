"""
Authentication service on the hosted backend's auth subsystem.

Always goes through the shared client so sign-in here is the session the
data facades see.
"""

from typing import Any, Callable, Optional

import httpx
from supabase import AuthError, AuthRetryableError

from zinasite.data.client_registry import HostedClientProvider
from zinasite.data.errors import BackendFailure, NotAuthenticated
from zinasite.logging_config import get_logger

logger = get_logger(__name__)


class AuthService:
    """Sign-in, sign-out and session lookup for admins."""

    def __init__(self, provider: HostedClientProvider):
        self.provider = provider

    async def _client(self) -> Any:
        client = await self.provider.get_client()
        if client is None:
            raise BackendFailure("Hosted backend client is not available")
        return client

    async def get_session(self) -> Optional[Any]:
        """Current session, or None when signed out or the lookup fails."""
        client = await self.provider.get_client()
        if client is None:
            return None
        try:
            return await client.auth.get_session()
        except Exception as e:
            logger.error("Error getting session: %s", e)
            return None

    async def get_current_user(self) -> Optional[Any]:
        session = await self.get_session()
        return getattr(session, "user", None) if session else None

    async def sign_in(self, email: str, password: str) -> Any:
        """
        Sign in with email and password.

        Returns:
            The auth response (user and session)

        Raises:
            NotAuthenticated: If the credentials are rejected
            BackendFailure: If no client could be obtained or the auth service
                is unreachable
        """
        client = await self._client()
        try:
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (AuthRetryableError, httpx.HTTPError) as e:
            logger.error("Auth service unreachable during sign in: %s", e)
            raise BackendFailure(str(e) or type(e).__name__) from e
        except AuthError as e:
            logger.warning("Sign in failed: %s", e, extra={"email": email})
            raise NotAuthenticated(str(e) or "Invalid login credentials") from e
        logger.info("Signed in", extra={"email": email})
        return response

    async def sign_out(self) -> None:
        client = await self._client()
        await client.auth.sign_out()
        logger.info("Signed out")

    def on_auth_state_change(self, callback: Callable[[str, Optional[Any]], None]) -> Optional[Any]:
        """Subscribe to auth changes; None when no client has been built yet."""
        client = self.provider.peek()
        if client is None:
            logger.warning("Hosted client not initialized, cannot listen to auth changes")
            return None
        return client.auth.on_auth_state_change(callback)
