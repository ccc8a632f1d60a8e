"""
Client singleton manager for the hosted backend.

One ClientRegistry per process holds the only authenticated client handle.
Every module that needs the hosted backend (data facades, auth service) asks a
HostedClientProvider, which adopts the handle already in the registry or
builds it once. Two independent handles would mean two desynchronized
sessions, so construction is serialized by the registry's lock.

Lifecycle:
- The client library becomes usable when a factory is installed
  (install_factory). Until then get_client() polls at a fixed interval for a
  bounded number of attempts and returns None on timeout.
- The handle is created on first demand and lives until close().
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from zinasite.logging_config import get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[str, str], Awaitable[Any]]

DEFAULT_WAIT_INTERVAL = 0.1  # seconds
DEFAULT_WAIT_ATTEMPTS = 50  # 5 seconds total


class ClientRegistry:
    """Shared slot for the hosted client handle and the factory that builds it."""

    def __init__(self) -> None:
        self._client: Optional[Any] = None
        self._factory: Optional[ClientFactory] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def client(self) -> Optional[Any]:
        return self._client

    @property
    def factory(self) -> Optional[ClientFactory]:
        return self._factory

    @property
    def lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def install_factory(self, factory: ClientFactory) -> None:
        """Mark the client library as loaded."""
        self._factory = factory

    def publish(self, client: Any) -> Any:
        """Store a handle unless one exists; returns whichever handle wins."""
        if self._client is None:
            self._client = client
            logger.info("Hosted client created and shared")
        return self._client

    async def close(self) -> None:
        """Teardown boundary: drop the handle so the next demand builds a new one."""
        client, self._client = self._client, None
        if client is None:
            return
        close = getattr(client, "aclose", None)
        if close is not None:
            await close()
        logger.info("Hosted client released")


# Process-wide registry used unless a caller injects its own
default_registry = ClientRegistry()


class HostedClientProvider:
    """
    Hands out the shared hosted client.

    Args:
        url: Hosted backend endpoint
        key: Public (anon) key, or the service key in gateway proxy mode
        registry: Slot to share the handle through
        wait_interval: Seconds between library-readiness checks
        wait_attempts: Maximum readiness checks before giving up
    """

    def __init__(
        self,
        url: str,
        key: str,
        registry: Optional[ClientRegistry] = None,
        *,
        wait_interval: float = DEFAULT_WAIT_INTERVAL,
        wait_attempts: int = DEFAULT_WAIT_ATTEMPTS,
    ):
        self.url = url
        self.key = key
        self.registry = registry if registry is not None else default_registry
        self.wait_interval = wait_interval
        self.wait_attempts = wait_attempts

    def peek(self) -> Optional[Any]:
        """The handle if one is already built, without waiting or building."""
        return self.registry.client

    async def get_client(self) -> Optional[Any]:
        """Return the shared handle, building it on first call. None if unavailable."""
        existing = self.registry.client
        if existing is not None:
            return existing

        factory = await self._wait_for_factory()
        if factory is None:
            logger.warning(
                "Hosted client library not available",
                extra={"waited_s": self.wait_interval * self.wait_attempts},
            )
            return None

        async with self.registry.lock:
            # Another module may have built it while we waited for the lock
            existing = self.registry.client
            if existing is not None:
                return existing
            try:
                client = await factory(self.url, self.key)
            except Exception as e:
                logger.error("Hosted client construction failed: %s", e)
                return None
            return self.registry.publish(client)

    async def _wait_for_factory(self) -> Optional[ClientFactory]:
        for _ in range(self.wait_attempts):
            if self.registry.factory is not None:
                return self.registry.factory
            await asyncio.sleep(self.wait_interval)
        return self.registry.factory
