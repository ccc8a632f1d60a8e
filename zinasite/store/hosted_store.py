"""
Proxy store: the gateway forwards to the hosted backend with the service key.

Uses its own ClientRegistry so the elevated client never mixes with a
reader's anonymous one.
"""

from typing import Any, Callable, Dict, List, Optional

from zinasite.data.client_registry import ClientRegistry, HostedClientProvider
from zinasite.data.errors import BackendFailure, RelationMissing
from zinasite.data.facade import utc_now
from zinasite.data.hosted import HostedTable, install_supabase
from zinasite.data.mapping import RESOURCES


class HostedStore:
    name = "hosted"

    def __init__(self, provider: HostedClientProvider, clock: Optional[Callable[[], Any]] = None):
        self.provider = provider
        self.clock = clock or utc_now

    @classmethod
    def with_service_key(cls, url: str, service_key: str) -> "HostedStore":
        registry = ClientRegistry()
        install_supabase(registry)
        return cls(HostedClientProvider(url, service_key, registry))

    async def _table(self, resource: str) -> HostedTable:
        client = await self.provider.get_client()
        if client is None:
            raise BackendFailure("Hosted backend client is not available", resource=resource)
        return HostedTable(client, RESOURCES[resource])

    async def list(
        self, resource: str, status: Optional[str] = None, *, admin: bool = False
    ) -> List[Dict[str, Any]]:
        table = await self._table(resource)
        try:
            rows = await table.fetch(status, admin=admin)
        except RelationMissing:
            return []
        mapping = RESOURCES[resource].mapping
        return [mapping.from_persisted(row) for row in rows]

    async def insert(self, resource: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        mapping = RESOURCES[resource].mapping
        now = self.clock()
        row = mapping.to_persisted({**fields, "createdAt": now, "updatedAt": now})
        table = await self._table(resource)
        return mapping.from_persisted(await table.insert(row))

    async def update(self, resource: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        mapping = RESOURCES[resource].mapping
        row = mapping.to_persisted({**fields, "updatedAt": self.clock()})
        table = await self._table(resource)
        return mapping.from_persisted(await table.update(record_id, row))

    async def delete(self, resource: str, record_id: str) -> None:
        table = await self._table(resource)
        await table.delete(record_id)
