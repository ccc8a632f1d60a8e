"""
Hosted backend table access (supabase / PostgREST).

HostedTable speaks persisted (snake_case) rows only; translating to the
public shape is the facade's job. Every backend error is logged here, where
it happens, and re-raised as a typed DataAccessError.
"""

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import httpx
from postgrest.exceptions import APIError
from pydantic_core import to_jsonable_python
from supabase import acreate_client

from zinasite.data.client_registry import ClientRegistry
from zinasite.data.errors import (
    BackendFailure,
    DataAccessError,
    NotFound,
    RelationMissing,
    ValidationFailed,
)
from zinasite.data.mapping import ResourceSpec
from zinasite.data.pagination import PageWindow
from zinasite.logging_config import get_logger

logger = get_logger(__name__)

# Postgres / PostgREST error codes
RELATION_MISSING_CODES = frozenset({"42P01", "PGRST205"})
VALIDATION_CODES = frozenset({"23502", "23514", "22P02", "22007", "22008"})
NOT_FOUND_CODES = frozenset({"PGRST116"})
RANGE_NOT_SATISFIABLE_CODES = frozenset({"PGRST103"})


def install_supabase(registry: ClientRegistry) -> None:
    """Make the supabase async client factory available to the registry."""
    registry.install_factory(acreate_client)


def classify_api_error(error: APIError, resource: Optional[str] = None) -> DataAccessError:
    """Map a PostgREST error onto the typed conditions."""
    code = str(error.code or "")
    message = error.message or str(error)
    if code in RELATION_MISSING_CODES or "does not exist" in message:
        return RelationMissing(message, resource=resource)
    if code in VALIDATION_CODES:
        return ValidationFailed(message, resource=resource)
    if code in NOT_FOUND_CODES:
        return NotFound(message, resource=resource)
    return BackendFailure(message, resource=resource)


class HostedTable:
    """Query one resource's table through the shared hosted client."""

    def __init__(self, client: Any, spec: ResourceSpec):
        self.client = client
        self.spec = spec

    def _select(
        self,
        status: Optional[str],
        *,
        count: Optional[str] = None,
        admin: bool = False,
    ):
        query = self.client.table(self.spec.name).select("*", count=count)
        if status:
            query = query.eq("status", status)
        return query.order(self.spec.order_column, desc=self.spec.descending(admin))

    async def fetch(self, status: Optional[str] = None, *, admin: bool = False) -> List[Dict[str, Any]]:
        """All rows, optionally filtered by status, in the resource's order."""
        response = await self._execute(self._select(status, admin=admin), "fetch")
        return list(response.data or [])

    async def count(self, status: Optional[str] = None) -> int:
        """Exact number of rows matching status, without fetching them."""
        query = self.client.table(self.spec.name).select("*", count="exact", head=True)
        if status:
            query = query.eq("status", status)
        response = await self._execute(query, "count")
        return response.count or 0

    async def fetch_range(
        self,
        status: Optional[str],
        window: PageWindow,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Rows [offset, offset+limit-1] plus the exact total in one round trip.

        A window starting past the last row is answered with 416 by PostgREST;
        that page is empty and the total comes from a head-only count.
        """
        query = self._select(status, count="exact").range(window.offset, window.last_index)
        try:
            response = await self._execute(query, "fetch page", passthrough=RANGE_NOT_SATISFIABLE_CODES)
        except APIError:
            return [], await self.count(status)
        return list(response.data or []), response.count or 0

    async def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        query = self.client.table(self.spec.name).insert(to_jsonable_python(row))
        response = await self._execute(query, "create")
        if not response.data:
            raise BackendFailure(
                f"{self.spec.label} insert returned no row", resource=self.spec.name
            )
        return response.data[0]

    async def update(self, record_id: str, row: Dict[str, Any]) -> Dict[str, Any]:
        query = (
            self.client.table(self.spec.name)
            .update(to_jsonable_python(row))
            .eq("id", record_id)
        )
        response = await self._execute(query, "update")
        if not response.data:
            raise NotFound(f"{self.spec.label} not found.", resource=self.spec.name)
        return response.data[0]

    async def delete(self, record_id: str) -> None:
        query = self.client.table(self.spec.name).delete().eq("id", record_id)
        response = await self._execute(query, "delete")
        if not response.data:
            raise NotFound(f"{self.spec.label} not found.", resource=self.spec.name)

    async def _execute(
        self,
        query: Any,
        action: str,
        *,
        passthrough: FrozenSet[str] = frozenset(),
    ) -> Any:
        try:
            return await query.execute()
        except APIError as e:
            if str(e.code or "") in passthrough:
                raise
            error = classify_api_error(e, resource=self.spec.name)
            if isinstance(error, RelationMissing):
                logger.warning(
                    "%s table does not exist yet", self.spec.label,
                    extra={"resource": self.spec.name, "action": action},
                )
            else:
                logger.error(
                    "Hosted backend error during %s: %s", action, error.message,
                    extra={"resource": self.spec.name, "code": e.code},
                )
            raise error from e
        except httpx.HTTPError as e:
            logger.error(
                "Hosted backend unreachable during %s: %s", action, e,
                extra={"resource": self.spec.name},
            )
            raise BackendFailure(str(e) or type(e).__name__, resource=self.spec.name) from e
