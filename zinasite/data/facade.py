"""
Resource facade: one CRUD + paginated-list contract per resource type.

Public reads ask the selector once, then run entirely against the chosen
backend. Admin reads and writes always go to the hosted backend behind the
session guard. Reads degrade to an empty result when the hosted table is not
provisioned yet; writes never do.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

from zinasite.config import Settings, get_settings
from zinasite.data.auth_service import AuthService
from zinasite.data.backend_selector import (
    Backend,
    BackendSelector,
    DeploymentSignals,
    Privilege,
)
from zinasite.data.client_registry import (
    ClientRegistry,
    HostedClientProvider,
    default_registry,
)
from zinasite.data.errors import BackendFailure, RelationMissing
from zinasite.data.gateway_client import GatewayClient
from zinasite.data.hosted import HostedTable, install_supabase
from zinasite.data.mapping import ARTICLES, EVENTS, SERVER_FIELDS, ResourceSpec
from zinasite.data.pagination import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, compute_window, slice_window
from zinasite.data.session_guard import SessionGuard
from zinasite.logging_config import get_logger, log_context
from zinasite.schemas.article import Article
from zinasite.schemas.common import ResultPage
from zinasite.schemas.event import Event

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)
RecordInput = Union[Mapping[str, Any], BaseModel]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _public_input(record: RecordInput) -> Dict[str, Any]:
    """Caller input in the public shape, minus fields the data layer owns."""
    if isinstance(record, BaseModel):
        data = record.model_dump(by_alias=True)
    else:
        data = dict(record)
    return {k: v for k, v in data.items() if k not in SERVER_FIELDS}


class ResourceFacade(Generic[T]):
    """
    Uniform access to one resource on whichever backend the selector picks.

    Input is passed through untouched: validation belongs to the gateway and
    the hosted backend, and their rejections surface as ValidationFailed.
    """

    def __init__(
        self,
        spec: ResourceSpec,
        *,
        selector: BackendSelector,
        provider: HostedClientProvider,
        guard: SessionGuard,
        gateway: GatewayClient,
        clock: Clock = utc_now,
    ):
        self.spec = spec
        self.selector = selector
        self.provider = provider
        self.guard = guard
        self.gateway = gateway
        self.clock = clock

    def _parse(self, row: Mapping[str, Any]) -> T:
        return self.spec.parse(row)  # type: ignore[return-value]

    async def _public_table(self) -> HostedTable:
        client = await self.provider.get_client()
        if client is None:
            raise BackendFailure(
                "Hosted backend client is not available", resource=self.spec.name
            )
        return HostedTable(client, self.spec)

    async def _privileged_table(self) -> HostedTable:
        return HostedTable(await self.guard.authorize(), self.spec)

    async def list(self, status: Optional[str] = None) -> List[T]:
        """Public listing, optionally filtered by status."""
        backend = self.selector.select(Privilege.READ_PUBLIC)
        with log_context(backend=backend.value):
            if backend is Backend.HOSTED_DIRECT:
                table = await self._public_table()
                try:
                    rows = await table.fetch(status)
                except RelationMissing:
                    return []
            else:
                rows = await self.gateway.list(self.spec.name, status)
            logger.debug(
                "Fetched %s", self.spec.name,
                extra={"resource": self.spec.name, "count": len(rows)},
            )
        return [self._parse(row) for row in rows]

    async def list_all(self) -> List[T]:
        """Admin listing of every record regardless of status."""
        with log_context(backend=Backend.HOSTED_DIRECT.value):
            table = await self._privileged_table()
            try:
                rows = await table.fetch(admin=True)
            except RelationMissing:
                return []
        return [self._parse(row) for row in rows]

    async def get_page(
        self,
        status: Optional[str] = "published",
        page: Any = DEFAULT_PAGE,
        page_size: Any = DEFAULT_PAGE_SIZE,
    ) -> ResultPage[T]:
        """One page of the public listing plus the total matching count."""
        window = compute_window(page, page_size)
        backend = self.selector.select(Privilege.READ_PUBLIC)
        with log_context(backend=backend.value):
            if backend is Backend.HOSTED_DIRECT:
                table = await self._public_table()
                try:
                    rows, total = await table.fetch_range(status, window)
                except RelationMissing:
                    return ResultPage.empty()
                items = [self._parse(row) for row in rows]
            else:
                records = await self.gateway.list(self.spec.name, status)
                items, total = slice_window([self._parse(r) for r in records], window)
        return ResultPage(items=items, total=total)

    async def create(self, record: RecordInput) -> T:
        with log_context(backend=Backend.HOSTED_DIRECT.value):
            table = await self._privileged_table()
            payload = _public_input(record)
            now = self.clock()
            payload["createdAt"] = now
            payload["updatedAt"] = now
            created = self._parse(await table.insert(self.spec.mapping.to_persisted(payload)))
            logger.info(
                "%s created", self.spec.label,
                extra={"resource": self.spec.name, "id": getattr(created, "id", None)},
            )
        return created

    async def update(self, record_id: str, record: RecordInput) -> T:
        with log_context(backend=Backend.HOSTED_DIRECT.value):
            table = await self._privileged_table()
            payload = _public_input(record)
            payload["updatedAt"] = self.clock()
            row = await table.update(record_id, self.spec.mapping.to_persisted(payload))
            logger.info("%s updated", self.spec.label, extra={"resource": self.spec.name, "id": record_id})
        return self._parse(row)

    async def delete(self, record_id: str) -> None:
        with log_context(backend=Backend.HOSTED_DIRECT.value):
            table = await self._privileged_table()
            await table.delete(record_id)
            logger.info("%s deleted", self.spec.label, extra={"resource": self.spec.name, "id": record_id})


class DataService:
    """
    Wires one data access layer: signals, the shared client provider, the
    selector, the session guard, the gateway client and a facade per resource.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        signals: Optional[DeploymentSignals] = None,
        registry: Optional[ClientRegistry] = None,
        provider: Optional[HostedClientProvider] = None,
        gateway: Optional[GatewayClient] = None,
        clock: Clock = utc_now,
    ):
        settings = settings or get_settings()
        self.settings = settings
        self.signals = signals or DeploymentSignals.from_settings(settings)
        self.provider = provider or HostedClientProvider(
            settings.supabase_url,
            settings.supabase_anon_key,
            registry,
            wait_interval=settings.client_wait_interval,
            wait_attempts=settings.client_wait_attempts,
        )
        self.gateway = gateway or GatewayClient(
            settings.gateway_base_url, timeout=settings.gateway_timeout
        )
        self.selector = BackendSelector(
            self.signals,
            lambda: self.provider.peek() is not None,
            admin_surface_reads_hosted=settings.admin_surface_reads_hosted,
        )
        self.guard = SessionGuard(self.provider)
        self.auth = AuthService(self.provider)

        shared = dict(
            selector=self.selector,
            provider=self.provider,
            guard=self.guard,
            gateway=self.gateway,
            clock=clock,
        )
        self.articles: ResourceFacade[Article] = ResourceFacade(ARTICLES, **shared)
        self.events: ResourceFacade[Event] = ResourceFacade(EVENTS, **shared)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DataService":
        """Production wiring: the process-wide registry with the supabase factory installed."""
        install_supabase(default_registry)
        return cls(settings, registry=default_registry)

    async def aclose(self) -> None:
        await self.gateway.aclose()
        await self.provider.registry.close()
