"""
Pytest fixtures for ZinaSite tests.

FakeHostedClient speaks the subset of the supabase async client used by
zinasite.data.hosted and zinasite.data.auth_service, backed by in-memory tables.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from postgrest.exceptions import APIError
from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python
from supabase import AuthApiError

from zinasite.api.deps import get_store
from zinasite.config import Settings
from zinasite.data.client_registry import ClientRegistry, HostedClientProvider
from zinasite.data.facade import DataService
from zinasite.data.gateway_client import GatewayClient
from zinasite.main import app
from zinasite.store.json_store import JsonFileStore

_timestamp = TypeAdapter(datetime)


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


class FakeQuery:
    """Records builder calls and applies them on execute()."""

    def __init__(self, client: "FakeHostedClient", table: str):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload: Optional[Dict[str, Any]] = None
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None
        self.bounds: Optional[tuple] = None
        self.count: Optional[str] = None
        self.head = False

    def select(self, *columns: str, count: Optional[str] = None, head: bool = False) -> "FakeQuery":
        self.count, self.head = count, head
        return self

    def insert(self, row: Dict[str, Any]) -> "FakeQuery":
        self.op, self.payload = "insert", row
        return self

    def update(self, row: Dict[str, Any]) -> "FakeQuery":
        self.op, self.payload = "update", row
        return self

    def delete(self) -> "FakeQuery":
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str, *, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.bounds = (start, end)
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self) -> SimpleNamespace:
        self.client.calls.append((self.table, self.op))
        if self.table in self.client.missing_tables:
            raise APIError({
                "message": f'relation "public.{self.table}" does not exist',
                "code": "42P01",
            })
        if self.client.fail_with is not None:
            raise self.client.fail_with

        rows = self.client.tables.setdefault(self.table, [])
        if self.op == "insert":
            status = self.payload.get("status")
            if status not in ("draft", "published"):
                raise APIError({
                    "message": "new row violates check constraint",
                    "code": "23514",
                })
            row = {"id": uuid.uuid4().hex, **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)], count=None)
        if self.op == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(dict(row))
            return SimpleNamespace(data=changed, count=None)
        if self.op == "delete":
            removed = [dict(r) for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed, count=None)

        selected = [dict(r) for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda r: _timestamp.validate_python(r[column]), reverse=desc)
        total = len(selected)
        if self.head:
            selected = []
        if self.bounds:
            start, end = self.bounds
            if start > 0 and start >= total:
                # PostgREST answers 416 for a range past the last row
                raise APIError({
                    "message": "Requested range not satisfiable",
                    "code": "PGRST103",
                    "details": f"An offset of {start} was requested, but there are only {total} rows.",
                })
            selected = selected[start:end + 1]
        return SimpleNamespace(data=selected, count=total if self.count == "exact" else None)


class FakeAuth:
    def __init__(self) -> None:
        self.session: Optional[SimpleNamespace] = None
        self.fail = False
        self.unreachable = False
        self.password = "correct-horse"
        self.listeners: List[Any] = []

    async def get_session(self) -> Optional[SimpleNamespace]:
        if self.fail:
            raise RuntimeError("session storage unavailable")
        return self.session

    async def sign_in_with_password(self, credentials: Dict[str, str]) -> SimpleNamespace:
        if self.unreachable:
            raise httpx.ConnectError("connection refused")
        if credentials["password"] != self.password:
            raise AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        user = SimpleNamespace(email=credentials["email"])
        self.session = SimpleNamespace(access_token="token", user=user)
        return SimpleNamespace(user=user, session=self.session)

    async def sign_out(self) -> None:
        self.session = None

    def on_auth_state_change(self, callback: Any) -> SimpleNamespace:
        self.listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.listeners.remove(callback))


class FakeHostedClient:
    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.missing_tables: set = set()
        self.fail_with: Optional[Exception] = None
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def sign_in_as_admin(self) -> None:
        self.auth.session = SimpleNamespace(
            access_token="token", user=SimpleNamespace(email="admin@example.com")
        )

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> None:
        self.tables[table] = [to_jsonable_python(r) for r in rows]


def make_settings(**overrides: Any) -> Settings:
    values = dict(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        site_host="localhost",
        site_path="/",
        client_wait_interval=0.001,
        client_wait_attempts=3,
        gateway_base_url="http://gateway",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def hosted_client() -> FakeHostedClient:
    return FakeHostedClient()


@pytest.fixture
def registry() -> ClientRegistry:
    return ClientRegistry()


@pytest.fixture
def provider(registry: ClientRegistry) -> HostedClientProvider:
    return HostedClientProvider(
        "https://example.supabase.co", "anon-key", registry,
        wait_interval=0.001, wait_attempts=3,
    )


@pytest.fixture
def file_store(tmp_path, clock: TickingClock) -> JsonFileStore:
    return JsonFileStore(tmp_path / "data", clock=clock)


@pytest_asyncio.fixture
async def gateway_http(file_store: JsonFileStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired straight into the gateway app, backed by a temp file store."""
    app.dependency_overrides[get_store] = lambda: file_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://gateway") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def hosted_service(
    registry: ClientRegistry,
    hosted_client: FakeHostedClient,
    clock: TickingClock,
    gateway_http: AsyncClient,
) -> AsyncGenerator[DataService, None]:
    """Server-backed deployment where the hosted client is already built."""
    registry.publish(hosted_client)
    service = DataService(
        make_settings(),
        registry=registry,
        gateway=GatewayClient(http=gateway_http),
        clock=clock,
    )
    yield service
    await service.aclose()


@pytest_asyncio.fixture
async def gateway_service(
    registry: ClientRegistry,
    clock: TickingClock,
    gateway_http: AsyncClient,
) -> AsyncGenerator[DataService, None]:
    """Server-backed deployment with no hosted client: public reads use the gateway."""
    service = DataService(
        make_settings(),
        registry=registry,
        gateway=GatewayClient(http=gateway_http),
        clock=clock,
    )
    yield service
    await service.aclose()
