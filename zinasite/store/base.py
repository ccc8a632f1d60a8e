"""
Persistence contract behind the local gateway.

Records are exchanged in the public camelCase shape. Listings come back
filtered by status and in the resource's display order.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Protocol

from pydantic import TypeAdapter

_datetime = TypeAdapter(datetime)


class RecordStore(Protocol):
    name: str

    async def list(
        self, resource: str, status: Optional[str] = None, *, admin: bool = False
    ) -> List[Dict[str, Any]]:
        ...

    async def insert(self, resource: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update(self, resource: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def delete(self, resource: str, record_id: str) -> None:
        ...


def parse_timestamp(value: Any) -> datetime:
    return _datetime.validate_python(value)


def next_timestamp(now: datetime, previous: Any) -> datetime:
    """now, nudged forward so it is strictly later than previous."""
    if previous is None:
        return now
    prev = parse_timestamp(previous)
    if prev.tzinfo is None and now.tzinfo is not None:
        prev = prev.replace(tzinfo=now.tzinfo)
    return now if now > prev else prev + timedelta(microseconds=1)
