"""
Flat-file store: one JSON array per resource under the data directory.
"""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic_core import to_jsonable_python

from zinasite.data.errors import NotFound
from zinasite.data.facade import utc_now
from zinasite.data.mapping import RESOURCES
from zinasite.logging_config import get_logger
from zinasite.store.base import next_timestamp, parse_timestamp

logger = get_logger(__name__)


class JsonFileStore:
    """Reads and rewrites the whole file per call; writes are serialized."""

    name = "file"

    def __init__(self, data_dir: str | Path, clock: Optional[Callable[[], Any]] = None):
        self.data_dir = Path(data_dir)
        self.clock = clock or utc_now
        self._lock = asyncio.Lock()

    def _path(self, resource: str) -> Path:
        return self.data_dir / f"{resource}.json"

    def _read(self, resource: str) -> List[Dict[str, Any]]:
        path = self._path(resource)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")
            logger.info("Created data file", extra={"path": str(path)})
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def _write(self, resource: str, records: List[Dict[str, Any]]) -> None:
        self._path(resource).write_text(json.dumps(records, indent=2), encoding="utf-8")

    async def list(
        self, resource: str, status: Optional[str] = None, *, admin: bool = False
    ) -> List[Dict[str, Any]]:
        spec = RESOURCES[resource]
        records = [r for r in self._read(resource) if not status or r.get("status") == status]
        key = spec.order_key()
        records.sort(key=lambda r: parse_timestamp(r[key]), reverse=spec.descending(admin))
        return records

    async def insert(self, resource: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            records = self._read(resource)
            now = to_jsonable_python(self.clock())
            record = {"id": uuid.uuid4().hex, **fields, "createdAt": now, "updatedAt": now}
            records.insert(0, record)
            self._write(resource, records)
        return record

    async def update(self, resource: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            records = self._read(resource)
            for index, existing in enumerate(records):
                if existing.get("id") == record_id:
                    break
            else:
                raise NotFound(f"{RESOURCES[resource].label} not found.", resource=resource)
            updated_at = next_timestamp(self.clock(), existing.get("updatedAt"))
            record = {**existing, **fields, "updatedAt": to_jsonable_python(updated_at)}
            records[index] = record
            self._write(resource, records)
        return record

    async def delete(self, resource: str, record_id: str) -> None:
        async with self._lock:
            records = self._read(resource)
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                raise NotFound(f"{RESOURCES[resource].label} not found.", resource=resource)
            self._write(resource, remaining)
