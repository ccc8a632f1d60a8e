"""
CRUD endpoints, one set per resource, mirroring the facade's contract.
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Query, Response, status

from zinasite.api.deps import Store
from zinasite.data.mapping import ResourceSpec
from zinasite.logging_config import get_logger
from zinasite.schemas.common import CamelModel, ResourceStatus

logger = get_logger(__name__)


def build_routers(spec: ResourceSpec, input_model: Type[CamelModel]) -> tuple[APIRouter, APIRouter]:
    """Public router (/{resource}) and admin router (/admin/{resource}) for spec."""
    router = APIRouter()
    admin_router = APIRouter()
    record_model = spec.model
    resource = spec.name

    @router.get("", response_model=List[record_model])
    async def list_records(
        store: Store,
        status_filter: Optional[ResourceStatus] = Query(None, alias="status"),
    ):
        """List records, optionally filtered by status."""
        return await store.list(resource, status_filter.value if status_filter else None)

    @admin_router.get("", response_model=List[record_model])
    async def list_all_records(store: Store):
        """List every record regardless of status."""
        return await store.list(resource, admin=True)

    @router.post("", response_model=record_model, status_code=status.HTTP_201_CREATED)
    async def create_record(data: input_model, store: Store):  # type: ignore[valid-type]
        record = await store.insert(resource, data.to_public())
        logger.info("%s created", spec.label, extra={"resource": resource, "id": record["id"]})
        return record

    @router.put("/{record_id}", response_model=record_model)
    async def update_record(record_id: str, data: input_model, store: Store):  # type: ignore[valid-type]
        return await store.update(resource, record_id, data.to_public())

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(record_id: str, store: Store):
        await store.delete(resource, record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router, admin_router
