"""
Common schema types shared by both resources and the gateway API.
"""

from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ResourceStatus(str, Enum):
    """Publication state of an article or event."""

    DRAFT = "draft"
    PUBLISHED = "published"


class CamelModel(BaseModel):
    """Public shape: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_public(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class ErrorResponse(BaseModel):
    """Standard error response."""
    
    detail: str
    code: Optional[str] = None
    request_id: Optional[str] = None


class ResultPage(BaseModel, Generic[T]):
    """One page of a listing plus the total across all pages."""
    
    items: List[T]
    total: int

    @classmethod
    def empty(cls) -> "ResultPage[T]":
        return cls(items=[], total=0)


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = "ok"
    version: str
    store: str
