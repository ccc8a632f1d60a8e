"""
Field-name translation between the public (camelCase) shape and the hosted
backend's persisted (snake_case) columns.

Each resource has one FieldMapping. to_persisted and from_persisted are pure
and inverse on every defined field, so they are testable without a network.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from zinasite.schemas.article import Article
from zinasite.schemas.event import Event

# Fields the data layer stamps itself; never taken from caller input
SERVER_FIELDS = ("id", "createdAt", "updatedAt")


@dataclass(frozen=True)
class FieldMapping:
    """Total one-to-one map of public field name -> persisted column."""

    pairs: Tuple[Tuple[str, str], ...]

    @property
    def public_fields(self) -> Tuple[str, ...]:
        return tuple(public for public, _ in self.pairs)

    def to_persisted(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Public shape -> persisted row. Unknown keys are dropped."""
        return {
            persisted: record[public]
            for public, persisted in self.pairs
            if public in record
        }

    def from_persisted(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Persisted row -> public shape.

        Rows that already carry public names (gateway payloads) pass through,
        so the same parser serves both backends.
        """
        record: Dict[str, Any] = {}
        for public, persisted in self.pairs:
            if persisted in row:
                record[public] = row[persisted]
            elif public in row:
                record[public] = row[public]
        return record


@dataclass(frozen=True)
class ResourceSpec:
    """Everything the facade needs to know about one resource type."""

    name: str  # table name and gateway path segment
    label: str  # singular, for messages
    model: Type[BaseModel]
    mapping: FieldMapping
    order_column: str
    order_descending: bool
    # Admin listings may sort differently; None means the public order
    admin_order_descending: Optional[bool] = None

    def parse(self, row: Mapping[str, Any]) -> BaseModel:
        return self.model.model_validate(self.mapping.from_persisted(row))

    def descending(self, admin: bool = False) -> bool:
        if admin and self.admin_order_descending is not None:
            return self.admin_order_descending
        return self.order_descending

    def order_key(self) -> str:
        """Public name of the order column."""
        for public, persisted in self.mapping.pairs:
            if persisted == self.order_column:
                return public
        return self.order_column


ARTICLE_MAPPING = FieldMapping(pairs=(
    ("id", "id"),
    ("title", "title"),
    ("content", "content"),
    ("status", "status"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
))

EVENT_MAPPING = FieldMapping(pairs=(
    ("id", "id"),
    ("title", "title"),
    ("description", "description"),
    ("startDate", "start_date"),
    ("endDate", "end_date"),
    ("location", "location"),
    ("registrationUrl", "registration_url"),
    ("status", "status"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
))

ARTICLES = ResourceSpec(
    name="articles",
    label="Article",
    model=Article,
    mapping=ARTICLE_MAPPING,
    order_column="created_at",
    order_descending=True,
)

EVENTS = ResourceSpec(
    name="events",
    label="Event",
    model=Event,
    mapping=EVENT_MAPPING,
    order_column="start_date",
    order_descending=False,
    admin_order_descending=True,
)

RESOURCES = {spec.name: spec for spec in (ARTICLES, EVENTS)}
