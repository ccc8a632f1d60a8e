"""
Event schemas.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from zinasite.schemas.common import CamelModel, ResourceStatus


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class EventInput(CamelModel):
    """Event create/update request, validated by the gateway."""

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    registration_url: Optional[str] = None
    status: ResourceStatus

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "EventInput":
        if self.end_date is not None and _as_utc(self.end_date) < _as_utc(self.start_date):
            raise ValueError("endDate must not be earlier than startDate")
        return self


class Event(CamelModel):
    """Event as returned to readers and admins."""

    id: str
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    registration_url: Optional[str] = None
    status: ResourceStatus
    created_at: datetime
    updated_at: datetime
