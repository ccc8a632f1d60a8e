"""
FastAPI dependencies for the gateway.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Request

from zinasite.config import get_settings
from zinasite.store import RecordStore, build_store


@lru_cache
def get_store() -> RecordStore:
    """Process-wide store chosen from settings."""
    return build_store(get_settings())


Store = Annotated[RecordStore, Depends(get_store)]


def get_request_id(request: Request) -> Optional[str]:
    """Get request correlation ID (set by RequestIdMiddleware)."""
    return getattr(request.state, "request_id", None)
