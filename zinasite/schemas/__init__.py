"""
Pydantic schemas for records and gateway request/response validation.
"""

from zinasite.schemas.common import (
    CamelModel,
    ErrorResponse,
    HealthResponse,
    ResourceStatus,
    ResultPage,
)
from zinasite.schemas.article import Article, ArticleInput
from zinasite.schemas.event import Event, EventInput

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "ResourceStatus",
    "ResultPage",
    # Article
    "Article",
    "ArticleInput",
    # Event
    "Event",
    "EventInput",
]
