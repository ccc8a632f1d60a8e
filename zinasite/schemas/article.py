"""
Article schemas.
"""

from datetime import datetime

from pydantic import Field

from zinasite.schemas.common import CamelModel, ResourceStatus


class ArticleInput(CamelModel):
    """Article create/update request, validated by the gateway."""
    
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    status: ResourceStatus


class Article(CamelModel):
    """Article as returned to readers and admins."""
    
    id: str
    title: str
    content: str
    status: ResourceStatus
    created_at: datetime
    updated_at: datetime
