"""
Gateway API routes.
"""

from fastapi import APIRouter

from zinasite.api.v1.resources import build_routers
from zinasite.data.mapping import ARTICLES, EVENTS
from zinasite.schemas.article import ArticleInput
from zinasite.schemas.event import EventInput

router = APIRouter()

for _spec, _input in ((ARTICLES, ArticleInput), (EVENTS, EventInput)):
    _public, _admin = build_routers(_spec, _input)
    router.include_router(_public, prefix=f"/{_spec.name}", tags=[_spec.label])
    router.include_router(_admin, prefix=f"/admin/{_spec.name}", tags=["Admin"])
