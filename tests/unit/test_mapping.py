"""Unit tests for public <-> persisted field mapping."""

from datetime import datetime, timezone

from zinasite.data.mapping import ARTICLES, EVENTS
from zinasite.schemas.article import Article
from zinasite.schemas.event import Event

ARTICLE = {
    "id": "a1",
    "title": "Hi",
    "content": "Body",
    "status": "draft",
    "createdAt": "2026-01-01T00:00:00Z",
    "updatedAt": "2026-01-02T00:00:00Z",
}

EVENT = {
    "id": "e1",
    "title": "Open day",
    "description": None,
    "startDate": "2026-03-01T10:00:00Z",
    "endDate": "2026-03-01T16:00:00Z",
    "location": "Main hall",
    "registrationUrl": "https://example.com/register",
    "status": "published",
    "createdAt": "2026-01-01T00:00:00Z",
    "updatedAt": "2026-01-01T00:00:00Z",
}


class TestFieldMapping:
    """to_persisted / from_persisted are total and inverse."""

    def test_article_round_trip(self):
        assert ARTICLES.mapping.from_persisted(ARTICLES.mapping.to_persisted(ARTICLE)) == ARTICLE

    def test_event_round_trip(self):
        assert EVENTS.mapping.from_persisted(EVENTS.mapping.to_persisted(EVENT)) == EVENT

    def test_persisted_names_are_snake_case(self):
        row = EVENTS.mapping.to_persisted(EVENT)
        assert row["start_date"] == EVENT["startDate"]
        assert row["registration_url"] == EVENT["registrationUrl"]
        assert "startDate" not in row

    def test_every_model_field_is_mapped(self):
        for spec in (ARTICLES, EVENTS):
            aliases = {f.alias for f in spec.model.model_fields.values()}
            assert aliases == set(spec.mapping.public_fields)

    def test_partial_record_maps_only_defined_fields(self):
        row = ARTICLES.mapping.to_persisted({"title": "Only title"})
        assert row == {"title": "Only title"}

    def test_parse_accepts_gateway_shape(self):
        """Public names pass through so one parser serves both backends."""
        assert ARTICLES.parse(ARTICLE) == ARTICLES.parse(ARTICLES.mapping.to_persisted(ARTICLE))

    def test_parse_builds_models(self):
        article = ARTICLES.parse(ARTICLES.mapping.to_persisted(ARTICLE))
        assert isinstance(article, Article)
        assert article.created_at == datetime(2026, 1, 1, tzinfo=timezone.utc)

        event = EVENTS.parse(EVENTS.mapping.to_persisted(EVENT))
        assert isinstance(event, Event)
        assert event.to_public()["registrationUrl"] == "https://example.com/register"
