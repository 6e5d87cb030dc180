"""Tests for content lookups, single-URL creation and cursor pagination."""

import pytest

from perspectize.core.content_service import (
    ContentListParams,
    ContentService,
    _insert_or_update,
    upsert_content_by_url,
)
from perspectize.core.errors import (
    AlreadyExistsError,
    InvalidInputError,
    InvalidURLError,
    NotFoundError,
)
from perspectize.core.pagination import decode_cursor, encode_cursor, validate_page_size


async def _seed(session, rows):
    ids = []
    for name, length in rows:
        content_id, _ = await upsert_content_by_url(
            session,
            url=f"https://youtu.be/{name.replace(' ', '_')}",
            name=name,
            content_type="youtube",
            length=length,
            length_units="seconds",
            response=None
        )
        ids.append(content_id)
    return ids


class TestCursors:
    """Tests for cursor helpers."""

    def test_cursor_format(self):
        """Test that cursors are base64 of cursor:<id>."""
        assert encode_cursor(42) == "Y3Vyc29yOjQy"
        assert decode_cursor("Y3Vyc29yOjQy") == 42

    @pytest.mark.parametrize("cursor", ["not base64!", "aGVsbG8=", "Y3Vyc29yOmFiYw=="])
    def test_invalid_cursor(self, cursor):
        with pytest.raises(InvalidInputError):
            decode_cursor(cursor)

    def test_page_size_bounds(self):
        assert validate_page_size(None) == 10
        assert validate_page_size(100) == 100
        with pytest.raises(InvalidInputError):
            validate_page_size(0)
        with pytest.raises(InvalidInputError):
            validate_page_size(101)


class TestContentService:
    """Tests for ContentService."""

    @pytest.mark.asyncio
    async def test_create_from_youtube(self, session, youtube_client, fake_youtube):
        fake_youtube.add_video("abc123", "Single Video", duration="PT10M")

        content = await ContentService(session, youtube_client).create_from_youtube(
            "https://www.youtube.com/watch?v=abc123"
        )

        assert content.id > 0
        assert content.name == "Single Video"
        assert content.length == 600
        assert content.length_units == "seconds"

    @pytest.mark.asyncio
    async def test_create_from_youtube_rejects_existing_url(self, session, youtube_client, fake_youtube):
        """Test that single-URL creation refuses an already catalogued URL."""
        fake_youtube.add_video("abc123", "Single Video")
        service = ContentService(session, youtube_client)
        await service.create_from_youtube("https://youtu.be/abc123")

        with pytest.raises(AlreadyExistsError, match="already exists"):
            await service.create_from_youtube("https://youtu.be/abc123")

    @pytest.mark.asyncio
    async def test_create_from_youtube_name_conflict(self, session, youtube_client, fake_youtube):
        fake_youtube.add_video("aaa", "Shared Title")
        fake_youtube.add_video("bbb", "Shared Title")
        service = ContentService(session, youtube_client)
        await service.create_from_youtube("https://youtu.be/aaa")

        with pytest.raises(AlreadyExistsError, match="Shared Title"):
            await service.create_from_youtube("https://youtu.be/bbb")

    @pytest.mark.asyncio
    async def test_create_from_youtube_invalid_url(self, session, youtube_client):
        with pytest.raises(InvalidURLError, match="invalid YouTube URL"):
            await ContentService(session, youtube_client).create_from_youtube("https://example.com")

    @pytest.mark.asyncio
    async def test_get_by_id_and_name(self, session):
        [content_id] = await _seed(session, [("Lookup", 30)])
        service = ContentService(session)

        assert (await service.get_by_id(content_id)).name == "Lookup"
        assert (await service.get_by_name("Lookup")).id == content_id

        with pytest.raises(NotFoundError):
            await service.get_by_id(content_id + 100)
        with pytest.raises(NotFoundError):
            await service.get_by_name("Nope")
        with pytest.raises(InvalidInputError):
            await service.get_by_id(0)
        with pytest.raises(InvalidInputError):
            await service.get_by_name("  ")

    @pytest.mark.asyncio
    async def test_list_pages_through_everything(self, session):
        """Test that following end_cursor visits every row exactly once."""
        ids = await _seed(session, [(f"Video {i}", i * 10) for i in range(5)])
        service = ContentService(session)

        seen = []
        after = None
        while True:
            page = await service.list_content(
                ContentListParams(first=2, after=after, sort_by="created_at", sort_order="desc")
            )
            seen.extend(item.id for item in page.items)
            if not page.has_next_page:
                break
            after = page.end_cursor

        assert sorted(seen) == sorted(ids)
        assert len(seen) == len(set(seen))

    @pytest.mark.asyncio
    async def test_list_first_page_flags(self, session):
        await _seed(session, [("A", 1), ("B", 2), ("C", 3)])

        page = await ContentService(session).list_content(
            ContentListParams(first=2, include_total_count=True)
        )

        assert len(page.items) == 2
        assert page.has_next_page is True
        assert page.has_previous_page is False
        assert page.total_count == 3
        assert decode_cursor(page.start_cursor) == page.items[0].id

    @pytest.mark.asyncio
    async def test_list_filters(self, session):
        await _seed(session, [("Short Clip", 30), ("Long Talk", 3600), ("Medium Talk", 600)])
        service = ContentService(session)

        page = await service.list_content(ContentListParams(min_length_seconds=100, max_length_seconds=1000))
        assert [c.name for c in page.items] == ["Medium Talk"]

        page = await service.list_content(ContentListParams(search="talk", sort_by="name", sort_order="asc"))
        assert [c.name for c in page.items] == ["Long Talk", "Medium Talk"]

        page = await service.list_content(ContentListParams(content_type="YouTube"))
        assert len(page.items) == 3

    @pytest.mark.asyncio
    async def test_search_escapes_wildcards(self, session):
        await _seed(session, [("100% Real", 10), ("Plain", 10)])

        page = await ContentService(session).list_content(ContentListParams(search="%"))

        assert [c.name for c in page.items] == ["100% Real"]

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_sort(self, session):
        service = ContentService(session)

        with pytest.raises(InvalidInputError):
            await service.list_content(ContentListParams(sort_by="length"))
        with pytest.raises(InvalidInputError):
            await service.list_content(ContentListParams(sort_order="sideways"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort_by,sort_order,expected", [
        ("view_count", "desc", ["Viral", "Steady", "Niche"]),
        ("view_count", "asc", ["Niche", "Steady", "Viral"]),
        ("like_count", "desc", ["Steady", "Viral", "Niche"]),
        ("published_at", "asc", ["Steady", "Niche", "Viral"]),
        ("published_at", "desc", ["Viral", "Niche", "Steady"]),
    ])
    async def test_list_sorts_by_response_fields(self, session, sort_by, sort_order, expected):
        """Test sorting on statistics and publish date from the stored response."""
        # viewCount "900" sorts below "10000" only when compared as a number
        for name, views, likes, published in [
            ("Viral", "10000", "50", "2026-03-01T00:00:00Z"),
            ("Steady", "900", "700", "2025-06-01T00:00:00Z"),
            ("Niche", "40", "3", "2025-12-24T00:00:00Z"),
        ]:
            await upsert_content_by_url(
                session,
                url=f"https://youtu.be/{name}",
                name=name,
                content_type="youtube",
                length=60,
                length_units="seconds",
                response={"items": [{
                    "snippet": {"publishedAt": published},
                    "statistics": {"viewCount": views, "likeCount": likes}
                }]}
            )

        page = await ContentService(session).list_content(
            ContentListParams(sort_by=sort_by, sort_order=sort_order)
        )

        assert [c.name for c in page.items] == expected


class TestInsertOrUpdate:
    """Tests for the insert-then-update upsert used on dialects without ON CONFLICT."""

    @pytest.mark.asyncio
    async def test_new_url_is_created(self, session):
        content_id, created = await _insert_or_update(
            session, "https://youtu.be/new", "New", "youtube", 30, "seconds", {"items": []}
        )

        assert created is True
        content = await ContentService(session).get_by_id(content_id)
        assert content.name == "New"
        assert content.length == 30

    @pytest.mark.asyncio
    async def test_same_url_updates_the_row(self, session):
        url = "https://youtu.be/same"
        first_id, _ = await _insert_or_update(session, url, "Before", "youtube", 30, "seconds", None)

        content_id, created = await _insert_or_update(
            session, url, "After", "youtube", 45, "seconds", {"items": [{"id": "same"}]}
        )

        assert content_id == first_id
        assert created is False
        content = await ContentService(session).get_by_id(content_id)
        assert content.name == "After"
        assert content.length == 45
        assert content.response == {"items": [{"id": "same"}]}

    @pytest.mark.asyncio
    async def test_name_of_another_url_conflicts(self, session):
        first_id, _ = await _insert_or_update(
            session, "https://youtu.be/one", "Taken", "youtube", 30, "seconds", None
        )

        with pytest.raises(AlreadyExistsError, match="Taken"):
            await _insert_or_update(
                session, "https://youtu.be/two", "Taken", "youtube", 60, "seconds", None
            )

        page = await ContentService(session).list_content(ContentListParams(include_total_count=True))
        assert page.total_count == 1
        assert (await ContentService(session).get_by_id(first_id)).url == "https://youtu.be/one"
