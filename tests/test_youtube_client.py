"""Tests for the YouTube Data API client."""

import httpx
import pytest

from perspectize.core.errors import NotFoundError, YouTubeAPIError
from perspectize.core.youtube import YouTubeClient


def _client(handler) -> YouTubeClient:
    return YouTubeClient(
        api_key="test-key",
        base_url="https://youtube.test/youtube/v3/",
        max_retries=2,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


class TestYouTubeClient:
    """Tests for YouTubeClient."""

    @pytest.mark.asyncio
    async def test_get_video_metadata(self, youtube_client, fake_youtube):
        """Test that the first item's title and duration are extracted."""
        fake_youtube.add_video("abc123", "Rick Astley", duration="PT3M33S")

        metadata = await youtube_client.get_video_metadata("abc123")

        assert metadata.video_id == "abc123"
        assert metadata.title == "Rick Astley"
        assert metadata.duration == "PT3M33S"
        assert metadata.channel_title == "Test Channel"
        assert metadata.raw["items"][0]["id"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_parameters(self, youtube_client, fake_youtube):
        fake_youtube.add_video("abc123", "Video")

        await youtube_client.get_video_metadata("abc123")

        request = fake_youtube.requests[0]
        assert request.url.path == "/youtube/v3/videos"
        assert request.url.params["id"] == "abc123"
        assert request.url.params["key"] == "test-key"
        assert request.url.params["part"] == "snippet,contentDetails,statistics"

    @pytest.mark.asyncio
    async def test_empty_items_is_not_found(self, youtube_client):
        with pytest.raises(NotFoundError, match="video not found"):
            await youtube_client.get_video_metadata("missing")

    @pytest.mark.asyncio
    async def test_error_status_raises_with_upstream_status(self, youtube_client, fake_youtube):
        """Test that non-2xx responses carry the upstream status."""
        fake_youtube.fail("abc123", 403, text="quotaExceeded")

        with pytest.raises(YouTubeAPIError) as exc_info:
            await youtube_client.get_video_metadata("abc123")

        assert exc_info.value.upstream_status == 403
        assert "403" in exc_info.value.detail
        assert "quotaExceeded" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(YouTubeAPIError, match="failed to parse"):
                await client.fetch_video_document("abc123")

    @pytest.mark.asyncio
    async def test_missing_nested_fields_is_not_found(self):
        """Test that an item without contentDetails fails validation."""
        document = {"items": [{"id": "abc123", "snippet": {"title": "No duration"}}]}

        async with _client(lambda request: httpx.Response(200, json=document)) as client:
            with pytest.raises(NotFoundError, match="malformed response"):
                await client.get_video_metadata("abc123")

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self, monkeypatch):
        """Test that a transient connection failure is retried once."""
        from tenacity import wait_none
        import perspectize.core.youtube.client as client_module

        monkeypatch.setattr(client_module, "wait_exponential", lambda **kwargs: wait_none())
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"items": []})

        async with _client(handler) as client:
            document = await client.fetch_video_document("abc123")

        assert document == {"items": []}
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_transport_errors_exhaust_retries(self, monkeypatch):
        from tenacity import wait_none
        import perspectize.core.youtube.client as client_module

        monkeypatch.setattr(client_module, "wait_exponential", lambda **kwargs: wait_none())

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(YouTubeAPIError, match="failed to fetch video metadata"):
                await client.fetch_video_document("abc123")
