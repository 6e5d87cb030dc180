"""YouTube Data API v3 client for video metadata lookups."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from perspectize.core.errors import NotFoundError, YouTubeAPIError

logger = structlog.get_logger()

VIDEO_PARTS = "snippet,contentDetails,statistics"


# ==================== Response schema ====================

class Snippet(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str
    description: Optional[str] = None
    channel_title: Optional[str] = Field(default=None, alias="channelTitle")
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    tags: Optional[List[str]] = None


class ContentDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    duration: str


class Statistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    view_count: Optional[int] = Field(default=None, alias="viewCount")
    like_count: Optional[int] = Field(default=None, alias="likeCount")
    comment_count: Optional[int] = Field(default=None, alias="commentCount")


class VideoItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    snippet: Snippet
    content_details: ContentDetails = Field(alias="contentDetails")
    statistics: Optional[Statistics] = None


class VideoListResponse(BaseModel):
    """Subset of the videos.list response that ingestion depends on."""

    model_config = ConfigDict(extra="allow")

    items: List[VideoItem] = Field(default_factory=list)


@dataclass
class VideoMetadata:
    """Validated metadata for a single video plus the raw upstream document."""
    video_id: str
    title: str
    duration: str
    description: str = ""
    channel_title: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


# ==================== Client ====================

class YouTubeClient:
    """
    Async wrapper around the YouTube Data API videos endpoint.

    Transport failures are retried with exponential backoff; HTTP error
    statuses are not retried and surface as YouTubeAPIError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        timeout: float = 30.0,
        max_retries: int = 3,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max(1, max_retries)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._owns_client:
            await self.client.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self.client.get(f"{self.base_url}{path}", params=params)
        except httpx.TransportError as e:
            logger.warning("YouTube API request failed", path=path, error=str(e))
            raise YouTubeAPIError(f"failed to fetch video metadata: {e}") from e

    async def fetch_video_document(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch the raw videos.list document for a video id.

        Raises:
            YouTubeAPIError: on transport failure, non-2xx status or a body
                that is not a JSON object
        """
        response = await self._get(
            "/videos",
            {"part": VIDEO_PARTS, "id": video_id, "key": self.api_key}
        )

        if not response.is_success:
            logger.warning(
                "YouTube API returned error status",
                video_id=video_id,
                status_code=response.status_code
            )
            raise YouTubeAPIError(
                f"YouTube API returned status code {response.status_code}: {response.text}",
                upstream_status=response.status_code
            )

        try:
            document = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise YouTubeAPIError(f"failed to parse YouTube API response: {e}") from e

        if not isinstance(document, dict):
            raise YouTubeAPIError("failed to parse YouTube API response: expected an object")

        return document

    async def get_video_metadata(self, video_id: str) -> VideoMetadata:
        """
        Look up a video and validate the fields ingestion needs.

        Raises:
            YouTubeAPIError: if the request fails
            NotFoundError: if no item matches, or the item lacks a title or duration
        """
        document = await self.fetch_video_document(video_id)
        return parse_video_document(video_id, document)


def parse_video_document(video_id: str, document: Dict[str, Any]) -> VideoMetadata:
    """Validate a videos.list document and pull out the first item."""
    try:
        parsed = VideoListResponse.model_validate(document)
    except ValidationError as e:
        logger.warning(
            "YouTube API response failed validation",
            video_id=video_id,
            errors=e.error_count()
        )
        raise NotFoundError(f"video not found: {video_id} (malformed response)") from e

    if not parsed.items:
        raise NotFoundError(f"video not found: {video_id}")

    item = parsed.items[0]
    return VideoMetadata(
        video_id=item.id,
        title=item.snippet.title,
        duration=item.content_details.duration,
        description=item.snippet.description or "",
        channel_title=item.snippet.channel_title or "",
        raw=document
    )
