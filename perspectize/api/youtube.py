"""YouTube ingestion API endpoints"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, AsyncGenerator, Dict, List, Optional
import structlog

from perspectize.core.database import get_db
from perspectize.core.errors import InvalidInputError
from perspectize.core.ingestion import ContentIngestor
from perspectize.core.youtube import YouTubeClient
from perspectize.schemas.youtube import VideosRequest, IngestResultResponse

router = APIRouter()
logger = structlog.get_logger()


async def get_youtube_client(request: Request) -> AsyncGenerator[YouTubeClient, None]:
    """Build a Data API client from the application settings for one request."""
    settings = request.app.state.settings
    if not settings.youtube_api_key:
        logger.error("YouTube API key is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="YouTube API key is not configured"
        )

    async with YouTubeClient(
        api_key=settings.youtube_api_key,
        base_url=settings.youtube_api_base_url,
        timeout=settings.youtube_timeout_seconds,
        max_retries=settings.youtube_max_retries
    ) as client:
        yield client


async def _ingest(
    body: VideosRequest,
    db: AsyncSession,
    youtube: YouTubeClient
) -> List[IngestResultResponse]:
    if not body.video_urls:
        raise InvalidInputError("video_urls must contain at least one URL")

    outcomes = await ContentIngestor(db, youtube).ingest(body.video_urls)
    return [
        IngestResultResponse(
            status=outcome.status.value,
            url=outcome.url,
            video_id=outcome.video_id,
            name=outcome.name,
            message=outcome.detail,
            content_id=outcome.content_id
        )
        for outcome in outcomes
    ]


@router.post("/videos", response_model=List[IngestResultResponse])
async def ingest_videos(
    body: VideosRequest,
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeClient = Depends(get_youtube_client)
):
    """Fetch metadata for each URL and create or update its content row"""
    return await _ingest(body, db, youtube)


@router.put("/videos", response_model=List[IngestResultResponse])
async def reingest_videos(
    body: VideosRequest,
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeClient = Depends(get_youtube_client)
):
    """Same as POST; kept so clients can express a refresh"""
    return await _ingest(body, db, youtube)


@router.get("/video")
async def get_video(
    video_id: Optional[str] = Query(None, alias="videoId"),
    youtube: YouTubeClient = Depends(get_youtube_client)
) -> Dict[str, Any]:
    """Return the upstream videos.list document unchanged"""
    if not video_id or not video_id.strip():
        raise InvalidInputError("videoId query parameter is required")

    return await youtube.fetch_video_document(video_id.strip())
