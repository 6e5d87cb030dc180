"""Batch ingestion of YouTube URLs into the content catalogue."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional
import enum

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from perspectize.core.content_service import LENGTH_UNITS_SECONDS, upsert_content_by_url
from perspectize.core.errors import (
    AlreadyExistsError,
    DurationParseError,
    NotFoundError,
    YouTubeAPIError,
)
from perspectize.core.youtube import YouTubeClient, extract_video_id, parse_iso8601_duration
from perspectize.models.content import CONTENT_TYPE_YOUTUBE

logger = structlog.get_logger()

EXTRACTION_FAILED = "identifier extraction failed"


class IngestStatus(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    ERROR = "error"
    CONFLICT = "conflict"


@dataclass
class IngestOutcome:
    """Result of ingesting a single URL."""
    url: str
    status: IngestStatus
    video_id: Optional[str] = None
    name: Optional[str] = None
    detail: Optional[str] = None
    content_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


class ContentIngestor:
    """
    Resolve URLs to YouTube metadata and upsert them as content rows.

    Every URL gets exactly one outcome, in input order. Per-URL failures are
    reported in the outcome; only infrastructure errors (e.g. the database
    going away) propagate. Each successful item is committed on its own, so a
    failure partway through leaves earlier items in place.
    """

    def __init__(self, session: AsyncSession, youtube: YouTubeClient):
        self.session = session
        self.youtube = youtube

    async def ingest(self, urls: Iterable[str]) -> List[IngestOutcome]:
        outcomes = []
        for url in urls:
            outcomes.append(await self.ingest_one(url))

        logger.info(
            "Content ingestion finished",
            total=len(outcomes),
            created=sum(o.status == IngestStatus.CREATED for o in outcomes),
            updated=sum(o.status == IngestStatus.UPDATED for o in outcomes),
            failed=sum(o.status in (IngestStatus.ERROR, IngestStatus.CONFLICT) for o in outcomes)
        )
        return outcomes

    async def ingest_one(self, url: str) -> IngestOutcome:
        video_id = extract_video_id(url)
        if video_id is None:
            return IngestOutcome(url=url, status=IngestStatus.ERROR, detail=EXTRACTION_FAILED)

        try:
            metadata = await self.youtube.get_video_metadata(video_id)
        except (YouTubeAPIError, NotFoundError) as e:
            logger.warning("Video lookup failed", url=url, video_id=video_id, error=e.detail)
            return IngestOutcome(
                url=url, status=IngestStatus.ERROR, video_id=video_id, detail=e.detail
            )

        # Items whose duration cannot be normalized are skipped, not stored with a null length
        try:
            seconds = parse_iso8601_duration(metadata.duration)
        except DurationParseError as e:
            return IngestOutcome(
                url=url,
                status=IngestStatus.ERROR,
                video_id=video_id,
                name=metadata.title,
                detail=e.detail
            )

        try:
            content_id, created = await upsert_content_by_url(
                self.session,
                url=url,
                name=metadata.title,
                content_type=CONTENT_TYPE_YOUTUBE,
                length=seconds,
                length_units=LENGTH_UNITS_SECONDS,
                response=metadata.raw
            )
        except AlreadyExistsError as e:
            logger.warning("Content name conflict", url=url, name=metadata.title)
            return IngestOutcome(
                url=url,
                status=IngestStatus.CONFLICT,
                video_id=video_id,
                name=metadata.title,
                detail=e.detail
            )

        status = IngestStatus.CREATED if created else IngestStatus.UPDATED
        logger.info("Content ingested", url=url, video_id=video_id, status=status.value)
        return IngestOutcome(
            url=url,
            status=status,
            video_id=video_id,
            name=metadata.title,
            content_id=content_id
        )
