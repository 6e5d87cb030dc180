"""Content persistence and lookup rules."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import structlog
from sqlalchemy import BigInteger, cast, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from perspectize.core.errors import (
    AlreadyExistsError,
    InvalidInputError,
    InvalidURLError,
    NotFoundError,
)
from perspectize.core.pagination import Page, paginate
from perspectize.core.youtube import YouTubeClient, extract_video_id, parse_iso8601_duration
from perspectize.models.content import CONTENT_TYPE_YOUTUBE, Content

logger = structlog.get_logger()

LENGTH_UNITS_SECONDS = "seconds"

# Statistics and publish date live in the stored videos.list document
_FIRST_ITEM = ("items", 0)

SORT_COLUMNS = {
    "created_at": Content.created_at,
    "updated_at": Content.updated_at,
    "name": Content.name,
    "view_count": cast(Content.response[_FIRST_ITEM + ("statistics", "viewCount")].as_string(), BigInteger),
    "like_count": cast(Content.response[_FIRST_ITEM + ("statistics", "likeCount")].as_string(), BigInteger),
    "published_at": Content.response[_FIRST_ITEM + ("snippet", "publishedAt")].as_string(),
}

# Dialects with INSERT ... ON CONFLICT DO UPDATE support in SQLAlchemy
_NATIVE_UPSERT_DIALECTS = ("postgresql", "sqlite")


@dataclass
class ContentListParams:
    first: Optional[int] = None
    after: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    content_type: Optional[str] = None
    min_length_seconds: Optional[int] = None
    max_length_seconds: Optional[int] = None
    search: Optional[str] = None
    include_total_count: bool = False


async def _find_by_url(session: AsyncSession, url: str) -> Optional[Content]:
    result = await session.execute(select(Content).where(Content.url == url))
    return result.scalar_one_or_none()


async def _conflict_error(session: AsyncSession, url: str, name: str) -> AlreadyExistsError:
    """Work out which unique column a failed write collided with."""
    if url and await _find_by_url(session, url) is not None:
        return AlreadyExistsError(f"content with URL {url} already exists")
    return AlreadyExistsError(f"content with name {name!r} already exists")


async def upsert_content_by_url(
    session: AsyncSession,
    url: str,
    name: str,
    content_type: str,
    length: Optional[int],
    length_units: Optional[str],
    response: Optional[Dict[str, Any]]
) -> Tuple[int, bool]:
    """
    Insert a content row or update the row that already owns the URL.

    Commits on success. Returns (content id, created).

    Raises:
        AlreadyExistsError: if the name belongs to a different URL's row
    """
    dialect = session.get_bind().dialect.name
    if dialect in _NATIVE_UPSERT_DIALECTS:
        return await _native_upsert(
            session, dialect, url, name, content_type, length, length_units, response
        )
    return await _insert_or_update(
        session, url, name, content_type, length, length_units, response
    )


async def _native_upsert(session, dialect, url, name, content_type, length, length_units, response):
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert

    now = datetime.now(timezone.utc)
    stmt = insert(Content).values(
        url=url,
        name=name,
        content_type=content_type,
        length=length,
        length_units=length_units,
        response=response,
        created_at=now,
        updated_at=now
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Content.url],
        set_={
            "name": stmt.excluded.name,
            "length": stmt.excluded.length,
            "length_units": stmt.excluded.length_units,
            "response": stmt.excluded.response,
            "updated_at": stmt.excluded.updated_at,
        }
    ).returning(Content.id, Content.created_at, Content.updated_at)

    try:
        row = (await session.execute(stmt)).one()
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise AlreadyExistsError(f"content with name {name!r} already exists") from e

    # An insert writes the same timestamp to both columns; an update leaves created_at alone
    return row.id, row.created_at == row.updated_at


async def _insert_or_update(session, url, name, content_type, length, length_units, response):
    now = datetime.now(timezone.utc)
    content = Content(
        url=url,
        name=name,
        content_type=content_type,
        length=length,
        length_units=length_units,
        response=response,
        created_at=now,
        updated_at=now
    )
    session.add(content)
    try:
        await session.commit()
        return content.id, True
    except IntegrityError:
        await session.rollback()

    existing = await _find_by_url(session, url)
    if existing is None:
        raise AlreadyExistsError(f"content with name {name!r} already exists")

    existing.name = name
    existing.length = length
    existing.length_units = length_units
    existing.response = response
    existing.updated_at = now
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise AlreadyExistsError(f"content with name {name!r} already exists") from e
    return existing.id, False


class ContentService:
    """Business rules for reading and creating content."""

    def __init__(self, session: AsyncSession, youtube: Optional[YouTubeClient] = None):
        self.session = session
        self.youtube = youtube

    async def create_from_youtube(self, url: str) -> Content:
        """
        Create a content row from a single YouTube URL.

        Unlike batch ingestion this refuses URLs that are already catalogued.
        """
        url = (url or "").strip()
        if not url:
            raise InvalidInputError("url is required")

        if await _find_by_url(self.session, url) is not None:
            raise AlreadyExistsError(f"content with URL {url} already exists")

        video_id = extract_video_id(url)
        if video_id is None:
            raise InvalidURLError(f"invalid YouTube URL: could not extract video ID from {url}")

        metadata = await self.youtube.get_video_metadata(video_id)
        seconds = parse_iso8601_duration(metadata.duration)

        content = Content(
            url=url,
            name=metadata.title,
            content_type=CONTENT_TYPE_YOUTUBE,
            length=seconds,
            length_units=LENGTH_UNITS_SECONDS,
            response=metadata.raw
        )
        self.session.add(content)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise await _conflict_error(self.session, url, metadata.title) from e

        await self.session.refresh(content)
        logger.info("Content created", content_id=content.id, video_id=video_id)
        return content

    async def get_by_id(self, content_id: int) -> Content:
        if content_id <= 0:
            raise InvalidInputError("content id must be a positive integer")

        content = await self.session.get(Content, content_id, populate_existing=True)
        if content is None:
            raise NotFoundError(f"content {content_id} not found")
        return content

    async def get_by_name(self, name: str) -> Content:
        if not name or not name.strip():
            raise InvalidInputError("name parameter is required")

        result = await self.session.execute(select(Content).where(Content.name == name))
        content = result.scalar_one_or_none()
        if content is None:
            raise NotFoundError(f"content with name '{name}' not found")
        return content

    async def list_content(self, params: ContentListParams) -> Page:
        sort_column = SORT_COLUMNS.get(params.sort_by)
        if sort_column is None:
            raise InvalidInputError(f"unsupported sort field: {params.sort_by}")
        if params.sort_order not in ("asc", "desc"):
            raise InvalidInputError("sort_order must be 'asc' or 'desc'")

        query = select(Content)
        if params.content_type:
            query = query.where(Content.content_type == params.content_type.lower())
        if params.min_length_seconds is not None:
            query = query.where(Content.length >= params.min_length_seconds)
        if params.max_length_seconds is not None:
            query = query.where(Content.length <= params.max_length_seconds)
        if params.search:
            query = query.where(Content.name.icontains(params.search, autoescape=True))

        return await paginate(
            self.session,
            query,
            id_column=Content.id,
            sort_column=sort_column,
            descending=params.sort_order == "desc",
            first=params.first,
            after=params.after,
            include_total_count=params.include_total_count
        )
