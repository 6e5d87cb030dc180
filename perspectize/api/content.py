"""Content API endpoints"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from perspectize.api.youtube import get_youtube_client
from perspectize.core.content_service import ContentListParams, ContentService
from perspectize.core.database import get_db
from perspectize.core.youtube import YouTubeClient
from perspectize.schemas.content import (
    ContentPage,
    ContentResponse,
    CreateContentRequest,
    CreateContentResponse
)
from perspectize.utils import query_keys

router = APIRouter()


@router.get("", response_model=ContentPage)
async def list_content(
    first: Optional[int] = Query(None),
    after: Optional[str] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    content_type: Optional[str] = Query(None),
    min_length_seconds: Optional[int] = Query(None, ge=0),
    max_length_seconds: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None),
    include_total_count: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    """List content with cursor pagination, filtering and sorting"""
    params = ContentListParams(
        first=first,
        after=after,
        sort_by=sort_by,
        sort_order=sort_order,
        content_type=content_type,
        min_length_seconds=min_length_seconds,
        max_length_seconds=max_length_seconds,
        search=search,
        include_total_count=include_total_count
    )
    page = await ContentService(db).list_content(params)

    cache_key = query_keys.content.list({
        "sort_by": sort_by,
        "sort_order": sort_order,
        "search": search,
        "first": first,
        "after": after
    })
    return ContentPage(
        items=[ContentResponse.model_validate(item) for item in page.items],
        has_next_page=page.has_next_page,
        has_previous_page=page.has_previous_page,
        start_cursor=page.start_cursor,
        end_cursor=page.end_cursor,
        total_count=page.total_count,
        cache_key=list(cache_key)
    )


@router.get("/by-id/{content_id}", response_model=ContentResponse)
async def get_content_by_id(
    content_id: int,
    db: AsyncSession = Depends(get_db)
):
    return await ContentService(db).get_by_id(content_id)


@router.get("/{name}", response_model=ContentResponse)
async def get_content_by_name(
    name: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a content item by its exact name"""
    return await ContentService(db).get_by_name(name)


@router.post("/youtube", response_model=CreateContentResponse, status_code=status.HTTP_201_CREATED)
async def create_content_from_youtube(
    body: CreateContentRequest,
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeClient = Depends(get_youtube_client)
):
    """Add a single YouTube video; fails if the URL is already catalogued"""
    content = await ContentService(db, youtube).create_from_youtube(body.url)

    response = CreateContentResponse.model_validate(content)
    response.invalidates = [list(query_keys.content.lists())]
    return response
