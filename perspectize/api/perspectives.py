"""Perspective API endpoints"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from perspectize.core.database import get_db
from perspectize.core.perspective_service import PerspectiveListParams, PerspectiveService
from perspectize.schemas.perspective import (
    PerspectiveCreate,
    PerspectiveUpdate,
    PerspectiveResponse,
    PerspectivePage
)

router = APIRouter()


@router.get("", response_model=PerspectivePage)
async def list_perspectives(
    first: Optional[int] = Query(None),
    after: Optional[str] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    user_id: Optional[int] = Query(None),
    content_id: Optional[int] = Query(None),
    privacy: Optional[str] = Query(None),
    include_total_count: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    """List perspectives with cursor pagination"""
    page = await PerspectiveService(db).list_perspectives(PerspectiveListParams(
        first=first,
        after=after,
        sort_by=sort_by,
        sort_order=sort_order,
        user_id=user_id,
        content_id=content_id,
        privacy=privacy,
        include_total_count=include_total_count
    ))
    return PerspectivePage(
        items=[PerspectiveResponse.model_validate(item) for item in page.items],
        has_next_page=page.has_next_page,
        has_previous_page=page.has_previous_page,
        start_cursor=page.start_cursor,
        end_cursor=page.end_cursor,
        total_count=page.total_count
    )


@router.post("", response_model=PerspectiveResponse, status_code=status.HTTP_201_CREATED)
async def create_perspective(
    perspective_data: PerspectiveCreate,
    db: AsyncSession = Depends(get_db)
):
    """Record a user's claim and ratings"""
    return await PerspectiveService(db).create(perspective_data)


@router.get("/by-username/{username}", response_model=List[PerspectiveResponse])
async def list_perspectives_by_username(
    username: str,
    db: AsyncSession = Depends(get_db)
):
    return await PerspectiveService(db).list_by_username(username)


@router.get("/{perspective_id}", response_model=PerspectiveResponse)
async def get_perspective(
    perspective_id: int,
    db: AsyncSession = Depends(get_db)
):
    return await PerspectiveService(db).get_by_id(perspective_id)


@router.put("/{perspective_id}", response_model=PerspectiveResponse)
async def update_perspective(
    perspective_id: int,
    perspective_update: PerspectiveUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update the fields present in the body"""
    return await PerspectiveService(db).update(perspective_id, perspective_update)


@router.delete("/{perspective_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_perspective(
    perspective_id: int,
    db: AsyncSession = Depends(get_db)
):
    await PerspectiveService(db).delete(perspective_id)
    return None
