"""Perspective business rules"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from perspectize.core.errors import (
    DuplicateClaimError,
    InvalidInputError,
    InvalidRatingError,
    NotFoundError,
)
from perspectize.core.pagination import Page, paginate
from perspectize.models.content import Content
from perspectize.models.perspective import Perspective, Privacy
from perspectize.models.user import User
from perspectize.schemas.perspective import PerspectiveCreate, PerspectiveUpdate

logger = structlog.get_logger()

MAX_CLAIM_LENGTH = 255
MIN_RATING = 0
MAX_RATING = 10000

RATING_FIELDS = ("quality", "agreement", "importance", "confidence")

SORT_COLUMNS = {
    "created_at": Perspective.created_at,
    "updated_at": Perspective.updated_at,
    "claim": Perspective.claim,
}


@dataclass
class PerspectiveListParams:
    first: Optional[int] = None
    after: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    user_id: Optional[int] = None
    content_id: Optional[int] = None
    privacy: Optional[str] = None
    include_total_count: bool = False


def validate_claim(claim: Optional[str]) -> str:
    claim = (claim or "").strip()
    if not claim:
        raise InvalidInputError("claim is required")
    if len(claim) > MAX_CLAIM_LENGTH:
        raise InvalidInputError(f"claim must be {MAX_CLAIM_LENGTH} characters or less")
    return claim


def validate_rating(field: str, value: Optional[int]) -> None:
    if value is not None and not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRatingError(
            f"{field} {value}: rating must be between {MIN_RATING} and {MAX_RATING}"
        )


def _validate_ratings(data: Dict[str, Any]) -> None:
    for field in RATING_FIELDS:
        validate_rating(field, data.get(field))

    for entry in data.get("categorized_ratings") or []:
        validate_rating(f"categorized rating for {entry['category']!r} is", entry["rating"])


class PerspectiveService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _claim_taken(self, claim: str, user_id: int, exclude_id: int = None) -> bool:
        query = select(Perspective.id).where(
            Perspective.claim == claim,
            Perspective.user_id == user_id
        )
        if exclude_id is not None:
            query = query.where(Perspective.id != exclude_id)
        return (await self.session.execute(query)).first() is not None

    async def _commit(self, claim: str, user_id: int, exclude_id: int = None) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self._claim_taken(claim, user_id, exclude_id=exclude_id):
                raise DuplicateClaimError(f"claim already exists for this user: {claim!r}") from e
            logger.warning("Perspective write rejected", claim=claim, error=str(e.orig))
            raise InvalidInputError("perspective violates a database constraint") from e

    async def _check_content(self, content_id: Optional[int]) -> None:
        if content_id is not None and await self.session.get(Content, content_id) is None:
            raise NotFoundError(f"content with id {content_id} not found")

    async def create(self, data: PerspectiveCreate) -> Perspective:
        """
        Create a perspective for an existing user.

        Ratings are integers in 0..10000. A user may hold each claim once;
        privacy defaults to public.
        """
        claim = validate_claim(data.claim)
        if data.user_id <= 0:
            raise InvalidInputError("user_id must be a positive integer")
        if await self.session.get(User, data.user_id) is None:
            raise NotFoundError(f"user with id {data.user_id} not found")

        values = data.model_dump(exclude={"claim"})
        _validate_ratings(values)
        await self._check_content(data.content_id)

        if await self._claim_taken(claim, data.user_id):
            raise DuplicateClaimError(f"claim already exists for this user: {claim!r}")

        values["privacy"] = (data.privacy or Privacy.PUBLIC).value
        perspective = Perspective(claim=claim, **values)
        self.session.add(perspective)
        await self._commit(claim, data.user_id)
        await self.session.refresh(perspective)

        logger.info("Perspective created", perspective_id=perspective.id, user_id=data.user_id)
        return perspective

    async def get_by_id(self, perspective_id: int) -> Perspective:
        if perspective_id <= 0:
            raise InvalidInputError("perspective id must be a positive integer")

        perspective = await self.session.get(Perspective, perspective_id, populate_existing=True)
        if perspective is None:
            raise NotFoundError(f"perspective with id {perspective_id} not found")
        return perspective

    async def list_by_username(self, username: str) -> List[Perspective]:
        username = (username or "").strip()
        if not username:
            raise InvalidInputError("username is required")

        user = (
            await self.session.execute(select(User).where(User.username == username))
        ).scalar_one_or_none()
        if user is None:
            raise NotFoundError(f"user {username!r} not found")

        result = await self.session.execute(
            select(Perspective)
            .where(Perspective.user_id == user.id)
            .order_by(Perspective.created_at.desc(), Perspective.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, perspective_id: int, data: PerspectiveUpdate) -> Perspective:
        perspective = await self.get_by_id(perspective_id)
        changes = data.model_dump(exclude_unset=True)
        _validate_ratings(changes)
        if "privacy" in changes and changes["privacy"] is None:
            raise InvalidInputError("privacy cannot be null")
        await self._check_content(changes.get("content_id"))

        if "claim" in changes:
            claim = validate_claim(changes.pop("claim"))
            if claim != perspective.claim and await self._claim_taken(
                claim, perspective.user_id, exclude_id=perspective.id
            ):
                raise DuplicateClaimError(f"claim already exists for this user: {claim!r}")
            perspective.claim = claim

        for field in ("privacy", "review_status"):
            if changes.get(field) is not None:
                changes[field] = changes[field].value

        for field, value in changes.items():
            setattr(perspective, field, value)

        # Rollback expires the instance, so read its keys first
        await self._commit(perspective.claim, perspective.user_id, exclude_id=perspective.id)
        await self.session.refresh(perspective)
        return perspective

    async def delete(self, perspective_id: int) -> None:
        perspective = await self.get_by_id(perspective_id)
        await self.session.delete(perspective)
        await self.session.commit()
        logger.info("Perspective deleted", perspective_id=perspective_id)

    async def list_perspectives(self, params: PerspectiveListParams) -> Page:
        sort_column = SORT_COLUMNS.get(params.sort_by)
        if sort_column is None:
            raise InvalidInputError(f"unsupported sort field: {params.sort_by}")
        if params.sort_order not in ("asc", "desc"):
            raise InvalidInputError("sort_order must be 'asc' or 'desc'")

        query = select(Perspective)
        if params.user_id is not None:
            query = query.where(Perspective.user_id == params.user_id)
        if params.content_id is not None:
            query = query.where(Perspective.content_id == params.content_id)
        if params.privacy:
            if params.privacy not in {p.value for p in Privacy}:
                raise InvalidInputError(f"unknown privacy value: {params.privacy}")
            query = query.where(Perspective.privacy == params.privacy)

        return await paginate(
            self.session,
            query,
            id_column=Perspective.id,
            sort_column=sort_column,
            descending=params.sort_order == "desc",
            first=params.first,
            after=params.after,
            include_total_count=params.include_total_count
        )
