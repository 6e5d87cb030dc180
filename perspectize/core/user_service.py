"""User business rules"""

from typing import List, Optional
import re

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from perspectize.core.errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    SentinelUserError,
)
from perspectize.models.perspective import Perspective
from perspectize.models.user import DELETED_USER_USERNAME, SYSTEM_USER_USERNAME, User

logger = structlog.get_logger()

MAX_USERNAME_LENGTH = 24

SENTINEL_EMAILS = {
    DELETED_USER_USERNAME: "deleted@perspectize.invalid",
    SYSTEM_USER_USERNAME: "system@perspectize.invalid",
}

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_username(username: Optional[str]) -> str:
    username = (username or "").strip()
    if not username:
        raise InvalidInputError("username is required")
    if len(username) > MAX_USERNAME_LENGTH:
        raise InvalidInputError(f"username must be {MAX_USERNAME_LENGTH} characters or less")
    return username


def validate_email(email: Optional[str]) -> str:
    email = (email or "").strip()
    if not email:
        raise InvalidInputError("email is required")
    if not EMAIL_PATTERN.match(email):
        raise InvalidInputError("invalid email format")
    return email


class UserService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find(self, column, value) -> Optional[User]:
        result = await self.session.execute(select(User).where(column == value))
        return result.scalar_one_or_none()

    async def _taken(self, column, value, user_id: Optional[int]) -> bool:
        existing = await self._find(column, value)
        return existing is not None and existing.id != user_id

    async def _commit_or_conflict(self, username: str, email: str, user_id: int = None) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self._taken(User.username, username, user_id):
                raise AlreadyExistsError("username already taken") from e
            if await self._taken(User.email, email, user_id):
                raise AlreadyExistsError("email already registered") from e
            logger.warning("User write rejected", username=username, error=str(e.orig))
            raise InvalidInputError("user violates a database constraint") from e

    async def create(self, username: str, email: str) -> User:
        username = validate_username(username)
        email = validate_email(email)

        if await self._find(User.username, username) is not None:
            raise AlreadyExistsError("username already taken")
        if await self._find(User.email, email) is not None:
            raise AlreadyExistsError("email already registered")

        user = User(username=username, email=email)
        self.session.add(user)
        await self._commit_or_conflict(username, email)
        await self.session.refresh(user)

        logger.info("User created", user_id=user.id)
        return user

    async def get_by_id(self, user_id: int) -> User:
        if user_id <= 0:
            raise InvalidInputError("user id must be a positive integer")

        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"user with id {user_id} not found")
        return user

    async def get_by_username(self, username: str) -> User:
        username = (username or "").strip()
        if not username:
            raise InvalidInputError("username is required")

        user = await self._find(User.username, username)
        if user is None:
            raise NotFoundError(f"user {username!r} not found")
        return user

    async def list_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def update(
        self,
        user_id: int,
        username: Optional[str] = None,
        email: Optional[str] = None
    ) -> User:
        """Change a user's username and/or email, keeping both unique."""
        user = await self.get_by_id(user_id)
        if user.is_sentinel:
            raise SentinelUserError()

        if username is not None:
            username = validate_username(username)
            if username != user.username and await self._find(User.username, username):
                raise AlreadyExistsError("username already taken")
            user.username = username

        if email is not None:
            email = validate_email(email)
            if email != user.email and await self._find(User.email, email):
                raise AlreadyExistsError("email already registered")
            user.email = email

        await self._commit_or_conflict(user.username, user.email, user_id=user_id)
        await self.session.refresh(user)
        return user

    async def _deleted_sentinel(self) -> User:
        sentinel = await self._find(User.username, DELETED_USER_USERNAME)
        if sentinel is None:
            sentinel = User(username=DELETED_USER_USERNAME, email=SENTINEL_EMAILS[DELETED_USER_USERNAME])
            self.session.add(sentinel)
            await self.session.flush()
        return sentinel

    async def ensure_sentinel_users(self) -> None:
        """Create the "[deleted]" and "[system]" users if they are missing."""
        created = []
        for username, email in SENTINEL_EMAILS.items():
            if await self._find(User.username, username) is None:
                self.session.add(User(username=username, email=email))
                created.append(username)

        if created:
            await self.session.commit()
            logger.info("Sentinel users created", usernames=created)

    async def delete(self, user_id: int) -> None:
        """
        Delete a user.

        Their perspectives are handed to the "[deleted]" sentinel first so no
        foreign key points at the removed row.
        """
        user = await self.get_by_id(user_id)
        if user.is_sentinel:
            raise SentinelUserError("cannot delete the system sentinel user")

        sentinel = await self._deleted_sentinel()
        await self.session.execute(
            update(Perspective)
            .where(Perspective.user_id == user_id)
            .values(user_id=sentinel.id)
        )
        await self.session.delete(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyExistsError(
                "cannot reassign perspectives: the deleted-user sentinel already holds the same claim"
            ) from e

        logger.info("User deleted", user_id=user_id, reassigned_to=sentinel.id)
