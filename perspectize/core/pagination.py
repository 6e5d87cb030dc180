"""Cursor-based pagination shared by the list endpoints."""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar
import base64
import binascii

from sqlalchemy import Select, asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from perspectize.core.errors import InvalidInputError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_CURSOR_PREFIX = "cursor"


def encode_cursor(row_id: int) -> str:
    """Encode a row id as an opaque cursor."""
    return base64.b64encode(f"{_CURSOR_PREFIX}:{row_id}".encode()).decode()


def decode_cursor(cursor: str) -> int:
    """Decode a cursor produced by encode_cursor back to a row id."""
    try:
        decoded = base64.b64decode(cursor.encode(), validate=True).decode()
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidInputError(f"invalid cursor: {cursor!r}") from e

    prefix, _, raw_id = decoded.partition(":")
    if prefix != _CURSOR_PREFIX or not raw_id.isdigit():
        raise InvalidInputError(f"invalid cursor format: {cursor!r}")
    return int(raw_id)


def validate_page_size(first: Optional[int]) -> int:
    if first is None:
        return DEFAULT_PAGE_SIZE
    if first < 1 or first > MAX_PAGE_SIZE:
        raise InvalidInputError(f"first must be between 1 and {MAX_PAGE_SIZE}")
    return first


@dataclass
class Page(Generic[T]):
    """One page of results plus the cursors needed to continue."""
    items: List[T] = field(default_factory=list)
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    total_count: Optional[int] = None


async def paginate(
    session: AsyncSession,
    query: Select,
    id_column,
    sort_column,
    descending: bool = True,
    first: Optional[int] = None,
    after: Optional[str] = None,
    include_total_count: bool = False
) -> Page:
    """
    Apply cursor paging to a filtered select.

    The cursor pins the id of the last row seen; ordering is by the sort
    column with id as the tie breaker.
    """
    limit = validate_page_size(first)

    total_count = None
    if include_total_count:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total_count = (await session.execute(count_query)).scalar_one()

    if after:
        cursor_id = decode_cursor(after)
        query = query.where(id_column < cursor_id if descending else id_column > cursor_id)

    direction = desc if descending else asc
    query = query.order_by(direction(sort_column), direction(id_column)).limit(limit + 1)

    rows = list((await session.execute(query)).scalars().all())
    has_next = len(rows) > limit
    rows = rows[:limit]

    page = Page(
        items=rows,
        has_next_page=has_next,
        has_previous_page=after is not None,
        total_count=total_count
    )
    if rows:
        page.start_cursor = encode_cursor(rows[0].id)
        page.end_cursor = encode_cursor(rows[-1].id)
    return page
