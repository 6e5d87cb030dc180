"""Display formatting shared by API responses"""

from datetime import datetime
from typing import Iterable, Optional

EMPTY_DASH = "—"
MISSING = "--"


def format_duration(length: Optional[int], length_units: Optional[str]) -> str:
    """
    Render a stored length for display.

    Seconds are shown as M:SS with minutes never wrapped into hours, so
    3661 seconds is "61:01". Other units are shown verbatim.
    """
    if length is None:
        return EMPTY_DASH

    if length_units == "seconds":
        minutes, seconds = divmod(length, 60)
        return f"{minutes}:{seconds:02d}"

    units = "null" if length_units is None else length_units
    return f"{length} {units}"


def format_count(count: Optional[int]) -> str:
    """Abbreviate view/like counts: 999, 1.2K, 5.7M."""
    if count is None:
        return MISSING
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}K"
    return f"{count / 1_000_000:.1f}M"


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _month_day_year(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}, {moment.year}"


def format_date(value: Optional[str]) -> str:
    """Format an ISO timestamp as "Jan 15, 2026", or a dash if it can't be read."""
    moment = _parse_iso(value)
    if moment is None:
        return EMPTY_DASH
    return _month_day_year(moment)


def format_publish_date(value: Optional[str]) -> str:
    moment = _parse_iso(value)
    if moment is None:
        return MISSING
    return _month_day_year(moment)


def format_tags(tags: Optional[Iterable[str]]) -> str:
    tags = list(tags or [])
    if not tags:
        return MISSING
    return ", ".join(tags)


def truncate_description(description: Optional[str], max_length: int = 100) -> str:
    if not description:
        return MISSING
    if len(description) <= max_length:
        return description
    return description[:max_length] + "..."
