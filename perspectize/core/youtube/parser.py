"""YouTube URL and ISO 8601 duration parsing."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional
from urllib.parse import urlparse, parse_qs

from perspectize.core.errors import DurationParseError

# Path prefixes on youtube.com hosts that carry the id as the next segment
_PATH_PREFIXES = ("embed", "v", "e", "shorts", "live")

_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]+")

_DURATION = re.compile(
    r"^P"
    r"(?:(?P<years>\d+(?:[.,]\d+)?)Y)?"
    r"(?:(?P<months>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:[.,]\d+)?)W)?"
    r"(?:(?P<days>\d+(?:[.,]\d+)?)D)?"
    r"(?:T"
    r"(?:(?P<hours>\d+(?:[.,]\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:[.,]\d+)?)S)?"
    r")?$"
)

_UNIT_SECONDS = {
    "years": 365 * 86400,
    "months": 30 * 86400,
    "weeks": 7 * 86400,
    "days": 86400,
    "hours": 3600,
    "minutes": 60,
    "seconds": 1,
}


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def _leading_id(segment: str) -> Optional[str]:
    match = _VIDEO_ID.match(segment or "")
    return match.group(0) if match else None


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the video identifier from a YouTube URL.

    Supports:
    - youtube.com, www/m/music.youtube.com with /watch?v=, /embed, /v, /e, /shorts, /live
    - youtu.be/<id>
    - youtube-nocookie.com/embed/<id>

    Returns None for anything else, including malformed input.
    """
    if not url or not url.strip():
        return None

    try:
        parsed = urlparse(url.strip())
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not host:
        return None

    segments = [s for s in parsed.path.split("/") if s]

    if host == "youtu.be":
        return _leading_id(segments[0]) if segments else None

    if _host_matches(host, "youtube-nocookie.com"):
        if len(segments) >= 2 and segments[0] == "embed":
            return _leading_id(segments[1])
        return None

    if _host_matches(host, "youtube.com"):
        if not segments:
            return None
        if segments[0] == "watch":
            values = parse_qs(parsed.query).get("v")
            return _leading_id(values[0]) if values else None
        if segments[0] in _PATH_PREFIXES and len(segments) >= 2:
            return _leading_id(segments[1])

    return None


def is_youtube_url(url: str) -> bool:
    """Return True when the URL points at a recognizable YouTube video."""
    return extract_video_id(url) is not None


def parse_iso8601_duration(duration: str) -> int:
    """
    Convert an ISO 8601 duration (e.g. PT1M30S, P1DT2H) to whole seconds.

    Fractional components are summed exactly and the total is truncated
    toward zero. Years count as 365 days and months as 30 days.

    Raises:
        DurationParseError: if the string is empty or not a valid duration
    """
    text = (duration or "").strip().upper()
    match = _DURATION.match(text)

    if not text or not match or text.endswith("T"):
        raise DurationParseError(f"invalid duration format: {duration!r}")

    parts = {k: v for k, v in match.groupdict().items() if v}
    if not parts:
        raise DurationParseError(f"invalid duration format: {duration!r}")

    total = Decimal(0)
    try:
        for unit, value in parts.items():
            total += Decimal(value.replace(",", ".")) * _UNIT_SECONDS[unit]
    except InvalidOperation as exc:
        raise DurationParseError(f"invalid duration format: {duration!r}") from exc

    return int(total)  # truncates toward zero
