"""YouTube URL parsing and Data API access."""

from perspectize.core.youtube.parser import (
    extract_video_id,
    is_youtube_url,
    parse_iso8601_duration,
)
from perspectize.core.youtube.client import YouTubeClient, VideoMetadata

__all__ = [
    "extract_video_id",
    "is_youtube_url",
    "parse_iso8601_duration",
    "YouTubeClient",
    "VideoMetadata"
]
