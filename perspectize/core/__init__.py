"""Core business logic package"""

from perspectize.core.errors import (
    PerspectizeError,
    InvalidInputError,
    InvalidURLError,
    InvalidRatingError,
    NotFoundError,
    AlreadyExistsError,
    DuplicateClaimError,
    SentinelUserError,
    YouTubeAPIError,
    DurationParseError
)

__all__ = [
    "PerspectizeError",
    "InvalidInputError",
    "InvalidURLError",
    "InvalidRatingError",
    "NotFoundError",
    "AlreadyExistsError",
    "DuplicateClaimError",
    "SentinelUserError",
    "YouTubeAPIError",
    "DurationParseError"
]
