"""User-facing messages for failed content submissions"""

from typing import Optional

ALREADY_ADDED = "This video has already been added"
INVALID_OR_MISSING = "Invalid YouTube URL or video not found"
GENERIC_FAILURE = "Failed to add video. Please try again."


def user_message_for(error_text: Optional[str]) -> str:
    """
    Pick the short message shown to a user for an error.

    Matching is by case-insensitive substring so service errors can keep
    their detailed wording.
    """
    text = (error_text or "").lower()

    if "already exists" in text:
        return ALREADY_ADDED
    if "invalid youtube url" in text or "video not found" in text:
        return INVALID_OR_MISSING
    return GENERIC_FAILURE
