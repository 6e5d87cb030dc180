"""Utility functions package"""

from perspectize.utils.formatting import (
    format_duration,
    format_count,
    format_date,
    format_publish_date,
    format_tags,
    truncate_description
)
from perspectize.utils.messages import user_message_for
from perspectize.utils import query_keys

__all__ = [
    "format_duration",
    "format_count",
    "format_date",
    "format_publish_date",
    "format_tags",
    "truncate_description",
    "user_message_for",
    "query_keys"
]
