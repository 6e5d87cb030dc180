"""API routes package"""

from perspectize.api import content, youtube, users, perspectives

__all__ = ["content", "youtube", "users", "perspectives"]
