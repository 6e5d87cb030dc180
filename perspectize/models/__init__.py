"""Database models package"""

from perspectize.models.content import Content
from perspectize.models.user import User
from perspectize.models.perspective import Perspective

__all__ = [
    "Content",
    "User",
    "Perspective"
]
