"""Pydantic schemas package"""

from perspectize.schemas.content import (
    ContentResponse,
    ContentPage,
    CreateContentRequest,
    CreateContentResponse
)
from perspectize.schemas.youtube import VideosRequest, IngestResultResponse
from perspectize.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserMutationResponse
)
from perspectize.schemas.perspective import (
    CategorizedRating,
    PerspectiveCreate,
    PerspectiveUpdate,
    PerspectiveResponse,
    PerspectivePage
)

__all__ = [
    "ContentResponse",
    "ContentPage",
    "CreateContentRequest",
    "CreateContentResponse",
    "VideosRequest",
    "IngestResultResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserMutationResponse",
    "CategorizedRating",
    "PerspectiveCreate",
    "PerspectiveUpdate",
    "PerspectiveResponse",
    "PerspectivePage"
]
