"""Content Pydantic schemas"""

from pydantic import BaseModel, Field, computed_field
from typing import Optional, List, Dict, Any
from datetime import datetime

from perspectize.utils.formatting import format_duration


def _first_item(response: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    items = (response or {}).get("items") or []
    if items and isinstance(items[0], dict):
        return items[0]
    return {}


def _to_int(value: Any) -> Optional[int]:
    # The Data API sends statistics as decimal strings
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ContentResponse(BaseModel):
    """Schema for content response"""
    id: int
    name: str
    url: Optional[str] = None
    content_type: str
    length: Optional[int] = None
    length_units: Optional[str] = None
    response: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def display_length(self) -> str:
        return format_duration(self.length, self.length_units)

    @computed_field
    @property
    def view_count(self) -> Optional[int]:
        return _to_int((_first_item(self.response).get("statistics") or {}).get("viewCount"))

    @computed_field
    @property
    def like_count(self) -> Optional[int]:
        return _to_int((_first_item(self.response).get("statistics") or {}).get("likeCount"))

    @computed_field
    @property
    def published_at(self) -> Optional[str]:
        return (_first_item(self.response).get("snippet") or {}).get("publishedAt")


class ContentPage(BaseModel):
    """One page of content plus its cache key"""
    items: List[ContentResponse]
    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    total_count: Optional[int] = None
    cache_key: List[Any] = Field(default_factory=list)


class CreateContentRequest(BaseModel):
    """Schema for adding a single YouTube video"""
    url: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
            }
        }


class CreateContentResponse(ContentResponse):
    invalidates: List[List[Any]] = Field(default_factory=list)
