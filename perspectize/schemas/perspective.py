"""Perspective Pydantic schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from perspectize.models.perspective import Privacy, ReviewStatus


class CategorizedRating(BaseModel):
    category: str = Field(..., min_length=1)
    rating: int


class PerspectiveCreate(BaseModel):
    """Schema for creating a perspective"""
    claim: str
    user_id: int
    content_id: Optional[int] = None
    like: Optional[str] = None
    quality: Optional[int] = None
    agreement: Optional[int] = None
    importance: Optional[int] = None
    confidence: Optional[int] = None
    privacy: Optional[Privacy] = None
    parts: Optional[List[int]] = None
    category: Optional[str] = None
    labels: Optional[List[str]] = None
    description: Optional[str] = None
    categorized_ratings: Optional[List[CategorizedRating]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "claim": "The explanation of recursion is clear",
                "user_id": 1,
                "content_id": 1,
                "quality": 8000,
                "agreement": 6500,
                "privacy": "public",
                "labels": ["programming"]
            }
        }


class PerspectiveUpdate(BaseModel):
    """Schema for updating a perspective; omitted fields are left unchanged"""
    claim: Optional[str] = None
    content_id: Optional[int] = None
    like: Optional[str] = None
    quality: Optional[int] = None
    agreement: Optional[int] = None
    importance: Optional[int] = None
    confidence: Optional[int] = None
    privacy: Optional[Privacy] = None
    parts: Optional[List[int]] = None
    category: Optional[str] = None
    labels: Optional[List[str]] = None
    description: Optional[str] = None
    review_status: Optional[ReviewStatus] = None
    categorized_ratings: Optional[List[CategorizedRating]] = None


class PerspectiveResponse(BaseModel):
    """Schema for perspective response"""
    id: int
    claim: str
    user_id: int
    content_id: Optional[int] = None
    like: Optional[str] = None
    quality: Optional[int] = None
    agreement: Optional[int] = None
    importance: Optional[int] = None
    confidence: Optional[int] = None
    privacy: str
    parts: Optional[List[int]] = None
    category: Optional[str] = None
    labels: Optional[List[str]] = None
    description: Optional[str] = None
    review_status: Optional[str] = None
    categorized_ratings: Optional[List[CategorizedRating]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PerspectivePage(BaseModel):
    items: List[PerspectiveResponse]
    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    total_count: Optional[int] = None
