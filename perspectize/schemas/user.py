"""User Pydantic schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for creating a user"""
    username: str
    email: str

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "email": "alice@example.com"
            }
        }


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    username: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserMutationResponse(UserResponse):
    invalidates: List[List[Any]] = Field(default_factory=list)
