"""User API endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from perspectize.core.database import get_db
from perspectize.core.user_service import UserService
from perspectize.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserMutationResponse
)
from perspectize.utils import query_keys

router = APIRouter()


def _mutation_response(user) -> UserMutationResponse:
    response = UserMutationResponse.model_validate(user)
    response.invalidates = [
        list(query_keys.users.lists()),
        list(query_keys.users.detail(user.id))
    ]
    return response


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_all()


@router.post("", response_model=UserMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user"""
    user = await UserService(db).create(user_data.username, user_data.email)
    return _mutation_response(user)


@router.get("/by-username/{username}", response_model=UserResponse)
async def get_user_by_username(
    username: str,
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).get_by_username(username)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).get_by_id(user_id)


@router.patch("/{user_id}", response_model=UserMutationResponse)
async def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Change a user's username or email"""
    user = await UserService(db).update(
        user_id,
        username=user_update.username,
        email=user_update.email
    )
    return _mutation_response(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Delete a user; their perspectives move to the [deleted] user"""
    await UserService(db).delete(user_id)
    return None
