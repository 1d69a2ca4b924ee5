"""Profile directory endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from src.auth.dependencies import CurrentUser, get_current_user
from src.users import repository
from src.users.schemas import UserListResponse, UserResponse

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=UserListResponse, summary="List users", description="List all user profiles.")
def list_users(user: CurrentUser = Depends(get_current_user)):
    return UserListResponse(data=repository.list_all())


@router.get("/{user_id}", summary="Get a user", description="Retrieve a single user profile by id.")
def get_user(user_id: uuid.UUID, user: CurrentUser = Depends(get_current_user)):
    profile = repository.get_by_id(str(user_id))
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return {"status": "success", "data": UserResponse.model_validate(profile).model_dump(mode="json")}
