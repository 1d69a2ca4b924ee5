"""Pydantic schemas for user profiles."""

from datetime import datetime

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    name: str | None = None
    email: str
    email_verified: bool = False
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    status: str = "success"
    data: list[UserResponse]
