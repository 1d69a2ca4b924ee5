"""Pydantic schemas for chat requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.messages.schemas import MessageResponse


# --- Requests ---

class CreateChatRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)


# --- Responses ---

class ChatResponse(BaseModel):
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChatDetailResponse(ChatResponse):
    messages: list[MessageResponse] = Field(default_factory=list)


class ChatListResponse(BaseModel):
    status: str = "success"
    data: list[ChatResponse]
