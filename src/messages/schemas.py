"""Pydantic schemas for message requests and responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=10000)


class MessageResponse(BaseModel):
    id: str
    chat_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageListResponse(BaseModel):
    status: str = "success"
    data: list[MessageResponse]


class MessageExchange(BaseModel):
    user_message: MessageResponse
    assistant_message: MessageResponse | None = None
