"""Chat endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query

from src.auth.dependencies import CurrentUser, get_current_user
from src.chats.schemas import ChatDetailResponse, ChatListResponse, ChatResponse, CreateChatRequest
from src.chats.service import (
    create_chat,
    delete_chat,
    get_chat_by_id,
    get_chat_list,
    get_chat_messages,
)
from src.messages.schemas import MessageListResponse

router = APIRouter(prefix="/api/chat", tags=["Chats"])

# Read-only view kept for clients of the older /api/chats path.
chats_router = APIRouter(prefix="/api/chats", tags=["Chats"])


@router.post("", status_code=201, summary="Create a chat", description="Create a new chat owned by the authenticated user.")
def create(body: CreateChatRequest, user: CurrentUser = Depends(get_current_user)):
    chat = create_chat(user.id, body.title)
    return {"status": "success", "data": ChatResponse.model_validate(chat).model_dump(mode="json")}


@router.get("", response_model=ChatListResponse, summary="List chats", description="List the authenticated user's chats, most recently updated first.")
def list_all(user: CurrentUser = Depends(get_current_user)):
    return ChatListResponse(data=get_chat_list(user.id))


@router.get("/{chat_id}", summary="Get a chat", description="Retrieve a single chat with its messages in creation order.")
def get(chat_id: uuid.UUID, user: CurrentUser = Depends(get_current_user)):
    chat = get_chat_by_id(str(chat_id), user.id)
    return {"status": "success", "data": ChatDetailResponse.model_validate(chat).model_dump(mode="json")}


@router.delete("/{chat_id}", status_code=204, summary="Delete a chat", description="Permanently delete a chat and all its messages.")
def delete(chat_id: uuid.UUID, user: CurrentUser = Depends(get_current_user)):
    delete_chat(str(chat_id), user.id)


@chats_router.get("/{chat_id}", summary="Get a chat or its messages", description="Chat with messages, or only the messages when `messagesOnly=true`.")
def get_legacy(
    chat_id: uuid.UUID,
    messages_only: bool = Query(False, alias="messagesOnly"),
    user: CurrentUser = Depends(get_current_user),
):
    if messages_only:
        return MessageListResponse(data=get_chat_messages(str(chat_id), user.id))
    chat = get_chat_by_id(str(chat_id), user.id)
    return {"status": "success", "data": ChatDetailResponse.model_validate(chat).model_dump(mode="json")}
