"""Message endpoints: list and send."""

import uuid

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user
from src.chats.service import get_chat_messages
from src.messages.schemas import MessageExchange, MessageListResponse, SendMessageRequest
from src.messages.service import send_message

router = APIRouter(prefix="/api/chat/{chat_id}", tags=["Messages"])


@router.get("/message", response_model=MessageListResponse, summary="List messages", description="List a chat's messages in creation order.")
def list_messages(chat_id: uuid.UUID, user: CurrentUser = Depends(get_current_user)):
    return MessageListResponse(data=get_chat_messages(str(chat_id), user.id))


@router.post("/message", status_code=201, summary="Send a message", description=(
    "Store the user's message and request an assistant reply. "
    "`assistant_message` is null when the completion provider failed; the user message is kept."
))
async def send(chat_id: uuid.UUID, body: SendMessageRequest, user: CurrentUser = Depends(get_current_user)):
    user_msg, assistant_msg = await send_message(str(chat_id), user.id, body.message)
    exchange = MessageExchange(user_message=user_msg, assistant_message=assistant_msg)
    return {"status": "success", "data": exchange.model_dump(mode="json")}
