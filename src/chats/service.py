"""Business logic for chats with ownership verification."""

from fastapi import HTTPException

from src.chats import repository


def get_owned_chat(chat_id: str, user_id: str) -> dict:
    """Return the chat, or 404 when it is missing or owned by someone else."""
    chat = repository.get_owned(chat_id, user_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


def create_chat(user_id: str, title: str) -> dict:
    return repository.create(user_id, title)


def get_chat_list(user_id: str) -> list[dict]:
    return repository.list_by_user(user_id)


def get_chat_by_id(chat_id: str, user_id: str) -> dict:
    chat = get_owned_chat(chat_id, user_id)
    return {**chat, "messages": repository.list_messages(chat_id)}


def get_chat_messages(chat_id: str, user_id: str) -> list[dict]:
    get_owned_chat(chat_id, user_id)
    return repository.list_messages(chat_id)


def delete_chat(chat_id: str, user_id: str) -> None:
    get_owned_chat(chat_id, user_id)
    repository.delete(chat_id)
