"""Message business logic: store user messages and generate assistant replies."""

import asyncio
import logging
import time

from src.chats import repository as chats
from src.chats.service import get_owned_chat
from src.config.settings import get_settings
from src.db.client import get_supabase
from src.db.models import MESSAGES, ROLE_ASSISTANT, ROLE_USER
from src.llm.client import CompletionError, get_llm_client
from src.llm.context import build_context
from src.llm.prompts import build_system_prompt

logger = logging.getLogger(__name__)


def _save_message(chat_id: str, role: str, content: str) -> dict:
    db = get_supabase()
    row = {
        "chat_id": chat_id,
        "role": role,
        "content": content,
    }
    result = db.table(MESSAGES).insert(row).execute()
    return result.data[0]


def _get_recent_messages(chat_id: str, limit: int) -> list[dict]:
    """Last `limit` messages of a chat, oldest first."""
    db = get_supabase()
    result = (
        db.table(MESSAGES)
        .select("role, content, created_at")
        .eq("chat_id", chat_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return list(reversed(result.data))


async def generate_reply(chat_id: str) -> dict | None:
    """Ask the completion provider to answer the chat and store the reply.

    Returns the assistant message, or None if the provider failed. Failures are
    not retried; the caller re-sends to get a new reply.
    """
    settings = get_settings()
    history = await asyncio.to_thread(_get_recent_messages, chat_id, settings.CHAT_CONTEXT_MESSAGES)
    context = build_context(history, build_system_prompt(settings.OPENAI_SYSTEM_PROMPT), settings.CHAT_CONTEXT_MESSAGES)

    start = time.time()
    try:
        client = get_llm_client()
        result = await client.generate(
            context,
            settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
    except CompletionError as exc:
        logger.warning("Completion failed for chat %s (%s): %s", chat_id, exc.kind.value, exc)
        return None

    latency_ms = int((time.time() - start) * 1000)
    logger.info(
        "Completion for chat %s: model=%s input_tokens=%d output_tokens=%d latency_ms=%d",
        chat_id, settings.OPENAI_MODEL, result["input_tokens"], result["output_tokens"], latency_ms,
    )

    assistant_msg = await asyncio.to_thread(_save_message, chat_id, ROLE_ASSISTANT, result["content"])
    await asyncio.to_thread(chats.touch, chat_id)
    return assistant_msg


async def send_message(chat_id: str, user_id: str, content: str) -> tuple[dict, dict | None]:
    """Store the user's message, then generate the assistant reply.

    Returns (user_message, assistant_message_or_None).
    """
    # Supabase calls are blocking; keep them off the event loop.
    await asyncio.to_thread(get_owned_chat, chat_id, user_id)

    user_msg = await asyncio.to_thread(_save_message, chat_id, ROLE_USER, content)
    await asyncio.to_thread(chats.touch, chat_id)

    assistant_msg = await generate_reply(chat_id)
    return user_msg, assistant_msg
