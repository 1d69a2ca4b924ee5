"""Conversation window construction for LLM calls."""

DEFAULT_MAX_MESSAGES = 50


def build_context(
    chat_messages: list[dict],
    system_prompt: str,
    max_messages: int = DEFAULT_MAX_MESSAGES,
) -> list[dict]:
    """Return the system prompt followed by the most recent messages, oldest first.

    chat_messages must already be in creation order.
    """
    recent = chat_messages[-max_messages:] if max_messages > 0 else []
    return [{"role": "system", "content": system_prompt}] + [
        {"role": msg["role"], "content": msg["content"]} for msg in recent
    ]
