"""System prompt templates."""

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful, concise AI assistant. Provide clear, well-structured responses. "
    "When appropriate, use markdown formatting for readability. "
    "If you're unsure about something, say so rather than guessing."
)


def build_system_prompt(custom_prompt: str | None = None) -> str:
    return (custom_prompt or "").strip() or DEFAULT_SYSTEM_PROMPT
