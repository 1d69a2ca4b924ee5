"""Data access layer for chats."""

from datetime import datetime, timezone

from src.db.client import get_supabase
from src.db.models import CHATS, MESSAGES


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create(user_id: str, title: str) -> dict:
    db = get_supabase()
    result = db.table(CHATS).insert({"user_id": user_id, "title": title}).execute()
    return result.data[0]


def list_by_user(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(CHATS)
        .select("*")
        .eq("user_id", user_id)
        .order("updated_at", desc=True)
        .execute()
    )
    return result.data


def get_owned(chat_id: str, user_id: str) -> dict | None:
    """Fetch a chat only if it belongs to user_id."""
    db = get_supabase()
    result = db.table(CHATS).select("*").eq("id", chat_id).eq("user_id", user_id).execute()
    return result.data[0] if result.data else None


def list_messages(chat_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(MESSAGES)
        .select("*")
        .eq("chat_id", chat_id)
        .order("created_at")
        .execute()
    )
    return result.data


def touch(chat_id: str) -> None:
    db = get_supabase()
    db.table(CHATS).update({"updated_at": _now_iso()}).eq("id", chat_id).execute()


def delete(chat_id: str) -> bool:
    db = get_supabase()
    db.table(MESSAGES).delete().eq("chat_id", chat_id).execute()
    result = db.table(CHATS).delete().eq("id", chat_id).execute()
    return bool(result.data)
