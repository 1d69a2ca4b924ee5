"""Data access layer for user profiles."""

from typing import Any

from src.db.client import get_supabase
from src.db.models import USERS


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_by_email(email: str) -> dict | None:
    db = get_supabase()
    result = db.table(USERS).select("*").eq("email", normalize_email(email)).limit(1).execute()
    return result.data[0] if result.data else None


def get_by_id(user_id: str) -> dict | None:
    db = get_supabase()
    result = db.table(USERS).select("*").eq("id", user_id).execute()
    return result.data[0] if result.data else None


def list_all() -> list[dict]:
    db = get_supabase()
    result = db.table(USERS).select("*").order("created_at").execute()
    return result.data


def upsert(profile: dict[str, Any]) -> dict:
    """Insert the profile, or update the row with the same id."""
    db = get_supabase()
    row = {**profile, "email": normalize_email(profile["email"])}
    result = db.table(USERS).upsert(row, on_conflict="id").execute()
    return result.data[0]


def update(user_id: str, data: dict[str, Any]) -> dict | None:
    db = get_supabase()
    result = db.table(USERS).update(data).eq("id", user_id).execute()
    return result.data[0] if result.data else None
