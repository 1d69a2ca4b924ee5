"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

import jwt
from fastapi import HTTPException, Request

from src.auth.jwt import verify_token


@dataclass
class CurrentUser:
    id: str
    email: str
    token: str


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def _user_from_token(token: str) -> CurrentUser:
    try:
        payload = verify_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return CurrentUser(id=payload["sub"], email=payload.get("email", ""), token=token)


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via the Supabase session token."""
    token = _extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    return _user_from_token(token)


async def get_optional_user(request: Request) -> CurrentUser | None:
    """Like get_current_user, but anonymous or stale-token callers get None instead of a 401."""
    token = _extract_bearer_token(request)
    if not token:
        return None
    try:
        return _user_from_token(token)
    except HTTPException:
        return None
