"""Verification of Supabase-issued access tokens."""

import jwt

from src.config.settings import get_settings

AUDIENCE = "authenticated"


def verify_token(token: str) -> dict:
    """Decode and validate a session JWT. Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError."""
    settings = get_settings()
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        audience=AUDIENCE,
        options={"require": ["sub", "exp"]},
    )
