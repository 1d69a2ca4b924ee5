"""Identity gateway: signup, login, signout and email verification via Supabase Auth."""

import logging

from fastapi import HTTPException
from supabase import AuthError

from src.auth.errors import AuthErrorKind, auth_http_error, classify, provider_http_error
from src.config.settings import get_settings
from src.db.client import create_auth_client, get_supabase
from src.users import repository as users
from src.users.schemas import UserResponse

logger = logging.getLogger(__name__)


def _profile_from_user(user, name: str | None = None) -> dict:
    metadata = user.user_metadata or {}
    return {
        "id": user.id,
        "email": user.email,
        "name": name or metadata.get("name") or user.email.split("@")[0],
        "email_verified": bool(user.email_confirmed_at),
    }


def _auth_payload(profile: dict, session) -> dict:
    data = {"user": UserResponse.model_validate(profile).model_dump(mode="json")}
    if session is not None:
        data["token"] = session.access_token
    return data


def _ensure_profile(user) -> dict:
    """Return the profile row for a signed-in user, creating it if missing."""
    profile = users.get_by_id(user.id)
    if profile is None:
        logger.info("Creating missing profile for user %s", user.id)
        return users.upsert(_profile_from_user(user))
    if user.email_confirmed_at and not profile.get("email_verified"):
        return users.update(user.id, {"email_verified": True}) or profile
    return profile


def login(email: str, password: str) -> dict:
    if users.get_by_email(email) is None:
        raise auth_http_error(AuthErrorKind.UNKNOWN_EMAIL)

    client = create_auth_client()
    try:
        result = client.auth.sign_in_with_password({
            "email": users.normalize_email(email),
            "password": password,
        })
    except AuthError as exc:
        raise provider_http_error(exc, "login") from exc

    if result.user is None or result.session is None:
        raise auth_http_error(AuthErrorKind.PROVIDER_FAILURE)

    profile = _ensure_profile(result.user)
    logger.info("User %s logged in", result.user.id)
    return _auth_payload(profile, result.session)


def _create_account(email: str, password: str, name: str):
    """Create the provider account. Returns (user, session_or_None)."""
    settings = get_settings()

    if settings.AUTH_AUTO_CONFIRM_EMAIL:
        created = get_supabase().auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"name": name},
        })
        session = None
        try:
            session = create_auth_client().auth.sign_in_with_password({"email": email, "password": password}).session
        except AuthError as exc:
            logger.warning("Auto sign-in after signup failed for %s: %s", created.user.id, exc.message)
        return created.user, session

    result = create_auth_client().auth.sign_up({
        "email": email,
        "password": password,
        "options": {
            "data": {"name": name},
            "email_redirect_to": settings.email_redirect_url,
        },
    })
    if result.user is not None and result.user.identities == []:
        # Supabase answers a repeated signup with an identity-less user instead of an error.
        raise auth_http_error(AuthErrorKind.DUPLICATE_EMAIL)
    return result.user, result.session


def _write_profile(profile: dict) -> dict:
    """Upsert the profile row, retrying once."""
    try:
        return users.upsert(profile)
    except Exception as exc:
        logger.warning("Profile write for user %s failed (%s), retrying", profile["id"], exc)
        return users.upsert(profile)


def _discard_account(user_id: str) -> None:
    """Delete a provider account that has no profile row, so the email can sign up again."""
    try:
        get_supabase().auth.admin.delete_user(user_id)
    except AuthError as exc:
        logger.error("Failed to remove account %s after profile failure: %s", user_id, exc.message)


def signup(name: str, email: str, password: str) -> dict:
    email = users.normalize_email(email)
    if users.get_by_email(email) is not None:
        raise auth_http_error(AuthErrorKind.DUPLICATE_EMAIL)

    try:
        user, session = _create_account(email, password, name)
    except AuthError as exc:
        raise provider_http_error(exc, "signup") from exc

    if user is None:
        raise HTTPException(status_code=500, detail="Failed to create user")

    profile = _profile_from_user(user, name=name)
    try:
        profile = _write_profile(profile)
    except Exception:
        if not get_settings().AUTH_AUTO_CONFIRM_EMAIL:
            # Confirming the email recreates the row from the account metadata.
            logger.exception("Failed to write profile for new user %s", user.id)
        else:
            logger.exception("Failed to write profile for new user %s, removing account", user.id)
            _discard_account(user.id)
            raise HTTPException(status_code=500, detail="Failed to create user")

    logger.info("User %s signed up (session issued: %s)", user.id, session is not None)
    return _auth_payload(profile, session)


def signout(token: str) -> None:
    try:
        get_supabase().auth.admin.sign_out(token)
    except AuthError as exc:
        raise provider_http_error(exc, "signout") from exc


def resend_verification(email: str) -> None:
    settings = get_settings()
    try:
        create_auth_client().auth.resend({
            "type": "signup",
            "email": users.normalize_email(email),
            "options": {"email_redirect_to": settings.email_redirect_url},
        })
    except AuthError as exc:
        raise provider_http_error(exc, "resend verification") from exc
    logger.info("Verification email resent")


def confirm_email(token_hash: str, otp_type: str = "email") -> dict:
    try:
        result = create_auth_client().auth.verify_otp({"token_hash": token_hash, "type": otp_type})
    except AuthError as exc:
        if classify(exc) is AuthErrorKind.PROVIDER_FAILURE and getattr(exc, "status", None) in (400, 401, 403, 404):
            raise auth_http_error(AuthErrorKind.INVALID_LINK) from exc
        raise provider_http_error(exc, "email confirmation") from exc

    if result.user is None:
        raise auth_http_error(AuthErrorKind.INVALID_LINK)

    profile = _ensure_profile(result.user)
    return _auth_payload(profile, result.session)
