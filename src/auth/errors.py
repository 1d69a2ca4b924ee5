"""Classification of identity-provider failures into user-facing error kinds."""

import logging
from enum import Enum

from fastapi import HTTPException
from supabase import AuthError

logger = logging.getLogger(__name__)


class AuthErrorKind(str, Enum):
    UNKNOWN_EMAIL = "unknown_email"
    UNVERIFIED_EMAIL = "unverified_email"
    BAD_CREDENTIALS = "bad_credentials"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_INPUT = "invalid_input"
    INVALID_LINK = "invalid_link"
    RATE_LIMITED = "rate_limited"
    PROVIDER_FAILURE = "provider_failure"


STATUS_BY_KIND = {
    AuthErrorKind.UNKNOWN_EMAIL: 404,
    AuthErrorKind.UNVERIFIED_EMAIL: 403,
    AuthErrorKind.BAD_CREDENTIALS: 401,
    AuthErrorKind.DUPLICATE_EMAIL: 409,
    AuthErrorKind.INVALID_INPUT: 400,
    AuthErrorKind.INVALID_LINK: 400,
    AuthErrorKind.RATE_LIMITED: 429,
    AuthErrorKind.PROVIDER_FAILURE: 500,
}

DEFAULT_MESSAGES = {
    AuthErrorKind.UNKNOWN_EMAIL: "Email is not registered",
    AuthErrorKind.UNVERIFIED_EMAIL: "Email address has not been verified",
    AuthErrorKind.BAD_CREDENTIALS: "Invalid email or password",
    AuthErrorKind.DUPLICATE_EMAIL: "Email already registered",
    AuthErrorKind.INVALID_LINK: "Verification link is invalid or has expired",
    AuthErrorKind.RATE_LIMITED: "Too many requests, try again later",
    AuthErrorKind.PROVIDER_FAILURE: "Authentication service unavailable",
}

# Supabase Auth error codes (AuthApiError.code)
_KIND_BY_CODE = {
    "email_not_confirmed": AuthErrorKind.UNVERIFIED_EMAIL,
    "invalid_credentials": AuthErrorKind.BAD_CREDENTIALS,
    "user_already_exists": AuthErrorKind.DUPLICATE_EMAIL,
    "email_exists": AuthErrorKind.DUPLICATE_EMAIL,
    "weak_password": AuthErrorKind.INVALID_INPUT,
    "validation_failed": AuthErrorKind.INVALID_INPUT,
    "email_address_invalid": AuthErrorKind.INVALID_INPUT,
    "otp_expired": AuthErrorKind.INVALID_LINK,
    "flow_state_expired": AuthErrorKind.INVALID_LINK,
    "bad_code_verifier": AuthErrorKind.INVALID_LINK,
    "over_email_send_rate_limit": AuthErrorKind.RATE_LIMITED,
    "over_request_rate_limit": AuthErrorKind.RATE_LIMITED,
}


def classify(exc: AuthError) -> AuthErrorKind:
    kind = _KIND_BY_CODE.get(getattr(exc, "code", None) or "")
    if kind is not None:
        return kind
    if getattr(exc, "status", None) == 429:
        return AuthErrorKind.RATE_LIMITED
    return AuthErrorKind.PROVIDER_FAILURE


def auth_http_error(kind: AuthErrorKind, message: str | None = None) -> HTTPException:
    return HTTPException(status_code=STATUS_BY_KIND[kind], detail=message or DEFAULT_MESSAGES.get(kind, "Invalid request"))


def provider_http_error(exc: AuthError, action: str) -> HTTPException:
    """Translate a Supabase Auth error into the HTTPException for its kind."""
    kind = classify(exc)
    if kind is AuthErrorKind.PROVIDER_FAILURE:
        logger.error("Auth provider failure during %s: %s (code=%s)", action, exc.message, getattr(exc, "code", None))
        return auth_http_error(kind)
    logger.info("Auth %s rejected: %s", action, kind.value)
    # Input problems carry the provider's own explanation (e.g. password rules).
    message = exc.message if kind is AuthErrorKind.INVALID_INPUT else None
    return auth_http_error(kind, message)
