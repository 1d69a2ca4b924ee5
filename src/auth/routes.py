"""Auth endpoints: login, signup, signout, email verification."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse

from src.auth import service
from src.auth.dependencies import CurrentUser, get_optional_user
from src.auth.schemas import AuthActionRequest, LoginRequest, ResendVerificationRequest, SignupRequest
from src.middleware.error_handler import format_validation_errors

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _parse(model: type[BaseModel], data: dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=format_validation_errors(exc.errors()))


def _success(data: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "success", "data": data})


@router.post("", summary="Login, signup or signout", description="Dispatch on the `action` field: `login`, `signup` or `signout`.")
def auth_action(
    body: dict[str, Any] = Body(...),
    user: CurrentUser | None = Depends(get_optional_user),
):
    if not body.get("action"):
        raise HTTPException(status_code=400, detail="Action field is required")
    action = _parse(AuthActionRequest, {"action": body["action"]}).action

    if action == "login":
        creds = _parse(LoginRequest, body)
        return _success(service.login(creds.email, creds.password))

    if action == "signup":
        req = _parse(SignupRequest, body)
        return _success(service.signup(req.name, req.email, req.password), status_code=201)

    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    service.signout(user.token)
    return _success({"message": "Signed out successfully"})


@router.post("/resend-verification", summary="Resend verification email", description="Resend the signup confirmation email to the given address, or to the signed-in user.")
def resend_verification(
    body: ResendVerificationRequest | None = None,
    user: CurrentUser | None = Depends(get_optional_user),
):
    email = body.email if body else None
    if not email and user is not None:
        email = user.email or None
    if not email:
        raise HTTPException(status_code=400, detail="No email provided and not authenticated")

    service.resend_verification(email)
    return _success({"message": "Verification email sent successfully"})


@router.get("/confirm", summary="Confirm email", description="Verify the token hash from a confirmation link and start a session.")
def confirm(
    token_hash: str = Query(..., min_length=1),
    otp_type: str = Query("email", alias="type"),
):
    return _success(service.confirm_email(token_hash, otp_type))
