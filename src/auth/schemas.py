"""Pydantic schemas for auth requests."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class AuthActionRequest(BaseModel):
    action: Literal["login", "signup", "signout"]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)


class ResendVerificationRequest(BaseModel):
    email: EmailStr | None = None
