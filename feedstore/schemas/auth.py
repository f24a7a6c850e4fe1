"""Pydantic schemas for registration and login."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=32)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    display_name: str | None = Field(default=None, max_length=64)
    bio: str | None = Field(default=None, max_length=500)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


__all__ = ["LoginRequest", "RegisterRequest"]
