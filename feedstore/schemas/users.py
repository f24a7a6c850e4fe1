"""Schemas for user accounts."""
from __future__ import annotations

from pydantic import Field

from .base import Record


class User(Record):
    username: str
    email: str = ""
    # Plaintext, stored and compared as entered. Unsafe for real accounts.
    password: str = ""
    id: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    bio: str | None = None
    profile_pic: str | None = Field(default=None, alias="profilePic")
    friends: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return self.display_name or self.username


__all__ = ["User"]
