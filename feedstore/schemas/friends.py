"""Schemas for friend requests."""
from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import Instant, Record

FriendRequestStatus = Literal["pending", "accepted"]


class FriendRequest(Record):
    id: str
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    status: FriendRequestStatus = "pending"
    timestamp: Instant


__all__ = ["FriendRequest", "FriendRequestStatus"]
