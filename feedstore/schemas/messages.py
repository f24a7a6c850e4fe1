"""Schemas for direct messages and derived conversation summaries."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .base import Instant, Record


class Message(Record):
    id: str
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    text: str
    timestamp: Instant
    read: bool = False


class ConversationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    display_name: str = Field(..., alias="displayName")
    profile_pic: str | None = Field(default=None, alias="profilePic")
    last_message: str = Field(..., alias="lastMessage")
    timestamp: Instant
    unread_count: int = Field(default=0, alias="unreadCount")


__all__ = ["ConversationSummary", "Message"]
