"""Schemas for posts and their engagement records."""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from .base import Instant, Record


class Post(Record):
    id: str
    username: str
    images: list[str] = Field(default_factory=list)
    caption: str = ""
    timestamp: Instant


class Comment(Record):
    id: str
    post_id: str = Field(..., alias="postId")
    username: str
    text: str
    timestamp: Instant


class Like(Record):
    id: str
    post_id: str = Field(..., alias="postId")
    username: str
    timestamp: Instant | None = None


@dataclass(frozen=True, slots=True)
class PostEngagement:
    """Like and comment totals for one post, computed on read."""

    post_id: str
    likes: int
    comments: int
    liked_by_viewer: bool = False


__all__ = ["Comment", "Like", "Post", "PostEngagement"]
