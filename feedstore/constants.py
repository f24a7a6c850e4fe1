"""Storage keys shared by every layer."""
from __future__ import annotations

from typing import Final

USERS: Final = "users"
POSTS: Final = "posts"
COMMENTS: Final = "comments"
LIKES: Final = "likes"
MESSAGES: Final = "messages"
FRIEND_REQUESTS: Final = "friendRequests"
NOTIFICATIONS: Final = "notifications"

CURRENT_USER: Final = "currentUser"

COLLECTION_KEYS: Final[tuple[str, ...]] = (
    USERS,
    POSTS,
    COMMENTS,
    LIKES,
    MESSAGES,
    FRIEND_REQUESTS,
    NOTIFICATIONS,
)

# Keys removed by a data clear; anything else in the backend survives it.
CLEARABLE_KEYS: Final[tuple[str, ...]] = COLLECTION_KEYS + (CURRENT_USER,)

__all__ = [
    "USERS",
    "POSTS",
    "COMMENTS",
    "LIKES",
    "MESSAGES",
    "FRIEND_REQUESTS",
    "NOTIFICATIONS",
    "CURRENT_USER",
    "COLLECTION_KEYS",
    "CLEARABLE_KEYS",
]
