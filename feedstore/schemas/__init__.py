"""Convenience exports for schema layer."""
from .auth import LoginRequest, RegisterRequest
from .base import Instant, Record, format_instant, parse_records
from .friends import FriendRequest, FriendRequestStatus
from .messages import ConversationSummary, Message
from .notifications import (
    CommentNotification,
    FriendRequestNotification,
    LikeNotification,
    MessageNotification,
    Notification,
    NotificationBase,
    notification_adapter,
)
from .posts import Comment, Like, Post, PostEngagement
from .users import User

__all__ = [
    "Comment",
    "CommentNotification",
    "ConversationSummary",
    "FriendRequest",
    "FriendRequestNotification",
    "FriendRequestStatus",
    "Instant",
    "Like",
    "LikeNotification",
    "LoginRequest",
    "Message",
    "MessageNotification",
    "Notification",
    "NotificationBase",
    "Post",
    "PostEngagement",
    "Record",
    "RegisterRequest",
    "User",
    "format_instant",
    "parse_records",
    "notification_adapter",
]
