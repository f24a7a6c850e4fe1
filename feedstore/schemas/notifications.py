"""Schemas for notifications.

Notifications are a tagged union on ``type``. Like and comment notifications
must carry the post they refer to, including a snapshot of the post as it
was when the notification was raised.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from .base import Instant, Record
from .posts import Post


class NotificationBase(Record):
    id: str
    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    message: str
    timestamp: Instant
    read: bool = False


class LikeNotification(NotificationBase):
    type: Literal["like"] = "like"
    post_id: str = Field(..., alias="postId")
    post_data: Post = Field(..., alias="postData")


class CommentNotification(NotificationBase):
    type: Literal["comment"] = "comment"
    post_id: str = Field(..., alias="postId")
    post_data: Post = Field(..., alias="postData")


class FriendRequestNotification(NotificationBase):
    type: Literal["friend_request"] = "friend_request"
    request_id: str | None = Field(default=None, alias="requestId")


class MessageNotification(NotificationBase):
    type: Literal["message"] = "message"
    message_id: str | None = Field(default=None, alias="messageId")


Notification = Annotated[
    Union[LikeNotification, CommentNotification, FriendRequestNotification, MessageNotification],
    Field(discriminator="type"),
]

notification_adapter: TypeAdapter[Notification] = TypeAdapter(Notification)


__all__ = [
    "CommentNotification",
    "FriendRequestNotification",
    "LikeNotification",
    "MessageNotification",
    "Notification",
    "NotificationBase",
    "notification_adapter",
]
