"""Notification helper logic for the local document store."""
from __future__ import annotations

import logging
from enum import StrEnum

from pydantic import ValidationError

from ..constants import NOTIFICATIONS
from ..schemas import Notification, Post, notification_adapter
from ..storage import DocumentStore

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    LIKE = "like"
    COMMENT = "comment"
    FRIEND_REQUEST = "friend_request"
    MESSAGE = "message"


DEFAULT_MESSAGES: dict[NotificationType, str] = {
    NotificationType.LIKE: "liked your post",
    NotificationType.COMMENT: "commented on your post",
    NotificationType.FRIEND_REQUEST: "sent you a friend request",
    NotificationType.MESSAGE: "sent you a message",
}


def build_notification(
    store: DocumentStore,
    *,
    type_: NotificationType | str,
    sender: str,
    recipient: str,
    message: str | None = None,
    post: Post | None = None,
    request_id: str | None = None,
    message_id: str | None = None,
) -> Notification:
    """Stamp and validate a notification without persisting it.

    Raises ``pydantic.ValidationError`` when the payload does not fit the
    variant named by ``type_`` (for example a like without a post).
    """

    kind = NotificationType(type_)
    timestamp = store.now()
    payload: dict[str, object] = {
        "id": store.new_id(timestamp),
        "type": kind.value,
        "from": sender,
        "to": recipient,
        "message": message or DEFAULT_MESSAGES[kind],
        "timestamp": timestamp,
        "read": False,
    }
    if post is not None:
        payload["postId"] = post.id
        payload["postData"] = post.to_document()
    if request_id is not None:
        payload["requestId"] = request_id
    if message_id is not None:
        payload["messageId"] = message_id
    return notification_adapter.validate_python(payload)


def add_notification(
    store: DocumentStore,
    *,
    type_: NotificationType | str,
    sender: str,
    recipient: str,
    message: str | None = None,
    post: Post | None = None,
    request_id: str | None = None,
    message_id: str | None = None,
) -> Notification:
    """Persist a new notification at the head of the collection."""

    notification = build_notification(
        store,
        type_=type_,
        sender=sender,
        recipient=recipient,
        message=message,
        post=post,
        request_id=request_id,
        message_id=message_id,
    )
    with store.transaction(NOTIFICATIONS) as batch:
        batch[NOTIFICATIONS].insert(0, notification.to_document())
    return notification


def get_notifications(store: DocumentStore) -> list[Notification]:
    """Return every notification, most recent first."""

    notifications: list[Notification] = []
    for document in store.get_collection(NOTIFICATIONS):
        try:
            notifications.append(notification_adapter.validate_python(document))
        except ValidationError as exc:
            logger.warning("Skipping malformed notification %r (%s errors)", document.get("id"), exc.error_count())
    return notifications


def list_notifications(store: DocumentStore, username: str) -> list[Notification]:
    """Return notifications addressed to ``username``, most recent first."""

    return [item for item in get_notifications(store) if item.recipient == username]


def mark_notification_as_read(store: DocumentStore, notification_id: str) -> bool:
    with store.transaction(NOTIFICATIONS) as batch:
        batch[NOTIFICATIONS] = [
            {**document, "read": True} if document.get("id") == notification_id else document
            for document in batch[NOTIFICATIONS]
        ]
        found = any(document.get("id") == notification_id for document in batch[NOTIFICATIONS])
    if not found:
        logger.debug("Notification %s not found", notification_id)
    return found


def mark_all_notifications_as_read(store: DocumentStore, *, recipient: str | None = None) -> int:
    """Flip ``read`` on every notification, or only on ``recipient``'s.

    Returns how many notifications changed state.
    """

    changed = 0
    with store.transaction(NOTIFICATIONS) as batch:
        updated = []
        for document in batch[NOTIFICATIONS]:
            if not document.get("read") and (recipient is None or document.get("to") == recipient):
                document = {**document, "read": True}
                changed += 1
            updated.append(document)
        batch[NOTIFICATIONS] = updated
    return changed


def get_unread_notification_count(store: DocumentStore, username: str) -> int:
    """Return the unread notification total for the supplied user."""

    if not username:
        raise ValueError("username is required to count unread notifications")
    return sum(
        1
        for document in store.get_collection(NOTIFICATIONS)
        if document.get("to") == username and not document.get("read")
    )


__all__ = [
    "DEFAULT_MESSAGES",
    "NotificationType",
    "add_notification",
    "build_notification",
    "get_notifications",
    "get_unread_notification_count",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
]
