"""Direct messaging between two users."""
from __future__ import annotations

import logging

from ..constants import MESSAGES, NOTIFICATIONS
from ..schemas import ConversationSummary, Message, parse_records
from ..storage import DocumentStore
from .notification_service import NotificationType, build_notification
from .user_service import get_users

logger = logging.getLogger(__name__)


def send_message(store: DocumentStore, *, sender: str, recipient: str, text: str) -> Message:
    """Append an unread message and notify the recipient."""

    if not text.strip():
        raise ValueError("Message text must not be blank")

    timestamp = store.now()
    message = Message(
        id=store.new_id(timestamp),
        sender=sender,
        recipient=recipient,
        text=text,
        timestamp=timestamp,
        read=False,
    )
    with store.transaction(MESSAGES, NOTIFICATIONS) as batch:
        batch[MESSAGES].append(message.to_document())
        if store.settings.message_notifications and sender != recipient:
            notification = build_notification(
                store,
                type_=NotificationType.MESSAGE,
                sender=sender,
                recipient=recipient,
                message_id=message.id,
            )
            batch[NOTIFICATIONS].insert(0, notification.to_document())
    return message


def get_messages(store: DocumentStore) -> list[Message]:
    return parse_records(Message, store.get_collection(MESSAGES))


def get_conversation(store: DocumentStore, first: str, second: str) -> list[Message]:
    """Return the messages exchanged by two users, oldest first."""

    thread = [
        message
        for message in get_messages(store)
        if (message.sender == first and message.recipient == second)
        or (message.sender == second and message.recipient == first)
    ]
    thread.sort(key=lambda message: message.timestamp)
    return thread


def mark_messages_as_read(store: DocumentStore, *, sender: str, recipient: str) -> int:
    """Mark messages sent by ``sender`` to ``recipient`` as read.

    Replies in the other direction are left untouched. Returns the number of
    messages that changed.
    """

    changed = 0
    with store.transaction(MESSAGES) as batch:
        updated = []
        for document in batch[MESSAGES]:
            if document.get("from") == sender and document.get("to") == recipient and not document.get("read"):
                document = {**document, "read": True}
                changed += 1
            updated.append(document)
        batch[MESSAGES] = updated
    return changed


def get_unread_count(store: DocumentStore, username: str) -> int:
    return sum(
        1 for document in store.get_collection(MESSAGES) if document.get("to") == username and not document.get("read")
    )


def list_conversations(store: DocumentStore, username: str) -> list[ConversationSummary]:
    """Summarise every conversation ``username`` takes part in, newest first."""

    messages = get_messages(store)
    latest: dict[str, Message] = {}
    for message in messages:
        if username not in (message.sender, message.recipient):
            continue
        other = message.recipient if message.sender == username else message.sender
        current = latest.get(other)
        if current is None or message.timestamp > current.timestamp:
            latest[other] = message

    users = {user.username: user for user in get_users(store)}
    summaries = []
    for other, last in latest.items():
        profile = users.get(other)
        unread = sum(1 for item in messages if item.sender == other and item.recipient == username and not item.read)
        summaries.append(
            ConversationSummary(
                username=other,
                display_name=profile.label if profile is not None else other,
                profile_pic=profile.profile_pic if profile is not None else None,
                last_message=last.text,
                timestamp=last.timestamp,
                unread_count=unread,
            )
        )
    summaries.sort(key=lambda summary: summary.timestamp, reverse=True)
    return summaries


__all__ = [
    "get_conversation",
    "get_messages",
    "get_unread_count",
    "list_conversations",
    "mark_messages_as_read",
    "send_message",
]
