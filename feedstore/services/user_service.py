"""User records and the persisted session pointer."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from ..constants import CURRENT_USER, USERS
from ..schemas import User, parse_records
from ..storage import CollectionBatch, DocumentStore

logger = logging.getLogger(__name__)

UserInput = User | Mapping[str, Any]


def _to_wire(user: UserInput) -> dict[str, Any]:
    """Return the stored (camelCase) form of the fields the caller supplied."""
    if isinstance(user, User):
        return user.model_dump(mode="json", by_alias=True, exclude_unset=True)
    wire: dict[str, Any] = {}
    for key, value in user.items():
        field = User.model_fields.get(key)
        wire[(field.alias or key) if field is not None else key] = value
    return wire


def upsert_user(batch: CollectionBatch, updates: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow-merge ``updates`` into the users held by ``batch``."""
    username = updates.get("username")
    if not username:
        raise ValueError("username is required")
    users = batch[USERS]
    for index, existing in enumerate(users):
        if existing.get("username") == username:
            merged = {**existing, **updates}
            users[index] = merged
            return merged
    merged = dict(updates)
    users.append(merged)
    return merged


def save_user(store: DocumentStore, user: UserInput) -> User:
    """Insert or merge a user by username and make it the session user."""
    updates = _to_wire(user)
    with store.transaction(USERS, records=(CURRENT_USER,)) as batch:
        merged = upsert_user(batch, updates)
        batch.set_record(CURRENT_USER, merged)
    return User.model_validate(merged)


def get_users(store: DocumentStore) -> list[User]:
    return parse_records(User, store.get_collection(USERS))


def get_user_by_username(store: DocumentStore, username: str) -> User | None:
    for user in get_users(store):
        if user.username == username:
            return user
    return None


def get_current_user(store: DocumentStore) -> User | None:
    document = store.get_record(CURRENT_USER)
    if document is None:
        return None
    records = parse_records(User, [document])
    return records[0] if records else None


def update_current_user(store: DocumentStore, updates: UserInput) -> User | None:
    """Merge ``updates`` over the session user and persist the result.

    Returns ``None`` when nobody is signed in.
    """
    with store.transaction(USERS, records=(CURRENT_USER,)) as batch:
        current = batch.record(CURRENT_USER)
        if current is None:
            logger.debug("No session user to update")
            return None
        merged = upsert_user(batch, {**current, **_to_wire(updates), "username": current.get("username")})
        batch.set_record(CURRENT_USER, merged)
    return User.model_validate(merged)


def search_users(store: DocumentStore, query: str = "", *, exclude: str | None = None) -> list[User]:
    """Case-insensitive match on username or display name."""
    needle = query.strip().lower()
    results = []
    for user in get_users(store):
        if exclude is not None and user.username == exclude:
            continue
        if needle and needle not in user.username.lower() and needle not in (user.display_name or "").lower():
            continue
        results.append(user)
    return results


__all__ = [
    "get_current_user",
    "get_user_by_username",
    "get_users",
    "save_user",
    "search_users",
    "update_current_user",
    "upsert_user",
]
