"""Registration, login and the session context handed to callers.

Passwords are stored and compared exactly as entered. This mirrors the
on-device data this store was built for and must not be reused for a
deployment with real accounts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..constants import CURRENT_USER, USERS
from ..schemas import LoginRequest, RegisterRequest, User, parse_records
from ..storage import DocumentStore
from .user_service import get_current_user

logger = logging.getLogger(__name__)


class RegistrationError(ValueError):
    """Raised when an account cannot be created."""


@dataclass(frozen=True, slots=True)
class SessionContext:
    """The acting user for a sequence of store calls."""

    username: str
    user: User


def _normalize_email(value: object) -> str:
    return str(value or "").strip().lower()


def register_user(
    store: DocumentStore,
    *,
    username: str,
    email: str,
    password: str,
    display_name: str | None = None,
    bio: str | None = None,
) -> SessionContext:
    """Create an account, sign it in and return its session context.

    Emails are unique ignoring case and usernames are unique exactly. Either
    clash raises :class:`RegistrationError`.
    """

    request = RegisterRequest(
        username=username.strip(),
        email=email.strip(),
        password=password,
        display_name=display_name,
        bio=bio,
    )
    email_key = _normalize_email(request.email)

    with store.transaction(USERS, records=(CURRENT_USER,)) as batch:
        users = batch[USERS]
        if any(_normalize_email(existing.get("email")) == email_key for existing in users):
            raise RegistrationError("Email already registered")
        if any(existing.get("username") == request.username for existing in users):
            raise RegistrationError("Username already taken")

        timestamp = store.now()
        user = User(
            id=store.new_id(timestamp),
            username=request.username,
            email=str(request.email),
            password=request.password,
            display_name=request.display_name,
            bio=request.bio,
            friends=[],
        )
        document = user.to_document()
        users.append(document)
        batch.set_record(CURRENT_USER, document)

    logger.info("Registered user %s", user.username)
    return SessionContext(username=user.username, user=user)


def authenticate_user(store: DocumentStore, *, email: str, password: str) -> SessionContext | None:
    """Sign in by email and password; returns ``None`` when they do not match.

    Blank credentials raise ``pydantic.ValidationError``.
    """

    request = LoginRequest(email=email, password=password)
    email_key = _normalize_email(request.email)
    with store.transaction(USERS, records=(CURRENT_USER,)) as batch:
        for document in batch[USERS]:
            if _normalize_email(document.get("email")) == email_key and document.get("password") == request.password:
                batch.set_record(CURRENT_USER, document)
                break
        else:
            logger.info("Failed login for %s", email_key)
            return None

    users = parse_records(User, [document])
    if not users:
        return None
    return SessionContext(username=users[0].username, user=users[0])


def logout_user(store: DocumentStore) -> None:
    with store.locked(CURRENT_USER):
        store.remove_record(CURRENT_USER)


def current_session(store: DocumentStore) -> SessionContext | None:
    user = get_current_user(store)
    if user is None:
        return None
    return SessionContext(username=user.username, user=user)


__all__ = [
    "RegistrationError",
    "SessionContext",
    "authenticate_user",
    "current_session",
    "logout_user",
    "register_user",
]
