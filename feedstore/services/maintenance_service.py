"""Bulk removal of stored data."""
from __future__ import annotations

import logging

from ..constants import CLEARABLE_KEYS, COLLECTION_KEYS
from ..storage import DocumentStore

logger = logging.getLogger(__name__)


def clear_all_data(store: DocumentStore) -> list[str]:
    """Remove the seven collections and the session record.

    Keys this package does not own are left in place. Returns the keys that
    existed before the clear.
    """

    with store.locked(*CLEARABLE_KEYS):
        present = [key for key in store.backend.keys() if key in CLEARABLE_KEYS]
        store.backend.remove_items(CLEARABLE_KEYS)
    logger.info("Cleared %s", ", ".join(present) or "nothing")
    return present


def reset_database(store: DocumentStore) -> int:
    """Wipe every key in the backend, including ones this package never wrote."""

    with store.locked(*CLEARABLE_KEYS):
        keys = store.backend.keys()
        store.backend.clear()
    logger.warning("Reset storage, removed %s keys", len(keys))
    return len(keys)


def collection_counts(store: DocumentStore) -> dict[str, int]:
    return {name: len(store.get_collection(name)) for name in COLLECTION_KEYS}


__all__ = ["clear_all_data", "collection_counts", "reset_database"]
