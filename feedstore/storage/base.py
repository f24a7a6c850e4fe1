"""Raw key/value backend contract shared by every storage implementation."""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable, Mapping

# Locks for backends that point at the same storage target, keyed on
# ``(lock_scope, key)``.
_SHARED_LOCKS: dict[tuple[str, str], threading.RLock] = {}
_SHARED_LOCKS_GUARD = threading.Lock()


class StoreReadError(RuntimeError):
    """Raised by a backend when a key cannot be read."""


class StoreWriteError(RuntimeError):
    """Raised when the underlying storage rejects a write."""


class KeyValueBackend(ABC):
    """String-to-string storage with whole-value reads and writes.

    Backends also own the per-key locks used by
    :meth:`feedstore.storage.DocumentStore.transaction`. Backends that report
    the same :attr:`lock_scope` share one lock per key for the whole process,
    so stores opened separately over one database or directory still take
    turns writing a collection.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def lock_scope(self) -> str | None:
        """Identity of the storage target, or ``None`` for instance-local locks."""
        return None

    def lock_for(self, key: str) -> threading.RLock:
        scope = self.lock_scope
        if scope is None:
            with self._locks_guard:
                lock = self._locks.get(key)
                if lock is None:
                    lock = self._locks[key] = threading.RLock()
                return lock
        with _SHARED_LOCKS_GUARD:
            lock = _SHARED_LOCKS.get((scope, key))
            if lock is None:
                lock = _SHARED_LOCKS[(scope, key)] = threading.RLock()
            return lock

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored text for ``key`` or ``None`` when absent."""

    @abstractmethod
    def set_items(self, items: Mapping[str, str]) -> None:
        """Persist every pair, replacing prior values."""

    @abstractmethod
    def remove_items(self, keys: Iterable[str]) -> None:
        """Delete the given keys; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key currently stored."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every key, including ones this package never wrote."""

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def close(self) -> None:
        """Release backend resources; a no-op unless overridden."""


__all__ = ["KeyValueBackend", "StoreReadError", "StoreWriteError"]
