"""Process-local backend for ephemeral stores."""
from __future__ import annotations

import threading
from typing import Iterable, Mapping

from .base import KeyValueBackend


class MemoryKeyValueBackend(KeyValueBackend):
    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._data: dict[str, str] = dict(initial or {})
        self._guard = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._guard:
            return self._data.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        with self._guard:
            self._data.update(items)

    def remove_items(self, keys: Iterable[str]) -> None:
        with self._guard:
            for key in keys:
                self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._guard:
            return list(self._data)

    def clear(self) -> None:
        with self._guard:
            self._data.clear()


__all__ = ["MemoryKeyValueBackend"]
