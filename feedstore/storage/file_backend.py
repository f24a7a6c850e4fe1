"""Key/value backend that keeps one JSON file per key in a directory."""
from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, Mapping

from .base import KeyValueBackend, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_SUFFIX = ".json"


class FileKeyValueBackend(KeyValueBackend):
    """Stores ``<key>.json`` files under ``root``.

    Each file is replaced atomically. A multi-key write is applied file by
    file, so a failure part way through leaves earlier keys written.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        super().__init__()
        self.root = Path(root)
        os.makedirs(self.root, exist_ok=True)

    @property
    def lock_scope(self) -> str | None:
        return f"file:{self.root.resolve()}"

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key.startswith("."):
            raise ValueError(f"Unsupported storage key: {key!r}")
        return self.root / f"{key}{_SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                return fh.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreReadError(f"Failed to read {path}") from exc

    def set_items(self, items: Mapping[str, str]) -> None:
        for key, value in items.items():
            path = self._path(key)
            try:
                fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        fh.write(value)
                    os.replace(tmp_path, path)
                except BaseException:
                    if os.path.exists(tmp_path):
                        os.remove(tmp_path)
                    raise
            except OSError as exc:
                raise StoreWriteError(f"Failed to write {path}") from exc

    def remove_items(self, keys: Iterable[str]) -> None:
        for key in keys:
            path = self._path(key)
            try:
                os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise StoreWriteError(f"Failed to remove {path}") from exc

    def _data_files(self) -> list[Path]:
        try:
            names = sorted(os.listdir(self.root))
        except OSError as exc:
            raise StoreReadError(f"Failed to list {self.root}") from exc
        return [self.root / name for name in names if name.endswith(_SUFFIX) and not name.startswith(".")]

    def keys(self) -> list[str]:
        return [path.name[: -len(_SUFFIX)] for path in self._data_files()]

    def clear(self) -> None:
        # Removed by path: foreign file names need not be valid keys.
        paths = self._data_files()
        for path in paths:
            try:
                os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise StoreWriteError(f"Failed to remove {path}") from exc
        logger.info("Cleared %s storage files from %s", len(paths), self.root)


__all__ = ["FileKeyValueBackend"]
