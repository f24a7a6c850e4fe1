"""Storage backends and the document store built on top of them."""
from __future__ import annotations

from ..config import Settings, get_settings
from ..database import build_engine
from .base import KeyValueBackend, StoreReadError, StoreWriteError
from .document_store import Clock, CollectionBatch, Document, DocumentStore, utc_now
from .file_backend import FileKeyValueBackend
from .memory_backend import MemoryKeyValueBackend
from .sql_backend import SqlKeyValueBackend


def build_backend(settings: Settings) -> KeyValueBackend:
    """Instantiate the backend selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "memory":
        return MemoryKeyValueBackend()
    if settings.storage_backend == "file":
        return FileKeyValueBackend(settings.storage_dir)
    return SqlKeyValueBackend.from_engine(build_engine(settings.database_url))


def open_store(settings: Settings | None = None, *, clock: Clock | None = None) -> DocumentStore:
    resolved = settings or get_settings()
    return DocumentStore(build_backend(resolved), settings=resolved, clock=clock)


__all__ = [
    "Clock",
    "CollectionBatch",
    "Document",
    "DocumentStore",
    "FileKeyValueBackend",
    "KeyValueBackend",
    "MemoryKeyValueBackend",
    "SqlKeyValueBackend",
    "StoreReadError",
    "StoreWriteError",
    "build_backend",
    "open_store",
    "utc_now",
]
