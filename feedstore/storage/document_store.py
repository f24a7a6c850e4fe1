"""Typed-collection primitives over a raw key/value backend.

Every collection is one JSON array stored under its own key. Reads fail soft:
a missing key, corrupt JSON, a non-array payload or a backend read error all
come back as an empty collection. Writes replace the whole array and surface
backend failures as :class:`StoreWriteError`.

Mutations go through :meth:`DocumentStore.transaction`, which holds the
collections' locks for the whole read-modify-write so concurrent callers
cannot overwrite each other's changes. Transactions read strictly: a backend
read error aborts them rather than loading an empty collection.
"""
from __future__ import annotations

import json
import logging
import threading
from contextlib import ExitStack, contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator

from ..config import Settings, get_settings
from .base import KeyValueBackend, StoreReadError

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False)


_local = threading.local()


def _held_keys() -> set[tuple[str, str]]:
    """Return the (lock scope, key) pairs this thread holds in open transactions."""
    held = getattr(_local, "held", None)
    if held is None:
        held = _local.held = set()
    return held


class CollectionBatch:
    """Working copies of the collections and records held by one transaction."""

    def __init__(self, collections: dict[str, list[Document]], records: dict[str, Document | None]) -> None:
        self._collections = collections
        self._records = records

    def __getitem__(self, name: str) -> list[Document]:
        try:
            return self._collections[name]
        except KeyError as exc:
            raise KeyError(f"Collection {name!r} is not part of this transaction") from exc

    def __setitem__(self, name: str, documents: Iterable[Document]) -> None:
        if name not in self._collections:
            raise KeyError(f"Collection {name!r} is not part of this transaction")
        self._collections[name] = list(documents)

    def record(self, key: str) -> Document | None:
        try:
            return self._records[key]
        except KeyError as exc:
            raise KeyError(f"Record {key!r} is not part of this transaction") from exc

    def set_record(self, key: str, document: Document) -> None:
        if key not in self._records:
            raise KeyError(f"Record {key!r} is not part of this transaction")
        self._records[key] = document

    def serialized(self) -> dict[str, str]:
        payload = {name: _dumps(documents) for name, documents in self._collections.items()}
        for key, document in self._records.items():
            if document is not None:
                payload[key] = _dumps(document)
        return payload


class DocumentStore:
    """Whole-collection reads and writes plus the transaction wrapper."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings or get_settings()
        self._clock = clock or utc_now
        self._id_lock = threading.Lock()
        self._last_id = 0

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.backend.close()

    # -- clock and identifiers -------------------------------------------------

    def now(self) -> datetime:
        moment = self._clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc)

    def new_id(self, at: datetime | None = None) -> str:
        """Return an epoch-millisecond id, bumped so it never repeats in this store."""
        moment = at or self.now()
        candidate = int(moment.timestamp() * 1000)
        with self._id_lock:
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
        return str(candidate)

    # -- raw reads -------------------------------------------------------------

    def _load(self, key: str, *, strict: bool = False) -> Any:
        try:
            raw = self.backend.get_item(key)
        except StoreReadError:
            if strict:
                raise
            logger.warning("Error reading %s; treating it as empty", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt JSON stored under %s", key)
            return None

    def _collection(self, name: str, *, strict: bool) -> list[Document]:
        payload = self._load(name, strict=strict)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Expected a JSON array under %s, found %s", name, type(payload).__name__)
            return []
        documents = [item for item in payload if isinstance(item, dict)]
        if len(documents) != len(payload):
            logger.warning("Ignoring %s non-object entries in %s", len(payload) - len(documents), name)
        return documents

    def _record(self, key: str, *, strict: bool) -> Document | None:
        payload = self._load(key, strict=strict)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            logger.warning("Expected a JSON object under %s, found %s", key, type(payload).__name__)
            return None
        return payload

    def get_collection(self, name: str) -> list[Document]:
        return self._collection(name, strict=False)

    def put_collection(self, name: str, documents: Iterable[Document]) -> None:
        self.backend.set_items({name: _dumps(list(documents))})

    def get_record(self, key: str) -> Document | None:
        return self._record(key, strict=False)

    def put_record(self, key: str, document: Document) -> None:
        self.backend.set_items({key: _dumps(document)})

    def remove_record(self, key: str) -> None:
        self.backend.remove_items([key])

    # -- read-modify-write -------------------------------------------------------

    @contextmanager
    def locked(self, *keys: str) -> Iterator[None]:
        """Hold the write locks for ``keys``, acquired in sorted order."""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.backend.lock_for(key))
            yield

    @contextmanager
    def transaction(self, *collections: str, records: Iterable[str] = ()) -> Iterator[CollectionBatch]:
        """Lock, load and yield the named collections, then write back changes.

        Locks are taken in sorted key order. Only the collections and records
        whose serialized form changed are written, in a single backend call.
        Nothing is written when the block raises. A backend read error raises
        :class:`StoreReadError` instead of loading an empty collection, and
        opening a transaction on a key this thread already holds in another
        transaction raises ``RuntimeError``.
        """
        record_keys = set(records)
        ordered = sorted(set(collections) | record_keys)
        scope = self.backend.lock_scope or f"{type(self.backend).__name__}@{id(self.backend):x}"
        claimed = {(scope, key) for key in ordered}
        held = _held_keys()
        nested = sorted(key for _, key in claimed & held)
        if nested:
            raise RuntimeError(f"Nested transaction on {', '.join(nested)} would be overwritten by the outer one")

        with self.locked(*ordered):
            held.update(claimed)
            try:
                batch = CollectionBatch(
                    {name: self._collection(name, strict=True) for name in ordered if name not in record_keys},
                    {key: self._record(key, strict=True) for key in ordered if key in record_keys},
                )
                before = batch.serialized()
                yield batch
                changes = {key: value for key, value in batch.serialized().items() if before.get(key) != value}
                if changes:
                    logger.debug("Writing %s", ", ".join(sorted(changes)))
                    self.backend.set_items(changes)
            finally:
                held.difference_update(claimed)


__all__ = ["CollectionBatch", "Clock", "Document", "DocumentStore", "utc_now"]
