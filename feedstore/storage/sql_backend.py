"""Key/value backend persisted in a single SQLAlchemy table."""
from __future__ import annotations

import logging
import os
from typing import Iterable, Mapping

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..database import build_session_factory, get_session_factory, init_db
from ..models import StorageEntry
from .base import KeyValueBackend, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)


class SqlKeyValueBackend(KeyValueBackend):
    """Stores each key as one ``storage_entries`` row.

    ``set_items`` commits every pair in one database transaction, so a
    multi-collection write either lands completely or not at all.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        super().__init__()
        self._session_factory = session_factory or get_session_factory()

    @classmethod
    def from_engine(cls, engine: Engine, *, create_schema: bool = True) -> "SqlKeyValueBackend":
        if create_schema:
            init_db(engine)
        return cls(build_session_factory(engine))

    @property
    def lock_scope(self) -> str | None:
        bind = self._session_factory.kw.get("bind")
        if not isinstance(bind, Engine):
            return None
        url = bind.url
        if url.get_backend_name() == "sqlite":
            # Each in-memory SQLite engine is its own database.
            if not url.database or url.database == ":memory:":
                return None
            return f"sqlite:{os.path.abspath(url.database)}"
        return url.render_as_string(hide_password=True)

    def get_item(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntry, key)
                return None if entry is None else entry.value
        except SQLAlchemyError as exc:
            raise StoreReadError(f"Failed to read {key!r}") from exc

    def set_items(self, items: Mapping[str, str]) -> None:
        if not items:
            return
        with self._session_factory() as session:
            try:
                for key, value in items.items():
                    entry = session.get(StorageEntry, key)
                    if entry is None:
                        session.add(StorageEntry(key=key, value=value))
                    else:
                        setattr(entry, "value", value)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreWriteError(f"Failed to write {', '.join(items)}") from exc

    def remove_items(self, keys: Iterable[str]) -> None:
        targets = list(keys)
        if not targets:
            return
        with self._session_factory() as session:
            try:
                session.execute(delete(StorageEntry).where(StorageEntry.key.in_(targets)))
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreWriteError(f"Failed to remove {', '.join(targets)}") from exc

    def keys(self) -> list[str]:
        try:
            with self._session_factory() as session:
                return list(session.scalars(select(StorageEntry.key).order_by(StorageEntry.key)))
        except SQLAlchemyError as exc:
            raise StoreReadError("Failed to list keys") from exc

    def clear(self) -> None:
        with self._session_factory() as session:
            try:
                result = session.execute(delete(StorageEntry))
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreWriteError("Failed to clear storage") from exc
        logger.info("Cleared %s storage rows", result.rowcount)

    def close(self) -> None:
        bind = self._session_factory.kw.get("bind")
        if isinstance(bind, Engine):
            bind.dispose()


__all__ = ["SqlKeyValueBackend"]
