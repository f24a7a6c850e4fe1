"""Shared fixtures: a SQLite-backed store per test and a deterministic clock."""
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

import pytest

from feedstore.config import Settings
from feedstore.database import build_engine
from feedstore.services import register_user
from feedstore.storage import DocumentStore, SqlKeyValueBackend


class TickingClock:
    """Returns a strictly increasing instant on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            value = self.current
            self.current += self.step
            return value


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def make_store(tmp_path, clock) -> Iterator[Callable[..., DocumentStore]]:
    stores: list[DocumentStore] = []

    def _factory(**overrides: object) -> DocumentStore:
        settings = Settings(
            STORAGE_BACKEND="sql",
            DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / f'feedstore-{len(stores)}.db'}",
            **overrides,
        )
        backend = SqlKeyValueBackend.from_engine(build_engine(settings.database_url))
        store = DocumentStore(backend, settings=settings, clock=clock)
        stores.append(store)
        return store

    yield _factory
    for store in stores:
        store.close()


@pytest.fixture
def store(make_store) -> DocumentStore:
    return make_store()


@pytest.fixture
def register() -> Callable[[DocumentStore, str], str]:
    def _register(store: DocumentStore, username: str) -> str:
        register_user(store, username=username, email=f"{username}@example.com", password=f"{username}-pw")
        return username

    return _register
