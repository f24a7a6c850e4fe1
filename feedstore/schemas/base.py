"""Shared pydantic building blocks for persisted records."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer, ValidationError

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """Render ``2024-01-01T12:00:00.000Z`` style instants."""
    return _as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


Instant = Annotated[
    datetime,
    AfterValidator(_as_utc),
    PlainSerializer(format_instant, return_type=str, when_used="json"),
]


class Record(BaseModel):
    """Base for stored documents; unknown fields round-trip untouched."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


R = TypeVar("R", bound=Record)


def parse_records(model: type[R], documents: Iterable[dict[str, Any]]) -> list[R]:
    """Validate stored documents, skipping the ones that do not fit ``model``."""
    parsed: list[R] = []
    for document in documents:
        try:
            parsed.append(model.model_validate(document))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed %s record %r (%s errors)", model.__name__, document.get("id"), exc.error_count()
            )
    return parsed


__all__ = ["Instant", "Record", "format_instant", "parse_records"]
