"""Persistent key/value rows holding one serialized collection each."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from feedstore.database import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


__all__ = ["StorageEntry"]
