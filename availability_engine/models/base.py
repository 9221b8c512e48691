"""
SQLAlchemy table definitions for the key-value store adapter.

Provides:
- Base declarative base
- KeyValueEntry: one row per stored key, value held as JSON text
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class KeyValueEntry(Base):
    """
    A single key-value pair.

    Availability records are stored under '{prefix}{user_id}' with the
    serialized JSON record as the value. The value is stored verbatim so a
    load followed by a save leaves the row unchanged.
    """

    __tablename__ = "key_value_store"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        doc="Storage key (e.g. 'availability-user-1')"
    )

    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Serialized JSON value"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp of first write (UTC)"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
        doc="Timestamp of last write (UTC)"
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key={self.key!r})>"
