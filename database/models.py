"""
COVID-19 Russia Monitor - Database Models

SQLAlchemy ORM models backing the two store kinds the crawler uses.

Tables:
    - key_value_records: named key-value stores (LATEST, OUTPUT)
    - dataset_items: named append-only datasets (raw feed, history)

JSON columns use the generic JSON type so the same models run on SQLite
and PostgreSQL.

Usage:
    from database.models import KeyValueRecord, DatasetItem

    item = DatasetItem(dataset_name="COVID-19-RUSSIA-HISTORY", data={...})
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# =============================================================================
# Base Class
# =============================================================================

class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# =============================================================================
# Mixins
# =============================================================================

class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# =============================================================================
# Models
# =============================================================================

class KeyValueRecord(Base, TimestampMixin):
    """
    One value in a named key-value store.

    Values are overwritten in place; rows are never deleted by the crawler.
    """
    __tablename__ = "key_value_records"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    store_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Store namespace (e.g., COVID-19-RUSSIA, default)",
    )
    key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Key within the store (e.g., LATEST, OUTPUT)",
    )
    value: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        comment="JSON value",
    )

    __table_args__ = (
        UniqueConstraint("store_name", "key", name="uq_key_value_records_store_key"),
    )

    def __repr__(self) -> str:
        return f"<KeyValueRecord {self.store_name}/{self.key}>"


class DatasetItem(Base):
    """
    One record appended to a named dataset.

    The autoincrement id gives insertion order. Items are immutable once
    written; no code path updates or deletes them.
    """
    __tablename__ = "dataset_items"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    dataset_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Dataset namespace (e.g., COVID-19-RUSSIA-HISTORY, default)",
    )
    data: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        comment="Appended JSON record",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_dataset_items_dataset_id", "dataset_name", "id"),
    )

    def __repr__(self) -> str:
        return f"<DatasetItem {self.dataset_name}#{self.id}>"


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "Base",
    "TimestampMixin",
    "KeyValueRecord",
    "DatasetItem",
]
