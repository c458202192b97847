"""
COVID-19 Russia Monitor - Store Repositories

Named key-value stores and append-only datasets over a SQLAlchemy session.

Repositories:
    - KeyValueStore: get_value / set_value within one store namespace
    - Dataset: push_data and read-only access within one dataset

Every write commits immediately, so a failure later in the run never rolls
back a write that already happened.

Usage:
    from database.connection import get_session
    from database.repository import open_dataset, open_key_value_store

    with get_session() as session:
        latest = open_key_value_store(session, "COVID-19-RUSSIA").get_value("LATEST")
        open_dataset(session, "default").push_data({"sourceUrl": "..."})
"""

import logging
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.models import DatasetItem, KeyValueRecord


logger = logging.getLogger(__name__)


# =============================================================================
# Base Repository
# =============================================================================

class BaseRepository:
    """Repository bound to a session and a store/dataset name."""

    def __init__(self, session: Session, name: str):
        """
        Args:
            session: SQLAlchemy session for database operations
            name: Store or dataset namespace
        """
        if not name:
            raise ValueError("Store name must not be empty")
        self.session = session
        self.name = name

    def _commit(self) -> None:
        """Commit, leaving the session usable again if the commit fails."""
        try:
            self.session.commit()
        except SQLAlchemyError:
            logger.error("Store write failed, rolling back", extra={"store": self.name})
            self.session.rollback()
            raise


# =============================================================================
# Key-Value Store
# =============================================================================

class KeyValueStore(BaseRepository):
    """A named key-value store holding JSON values."""

    def _get_record(self, key: str) -> Optional[KeyValueRecord]:
        return self.session.execute(
            select(KeyValueRecord).where(
                KeyValueRecord.store_name == self.name,
                KeyValueRecord.key == key,
            )
        ).scalar_one_or_none()

    def get_value(self, key: str) -> Optional[Any]:
        """Get the JSON value stored under key, or None."""
        record = self._get_record(key)
        if record is None:
            return None
        return record.value

    def set_value(self, key: str, value: Any) -> None:
        """Create or overwrite the value stored under key."""
        record = self._get_record(key)
        if record is None:
            record = KeyValueRecord(store_name=self.name, key=key, value=value)
            self.session.add(record)
        else:
            record.value = value
        self._commit()

        logger.debug(
            "Stored value",
            extra={"store": self.name, "key": key},
        )

    def keys(self) -> list[str]:
        """List keys in this store."""
        return list(
            self.session.execute(
                select(KeyValueRecord.key)
                .where(KeyValueRecord.store_name == self.name)
                .order_by(KeyValueRecord.key)
            ).scalars()
        )


# =============================================================================
# Dataset
# =============================================================================

class Dataset(BaseRepository):
    """
    A named append-only dataset of JSON records.

    Only push_data writes; there is deliberately no update or delete.
    """

    def push_data(self, record: dict[str, Any]) -> None:
        """Append one record."""
        item = DatasetItem(dataset_name=self.name, data=record)
        self.session.add(item)
        self._commit()

        logger.debug(
            "Appended dataset item",
            extra={"dataset": self.name, "item_id": item.id},
        )

    def count(self) -> int:
        """Number of records in the dataset."""
        return self.session.execute(
            select(func.count(DatasetItem.id)).where(
                DatasetItem.dataset_name == self.name
            )
        ).scalar_one()

    def get_items(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Records in insertion order."""
        query = (
            select(DatasetItem.data)
            .where(DatasetItem.dataset_name == self.name)
            .order_by(DatasetItem.id)
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.session.execute(query).scalars())


# =============================================================================
# Helpers
# =============================================================================

def open_key_value_store(session: Session, name: str) -> KeyValueStore:
    """Open the key-value store with the given name."""
    return KeyValueStore(session, name)


def open_dataset(session: Session, name: str) -> Dataset:
    """Open the dataset with the given name."""
    return Dataset(session, name)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "KeyValueStore",
    "Dataset",
    "open_key_value_store",
    "open_dataset",
]
