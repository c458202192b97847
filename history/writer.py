"""
COVID-19 Russia Monitor - History Writer

Owns the two pieces of persistent state:

    LATEST   key in a key-value store. Written on every run, never deleted.
    history  append-only dataset. Grows by one record whenever the page
             reports a new update timestamp.

Both stores are passed in explicitly, so the writer works with the
SQLAlchemy repositories in production and with fakes in tests.

Usage:
    writer = HistoryWriter(latest_store=kv_store, history=history_dataset)
    appended = writer.record(candidate)
"""

import logging
from typing import Any, Optional, Protocol

from extraction.models import CandidateRecord
from history.novelty import is_novel


logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Store interface the writer needs for the latest record."""

    def get_value(self, key: str) -> Optional[Any]:
        ...

    def set_value(self, key: str, value: Any) -> None:
        ...


class DatasetStorage(Protocol):
    """Append-only dataset interface the writer needs for the history."""

    def push_data(self, record: dict[str, Any]) -> None:
        ...


class HistoryWriter:
    """
    Persists one CandidateRecord per run.

    Every call writes the latest record exactly once and appends to the
    history at most once. Store errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        latest_store: KeyValueStorage,
        history: DatasetStorage,
        latest_key: str = "LATEST",
    ):
        self.latest_store = latest_store
        self.history = history
        self.latest_key = latest_key
        # Appended in this process but not yet confirmed by a LATEST write
        self._pending: Optional[CandidateRecord] = None

    def load_latest(self) -> Optional[CandidateRecord]:
        """
        Read the stored latest record.

        A stored value that cannot be decoded is logged and treated as
        missing; the current run overwrites it.
        """
        stored = self.latest_store.get_value(self.latest_key)
        if stored is None:
            return None
        if not isinstance(stored, dict):
            logger.error(
                "Stored latest record is unreadable, ignoring it",
                extra={
                    "key": self.latest_key,
                    "error": f"expected an object, got {type(stored).__name__}",
                },
            )
            return None
        try:
            return CandidateRecord.from_output(stored)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(
                "Stored latest record is unreadable, ignoring it",
                extra={"key": self.latest_key, "error": str(e)},
            )
            return None

    def record(self, candidate: CandidateRecord) -> bool:
        """
        Persist a candidate.

        Args:
            candidate: Record extracted in this run

        Returns:
            True if the candidate was appended to the history
        """
        latest = self.load_latest()
        novel = is_novel(candidate, latest)
        output = candidate.to_output()

        if novel and self._pending is not None and not is_novel(candidate, self._pending):
            # A retried attempt: the append went through, only LATEST failed
            logger.info(
                "Observation already appended by an earlier attempt",
                extra={"source_timestamp": output.get("lastUpdatedAtSource")},
            )
        elif novel:
            self.history.push_data(output)
            self._pending = candidate
            logger.info(
                "Appended new observation to history",
                extra={
                    "source_timestamp": output.get("lastUpdatedAtSource"),
                    "bootstrap": latest is None,
                },
            )
        else:
            logger.info(
                "Source not updated since last run, history unchanged",
                extra={"source_timestamp": output.get("lastUpdatedAtSource")},
            )

        self.latest_store.set_value(self.latest_key, output)
        self._pending = None
        logger.debug("Latest record updated", extra={"key": self.latest_key})

        return novel


__all__ = [
    "HistoryWriter",
    "KeyValueStorage",
    "DatasetStorage",
]
