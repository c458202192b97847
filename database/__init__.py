"""
COVID-19 Russia Monitor - Database Package

Persistent key-value stores and append-only datasets.

Modules:
    models: SQLAlchemy ORM models
    connection: Engine and session management
    repository: KeyValueStore and Dataset repositories

Usage:
    from database.connection import get_session, init_database
    from database.repository import open_key_value_store

    init_database()

    with get_session() as session:
        store = open_key_value_store(session, "COVID-19-RUSSIA")
        latest = store.get_value("LATEST")
"""

from database.models import Base, DatasetItem, KeyValueRecord
from database.connection import (
    build_engine,
    close_engine,
    get_engine,
    get_session,
    init_database,
)
from database.repository import (
    Dataset,
    KeyValueStore,
    open_dataset,
    open_key_value_store,
)

__all__ = [
    # Models
    "Base",
    "KeyValueRecord",
    "DatasetItem",
    # Connection
    "build_engine",
    "get_engine",
    "get_session",
    "init_database",
    "close_engine",
    # Repositories
    "KeyValueStore",
    "Dataset",
    "open_key_value_store",
    "open_dataset",
]
