"""Persistence backends for the exam history.

Provides:
- StoragePort protocol (load/save of the whole collection)
- JSON file, SQLite and in-memory implementations
"""

from yks_tracker.storage.backends import (
    InMemoryStorage,
    JsonFileStorage,
    StoragePort,
    StorageWriteError,
    create_storage,
)
from yks_tracker.storage.sqlite_storage import SqliteStorage

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "SqliteStorage",
    "StoragePort",
    "StorageWriteError",
    "create_storage",
]
