"""Record store layer for bookkeep."""

from bookkeep.database.base import RecordStore
from bookkeep.database.factories import create_sqlite_store
from bookkeep.database.memory import InMemoryRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "create_sqlite_store"]
