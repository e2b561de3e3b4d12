"""In-memory record store."""

import copy
from typing import Any, Mapping, Optional, Sequence

from bookkeep.database.base import RecordStore, StoredCollection


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store for tests and dry runs.

    Collections are deep-copied on the way in and out so callers can never
    mutate stored state without going through ``set``.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._data: dict[str, StoredCollection] = {}
        for key, records in (initial or {}).items():
            if isinstance(records, Mapping):
                self._data[key] = copy.deepcopy(dict(records))
            else:
                self._data[key] = copy.deepcopy(list(records))

    async def get(self, key: str) -> StoredCollection:
        return copy.deepcopy(self._data.get(key, []))

    async def set(self, key: str, records: Sequence[dict[str, Any]]) -> None:
        self._data[key] = copy.deepcopy(list(records))
