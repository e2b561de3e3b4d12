"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Union

# A list of records; older data may instead map a key such as "2024-03" to a record
StoredCollection = Union[list[dict[str, Any]], dict[str, dict[str, Any]]]


class RecordStore(ABC):
    """Durable mapping from a category key to an ordered list of records.

    Records are plain JSON-compatible dicts. Every write replaces the whole
    collection for a key; there are no row-level updates, no locking and no
    versioning, so the last writer wins.
    """

    @abstractmethod
    async def get(self, key: str) -> StoredCollection:
        """Return the collection stored under key, or an empty list if never written.

        Collections are returned in the shape they were written in.

        Raises:
            StoreUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, records: Sequence[dict[str, Any]]) -> None:
        """Replace the records stored under key.

        Raises:
            StoreUnavailableError: If the backend cannot be written
        """
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass
