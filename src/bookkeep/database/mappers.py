"""Mapper functions between stored JSON payloads and plain record dicts.

This layer isolates the conversion logic so the storage format can change
without touching the services that build records.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence

from bookkeep.database.base import StoredCollection
from bookkeep.database.models import RecordCollection


def to_json_value(value: Any) -> Any:
    """Convert a value into something the JSON column can store."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return value


def records_to_payload(records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert a record collection into a JSON payload."""
    return [to_json_value(dict(record)) for record in records]


def collection_to_records(orm_collection: Optional[RecordCollection]) -> StoredCollection:
    """Convert a stored collection row into record dicts.

    Rows written by older versions as a mapping of key to record keep that shape.
    """
    if orm_collection is None or not orm_collection.records:
        return []
    if isinstance(orm_collection.records, dict):
        return {
            str(key): dict(record)
            for key, record in orm_collection.records.items()
            if isinstance(record, dict)
        }
    return [dict(record) for record in orm_collection.records if isinstance(record, dict)]
