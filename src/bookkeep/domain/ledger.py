"""Ledger entry domain service."""

import time
from decimal import Decimal
from typing import Any, Callable, Optional

import structlog

from bookkeep.database.base import RecordStore
from bookkeep.database.mappers import to_json_value
from bookkeep.domain.entities import RecordKind
from bookkeep.domain.errors import (
    NotFoundError,
    ValidationError,
    missing_required_fields,
    record_not_found,
    unknown_record_kind,
)
from bookkeep.domain.normalize import compute_net_pay
from bookkeep.domain.snapshot import read_collection
from bookkeep.utils.amount_parser import coerce_amount

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS: dict[RecordKind, tuple[str, ...]] = {
    RecordKind.SALES: ("date", "description", "amount"),
    RecordKind.OTHER_REVENUE: ("date", "description", "amount"),
    RecordKind.COSTS: ("date", "category", "description", "amount"),
    RecordKind.PAYROLL: ("date", "name", "position", "basicSalary"),
    RecordKind.CAPITAL: ("date", "description", "type", "category", "amount", "paidVia"),
    RecordKind.MISCELLANEOUS: ("date", "category", "description", "amount"),
    RecordKind.INVENTORY_MOVEMENTS: ("date", "type", "name", "unit"),
}

KIND_ALIASES = {
    "sale": RecordKind.SALES,
    "cost": RecordKind.COSTS,
    "misc": RecordKind.MISCELLANEOUS,
    "other-revenue": RecordKind.OTHER_REVENUE,
    "movements": RecordKind.INVENTORY_MOVEMENTS,
}


def parse_kind(value: str) -> RecordKind:
    """Resolve a record kind from its store key or a short alias.

    Raises:
        ValidationError: If value names no record kind
    """
    if isinstance(value, RecordKind):
        return value
    try:
        return RecordKind(value)
    except ValueError:
        pass
    kind = KIND_ALIASES.get(value.strip().lower())
    if kind is None:
        raise ValidationError(unknown_record_kind(value))
    return kind


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def generate_reference_number(kind: RecordKind, timestamp_ms: int) -> str:
    """Return an automatic reference number such as TX-SALES-1735689600000."""
    return f"TX-{kind.value.upper()}-{timestamp_ms}"


# Keyword rules for suggesting a classification from a record's description
PRODUCTION_KEYWORDS = (
    "cement", "sand", "aggregate", "water", "brick", "mold", "raw material", "production",
)
OPERATING_KEYWORDS = (
    "fuel", "electricity", "rent", "utility", "office", "maintenance", "repair", "transport",
    "delivery",
)
ASSET_KEYWORDS = ("equipment", "machinery", "vehicle", "computer", "furniture")
LOAN_KEYWORDS = ("loan", "borrow", "credit")
INVESTMENT_KEYWORDS = ("investment", "capital", "equity")
REPAIR_KEYWORDS = ("repair", "maintenance", "fix")
RECURRING_KEYWORDS = ("monthly", "quarterly", "annual", "subscription", "rent", "insurance")
ASSET_AMOUNT_THRESHOLD = Decimal("5000")


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def suggest_category(kind: RecordKind, description: str, amount: Any = None) -> dict[str, Any]:
    """Suggest classification fields for a record from its description and amount.

    Costs get usedInProduction and cashFlowType, capital gets type and
    cashFlowType, and miscellaneous spending gets category, cashFlowType and
    recurring. Other kinds get no suggestion.

    Examples:
        >>> suggest_category(RecordKind.CAPITAL, "Bank loan")
        {'type': 'Loan', 'cashFlowType': 'financing'}
    """
    text = (description or "").lower()
    large = coerce_amount(amount) > ASSET_AMOUNT_THRESHOLD

    if kind == RecordKind.COSTS:
        if _mentions(text, PRODUCTION_KEYWORDS):
            return {"usedInProduction": "yes", "cashFlowType": "operating"}
        if _mentions(text, OPERATING_KEYWORDS):
            return {"usedInProduction": "no", "cashFlowType": "operating"}
        if large or _mentions(text, ASSET_KEYWORDS):
            return {"usedInProduction": "no", "cashFlowType": "investing"}
        return {"usedInProduction": "no", "cashFlowType": "operating"}

    if kind == RecordKind.CAPITAL:
        if _mentions(text, LOAN_KEYWORDS):
            return {"type": "Loan", "cashFlowType": "financing"}
        if _mentions(text, INVESTMENT_KEYWORDS):
            return {"type": "Investment", "cashFlowType": "financing"}
        return {"type": "Equipment", "cashFlowType": "investing"}

    if kind == RecordKind.MISCELLANEOUS:
        if _mentions(text, REPAIR_KEYWORDS):
            return {"category": "Repair", "cashFlowType": "operating", "recurring": False}
        if large or _mentions(text, ("equipment", "machinery")):
            return {"category": "Asset", "cashFlowType": "investing", "recurring": False}
        return {
            "category": "Operating",
            "cashFlowType": "operating",
            "recurring": _mentions(text, RECURRING_KEYWORDS),
        }

    return {}


class LedgerService:
    """Service for creating, editing and deleting ledger records."""

    def __init__(self, store: RecordStore, clock: Callable[[], float] = time.time):
        """Initialize ledger service.

        Args:
            store: Record store instance
            clock: Returns the current time in seconds; record ids derive from it
        """
        self.store = store
        self.clock = clock

    def validate(self, kind: RecordKind, fields: dict[str, Any]) -> None:
        """Check that a record has every required field for its kind.

        Raises:
            ValidationError: If any required field is missing or blank
        """
        missing = [name for name in REQUIRED_FIELDS[kind] if _is_blank(fields.get(name))]
        if kind == RecordKind.INVENTORY_MOVEMENTS and not (
            coerce_amount(fields.get("quantityIn")) or coerce_amount(fields.get("quantityOut"))
        ):
            missing.append("quantityIn or quantityOut")
        if missing:
            raise ValidationError(missing_required_fields(kind.value, missing))

    def _prepare(self, kind: RecordKind, fields: dict[str, Any]) -> dict[str, Any]:
        record = {k: v for k, v in fields.items() if v is not None}
        if kind == RecordKind.PAYROLL:
            record.pop("netPay", None)
            record["netPay"] = compute_net_pay(record)
        elif kind == RecordKind.INVENTORY_MOVEMENTS:
            quantity_in = coerce_amount(record.get("quantityIn"))
            quantity_out = coerce_amount(record.get("quantityOut"))
            record["quantityIn"] = quantity_in
            record["quantityOut"] = quantity_out
            record["netChange"] = quantity_in - quantity_out
        return to_json_value(record)

    def _next_id(self, records: list[dict[str, Any]]) -> int:
        candidate = int(self.clock() * 1000)
        existing = {r.get("id") for r in records}
        while candidate in existing:
            candidate += 1
        return candidate

    async def list_records(self, kind: RecordKind) -> list[dict[str, Any]]:
        """List stored records of a kind, oldest first."""
        return await read_collection(self.store, kind.value)

    async def get_record(self, kind: RecordKind, record_id: int) -> Optional[dict[str, Any]]:
        """Get a stored record by id, or None if there is none."""
        for record in await self.list_records(kind):
            if record.get("id") == record_id:
                return record
        return None

    async def add_record(self, kind: RecordKind, fields: dict[str, Any]) -> dict[str, Any]:
        """Validate and append a new record.

        The record id is the current timestamp in milliseconds, bumped past
        any id already in use.

        Returns:
            The stored record

        Raises:
            ValidationError: If required fields are missing
            StoreUnavailableError: If the record store cannot be written
        """
        self.validate(kind, fields)
        records = await self.list_records(kind)
        record = self._prepare(kind, fields)
        record["id"] = self._next_id(records)
        if _is_blank(record.get("referenceNumber")):
            record["referenceNumber"] = generate_reference_number(kind, record["id"])
        records.append(record)
        await self.store.set(kind.value, records)
        logger.info("record_added", kind=kind.value, record_id=record["id"])
        return record

    async def edit_record(
        self, kind: RecordKind, record_id: int, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Replace a record by id with its fields updated.

        Raises:
            NotFoundError: If no record has the id
            ValidationError: If the updated record misses required fields
        """
        records = await self.list_records(kind)
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                break
        else:
            raise NotFoundError(record_not_found(kind.value, record_id))

        updated = {**existing, **{k: v for k, v in fields.items() if v is not None}}
        self.validate(kind, updated)
        record = self._prepare(kind, updated)
        record["id"] = record_id
        records[index] = record
        await self.store.set(kind.value, records)
        logger.info("record_edited", kind=kind.value, record_id=record_id)
        return record

    async def delete_record(self, kind: RecordKind, record_id: int) -> None:
        """Remove a record by id.

        Raises:
            NotFoundError: If no record has the id
        """
        records = await self.list_records(kind)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            raise NotFoundError(record_not_found(kind.value, record_id))
        await self.store.set(kind.value, remaining)
        logger.info("record_deleted", kind=kind.value, record_id=record_id)


def line_items_from_pairs(pairs: list[tuple[str, Decimal]]) -> list[dict[str, Any]]:
    """Build stored benefit/deduction line items from (label, amount) pairs."""
    return [{"label": label, "amount": str(amount)} for label, amount in pairs]
