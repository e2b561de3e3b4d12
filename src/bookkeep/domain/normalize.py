"""Tolerant parse of stored records into domain entities.

Records come from forms and from older versions of the stored data, so any
field may be missing or malformed. Missing amounts and quantities become zero,
unparseable dates become None, and unknown classifications fall back to the
default for the record kind. Nothing in here raises for bad data; the
aggregation layer only ever sees normalized entities.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from bookkeep.domain.entities import (
    ZERO,
    CashFlowEntry,
    CashFlowType,
    InventoryMovement,
    LedgerRecord,
    LineItem,
    Payslip,
    RecordKind,
)
from bookkeep.utils.amount_parser import coerce_amount, parse_amount
from bookkeep.utils.date_parser import month_key, parse_month_key, parse_record_date

# Capital categories that are funded from outside the business
FINANCING_CAPITAL_CATEGORIES = {"liability", "equity"}
FINANCING_CAPITAL_TYPES = {"loan", "investment", "repayment"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            return None
    return coerce_amount(value)


def _record_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).lower() in ("yes", "true", "1", "y")


def _cash_flow_type(raw: Mapping[str, Any], kind: Optional[RecordKind]) -> CashFlowType:
    value = _text(raw.get("cashFlowType")).lower()
    try:
        return CashFlowType(value)
    except ValueError:
        pass

    if kind == RecordKind.CAPITAL:
        category = _text(raw.get("category")).lower()
        capital_type = _text(raw.get("type")).lower()
        if category in FINANCING_CAPITAL_CATEGORIES or capital_type in FINANCING_CAPITAL_TYPES:
            return CashFlowType.FINANCING
        return CashFlowType.INVESTING
    return CashFlowType.OPERATING


def _sum_line_amounts(items: Any) -> Decimal:
    if not isinstance(items, (list, tuple)):
        return ZERO
    return sum(
        (coerce_amount(item.get("amount")) for item in items if isinstance(item, Mapping)),
        ZERO,
    )


def normalize_record(raw: Mapping[str, Any], kind: Optional[RecordKind] = None) -> LedgerRecord:
    """Normalize a sales, cost, capital, misc or other-revenue record."""
    return LedgerRecord(
        id=_record_id(raw.get("id")),
        date=parse_record_date(raw.get("date")),
        amount=coerce_amount(raw.get("amount")),
        category=_text(raw.get("category")),
        description=_text(raw.get("description") or raw.get("item")),
        cash_flow_type=_cash_flow_type(raw, kind),
        paid=_text(raw.get("paid")).lower(),
        paid_via=_text(raw.get("paidVia")),
        used_in_production=_flag(raw.get("usedInProduction")),
        capital_type=_text(raw.get("type")),
        reference_number=_text(raw.get("referenceNumber")),
        note=_text(raw.get("note")),
    )


def compute_net_pay(raw: Mapping[str, Any]) -> Decimal:
    """Net pay of a payslip: basic salary plus benefits minus deductions.

    Legacy salary records carry a plain ``amount`` instead; that amount is the
    net pay.
    """
    if raw.get("netPay") is not None:
        return coerce_amount(raw.get("netPay"))
    if any(raw.get(key) is not None for key in ("basicSalary", "benefits", "deductions")):
        return (
            coerce_amount(raw.get("basicSalary"))
            + _sum_line_amounts(raw.get("benefits"))
            - _sum_line_amounts(raw.get("deductions"))
        )
    return coerce_amount(raw.get("amount"))


def normalize_payslip(raw: Mapping[str, Any]) -> Payslip:
    """Normalize a payroll record."""
    return Payslip(
        id=_record_id(raw.get("id")),
        date=parse_record_date(raw.get("date")),
        name=_text(raw.get("name")),
        position=_text(raw.get("position")),
        basic_salary=coerce_amount(raw.get("basicSalary")),
        total_benefits=_sum_line_amounts(raw.get("benefits")),
        total_deductions=_sum_line_amounts(raw.get("deductions")),
        net_pay=compute_net_pay(raw),
    )


def normalize_movement(raw: Mapping[str, Any]) -> InventoryMovement:
    """Normalize an inventory movement record."""
    return InventoryMovement(
        id=_record_id(raw.get("id")),
        date=parse_record_date(raw.get("date")),
        item_type=_text(raw.get("type")),
        name=_text(raw.get("name")),
        quantity_in=coerce_amount(raw.get("quantityIn")),
        quantity_out=coerce_amount(raw.get("quantityOut")),
        unit=_text(raw.get("unit")),
        reference_number=_text(raw.get("referenceNumber")),
    )


def normalize_line_items(items: Any) -> tuple[LineItem, ...]:
    """Normalize cash-flow line items, dropping anything that is not a mapping."""
    if not isinstance(items, (list, tuple)):
        return ()
    return tuple(
        LineItem(label=_text(item.get("label")), amount=coerce_amount(item.get("amount")))
        for item in items
        if isinstance(item, Mapping)
    )


def normalize_cash_flow_entry(raw: Mapping[str, Any]) -> Optional[CashFlowEntry]:
    """Normalize a stored cash-flow entry.

    Entries without a valid month key are skipped. Keys such as "2024-3" are
    padded to "2024-03". A stored endingCash is kept as is; when it is missing
    the ending cash is recomputed from the beginning cash and the flows.
    """
    try:
        key = month_key(*parse_month_key(_text(raw.get("month"))))
    except ValueError:
        return None
    operating = raw.get("operating")
    if not isinstance(operating, Mapping):
        operating = {}
    return CashFlowEntry(
        month_key=key,
        beginning_cash=coerce_amount(raw.get("beginningCash")),
        operating_inflow=coerce_amount(operating.get("inflow")),
        operating_outflow=coerce_amount(operating.get("outflow")),
        investing=normalize_line_items(raw.get("investing")),
        financing=normalize_line_items(raw.get("financing")),
        stored_ending_cash=_optional_amount(raw.get("endingCash")),
    )


def cash_flow_entry_to_record(entry: CashFlowEntry) -> dict[str, Any]:
    """Serialize a cash-flow entry in the stored wire format."""
    return {
        "month": entry.month_key,
        "beginningCash": str(entry.beginning_cash),
        "operating": {
            "inflow": str(entry.operating_inflow),
            "outflow": str(entry.operating_outflow),
        },
        "investing": [{"label": i.label, "amount": str(i.amount)} for i in entry.investing],
        "financing": [{"label": i.label, "amount": str(i.amount)} for i in entry.financing],
        "endingCash": str(entry.ending_cash),
    }


def normalize_records(
    raws: Iterable[Any], kind: Optional[RecordKind] = None
) -> tuple[LedgerRecord, ...]:
    """Normalize a stored collection, skipping entries that are not mappings."""
    return tuple(normalize_record(raw, kind) for raw in raws if isinstance(raw, Mapping))
