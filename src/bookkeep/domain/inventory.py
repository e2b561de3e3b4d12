"""Inventory domain service."""

from decimal import Decimal
from typing import Any, Iterable, Mapping

import structlog

from bookkeep.database.base import RecordStore
from bookkeep.database.mappers import to_json_value
from bookkeep.domain.entities import (
    ZERO,
    InventoryMovement,
    RecordKind,
    StockItem,
    StockStatus,
)
from bookkeep.domain.ledger import LedgerService
from bookkeep.domain.normalize import normalize_movement
from bookkeep.domain.snapshot import INVENTORY_KEY, minimum_levels, read_collection

logger = structlog.get_logger(__name__)

ITEM_TYPES = ("raw-material", "finished-product")
WARNING_MULTIPLIER = Decimal("1.5")


def stock_levels(
    movements: Iterable[InventoryMovement],
    minimums: Mapping[tuple[str, str], Decimal] | None = None,
) -> list[StockItem]:
    """Current stock per (name, type): the sum of every movement's net change.

    Items without movements but with a positive minimum level are listed
    with zero stock. Stock is allowed to go negative; it is reported as is.
    """
    minimums = minimums or {}
    totals: dict[tuple[str, str], Decimal] = {}
    units: dict[tuple[str, str], str] = {}
    for movement in movements:
        key = (movement.name, movement.item_type)
        totals[key] = totals.get(key, ZERO) + movement.net_change
        if movement.unit:
            units[key] = movement.unit
    for key, level in minimums.items():
        if level > ZERO:
            totals.setdefault(key, ZERO)

    return [
        StockItem(
            name=name,
            item_type=item_type,
            unit=units.get((name, item_type), ""),
            current_stock=total,
            minimum_level=minimums.get((name, item_type), ZERO),
        )
        for (name, item_type), total in sorted(totals.items())
    ]


def stock_status(current_stock: Decimal, minimum_level: Decimal) -> StockStatus:
    """Classify a stock level against its minimum."""
    if current_stock <= minimum_level:
        return StockStatus.LOW
    if current_stock <= minimum_level * WARNING_MULTIPLIER:
        return StockStatus.WARNING
    return StockStatus.GOOD


class InventoryService:
    """Service for recording stock movements and reporting stock levels."""

    def __init__(self, store: RecordStore, ledger: LedgerService | None = None):
        self.store = store
        self.ledger = ledger or LedgerService(store)

    async def _movements(self) -> list[InventoryMovement]:
        raws = await read_collection(self.store, RecordKind.INVENTORY_MOVEMENTS.value)
        return [normalize_movement(raw) for raw in raws]

    async def _minimums(self) -> dict[tuple[str, str], Decimal]:
        return minimum_levels(await read_collection(self.store, INVENTORY_KEY))

    async def stock(self) -> list[StockItem]:
        """Current stock of every known item."""
        return stock_levels(await self._movements(), await self._minimums())

    async def sync_stock(self) -> list[StockItem]:
        """Recompute stock from movements and store it under the inventory key."""
        items = await self.stock()
        await self.store.set(INVENTORY_KEY, [self._stock_record(item) for item in items])
        return items

    async def record_movement(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Validate and append a stock movement, then resync stock levels.

        Raises:
            ValidationError: If required fields are missing
        """
        record = await self.ledger.add_record(RecordKind.INVENTORY_MOVEMENTS, fields)
        await self.sync_stock()
        return record

    async def edit_movement(self, record_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        """Edit a stock movement and resync stock levels."""
        record = await self.ledger.edit_record(RecordKind.INVENTORY_MOVEMENTS, record_id, fields)
        await self.sync_stock()
        return record

    async def delete_movement(self, record_id: int) -> None:
        """Delete a stock movement and resync stock levels."""
        await self.ledger.delete_record(RecordKind.INVENTORY_MOVEMENTS, record_id)
        await self.sync_stock()

    async def set_minimum_level(self, name: str, item_type: str, level: Decimal) -> StockItem:
        """Set the minimum stock level for an item."""
        minimums = await self._minimums()
        minimums[(name, item_type)] = level
        items = stock_levels(await self._movements(), minimums)
        await self.store.set(INVENTORY_KEY, [self._stock_record(item) for item in items])
        logger.info("minimum_level_set", name=name, item_type=item_type, level=str(level))
        for item in items:
            if (item.name, item.item_type) == (name, item_type):
                return item
        return StockItem(name=name, item_type=item_type, unit="", current_stock=ZERO,
                         minimum_level=level)

    @staticmethod
    def _stock_record(item: StockItem) -> dict[str, Any]:
        return to_json_value(
            {
                "name": item.name,
                "type": item.item_type,
                "unit": item.unit,
                "currentStock": item.current_stock,
                "minimumLevel": item.minimum_level,
            }
        )
