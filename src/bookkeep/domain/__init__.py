"""Domain layer for bookkeep application."""

from bookkeep.domain.ledger import LedgerService
from bookkeep.domain.inventory import InventoryService
from bookkeep.domain.cash_flow import CashFlowService
from bookkeep.domain.reporting import ReportService
from bookkeep.domain.summary import SummaryService

__all__ = [
    "LedgerService",
    "InventoryService",
    "CashFlowService",
    "ReportService",
    "SummaryService",
]
