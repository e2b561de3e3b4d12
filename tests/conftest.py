"""Shared pytest fixtures for bookkeep tests."""

import os
import tempfile

import pytest

from bookkeep.database.factories import create_sqlite_store
from bookkeep.database.memory import InMemoryRecordStore
from bookkeep.domain.cash_flow import CashFlowService
from bookkeep.domain.inventory import InventoryService
from bookkeep.domain.ledger import LedgerService
from bookkeep.domain.reporting import ReportService


class FixedClock:
    """Clock that advances one second per call so record ids are predictable."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1
        return self.now


@pytest.fixture
def temp_store():
    """Create a temporary SQLite record store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path

    yield store

    # Cleanup
    store.close()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    """Create an empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def ledger_service(memory_store):
    """Create a LedgerService with a deterministic clock."""
    return LedgerService(memory_store, clock=FixedClock())


@pytest.fixture
def inventory_service(memory_store, ledger_service):
    """Create an InventoryService sharing the ledger service's clock."""
    return InventoryService(memory_store, ledger=ledger_service)


@pytest.fixture
def cash_flow_service(memory_store):
    """Create a CashFlowService with an in-memory store."""
    return CashFlowService(memory_store)


@pytest.fixture
def report_service(memory_store):
    """Create a ReportService with an in-memory store."""
    return ReportService(memory_store)


@pytest.fixture
def sample_records():
    """Stored records in the wire format, one month of a small bakery."""
    return {
        "sales": [
            {"id": 1, "date": "2024-03-05", "description": "Bread", "amount": "100", "paid": "yes"},
            {"id": 2, "date": "2024-03-20", "description": "Cakes", "amount": 250, "paid": "no"},
        ],
        "otherRevenue": [
            {"id": 3, "date": "2024-03-10", "description": "Catering", "amount": "50"},
        ],
        "costs": [
            {
                "id": 4,
                "date": "2024-03-02",
                "category": "Raw Materials",
                "description": "Flour",
                "amount": "40",
                "usedInProduction": "yes",
            },
            {
                "id": 5,
                "date": "2024-03-03",
                "category": "Rent",
                "description": "Shop rent",
                "amount": "30",
                "usedInProduction": "no",
            },
        ],
        "payroll": [
            {
                "id": 6,
                "date": "2024-03-31",
                "name": "Ana",
                "position": "Baker",
                "basicSalary": "20",
                "benefits": [{"label": "Transport", "amount": "5"}],
                "deductions": [{"label": "Tax", "amount": "5"}],
                "netPay": "20",
            },
        ],
        "miscellaneous": [
            {
                "id": 7,
                "date": "2024-03-15",
                "category": "Office",
                "description": "Stationery",
                "amount": "10",
                "cashFlowType": "operating",
            },
        ],
        "capital": [
            {
                "id": 8,
                "date": "2024-03-01",
                "description": "Owner contribution",
                "type": "investment",
                "category": "equity",
                "amount": "500",
                "paidVia": "Bank",
            },
            {
                "id": 9,
                "date": "2024-03-12",
                "description": "Oven",
                "type": "purchase",
                "category": "asset",
                "amount": "200",
                "paidVia": "Cash",
            },
        ],
    }


@pytest.fixture
def sample_store(sample_records):
    """In-memory record store seeded with the sample records."""
    return InMemoryRecordStore(sample_records)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
