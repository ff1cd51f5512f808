"""
Pytest configuration for ledger tests.

This file adds the project directory to the Python path so that tests
can import from the domain, repositories, services and scripts modules,
and provides the fixtures shared across test modules.
"""

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Add the project directory to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.sale import SaleRecord  # noqa: E402
from domain.time import SalesCalendar  # noqa: E402
from repositories.store import InMemoryStore  # noqa: E402

# Wednesday, 15 January 2025, noon UTC
NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_sale(
    buyer_name: str = "Anna",
    date: datetime = NOW,
    quantity: int = 12,
    price: str = "3.00",
    notes: str | None = None,
) -> SaleRecord:
    return SaleRecord(
        buyer_name=buyer_name,
        date=date,
        quantity=quantity,
        price=Decimal(price),
        notes=notes,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def calendar() -> SalesCalendar:
    """UTC calendar with weeks starting on Sunday."""
    return SalesCalendar()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
