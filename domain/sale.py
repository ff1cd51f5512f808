"""
Domain: Sale records.

A SaleRecord captures one egg sale: who bought, when, how many eggs and what
was paid. Records are immutable; an update replaces a record wholesale by
matching on sale_id.

No range validation is applied to quantity or price. Zero or negative
quantities, negative prices and empty buyer names are stored as given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from .time import require_utc_timestamp

EGGS_PER_DOZEN = 12


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a single egg sale.

    - buyer_name: customer name, matched exactly (case-sensitive)
    - date: UTC timestamp of the sale
    - quantity: number of eggs
    - price: total amount paid for the sale
    - notes: free-form remark (optional)
    - sale_id: unique identifier, generated when not supplied
    """

    buyer_name: str
    date: datetime
    quantity: int
    price: Decimal
    notes: Optional[str] = None
    sale_id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        require_utc_timestamp("date", self.date)

    @property
    def quantity_in_dozens(self) -> Decimal:
        return Decimal(self.quantity) / EGGS_PER_DOZEN

    @property
    def price_per_dozen(self) -> Decimal:
        """Price divided by dozens sold; 0 when no eggs were sold."""

        if self.quantity == 0:
            return Decimal("0")
        return self.price / self.quantity_in_dozens
