"""
Domain: Buyer aggregates.

Buyer aggregates are derived, never edited. The set of aggregates always
equals the distinct buyer names among the current sale records, and is
rebuilt wholesale from the records after every change to the record set.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .sale import EGGS_PER_DOZEN, SaleRecord


@dataclass(frozen=True, slots=True)
class BuyerAggregate:
    """Running totals for one customer across all of their sales."""

    name: str
    total_eggs_purchased: int = 0
    total_paid: Decimal = Decimal("0")

    @property
    def total_dozens_purchased(self) -> Decimal:
        return Decimal(self.total_eggs_purchased) / EGGS_PER_DOZEN


def aggregate_buyers(sales: Iterable[SaleRecord]) -> List[BuyerAggregate]:
    """
    Recompute buyer aggregates from scratch in a single pass over the records.

    Ordering: descending by total_paid. Buyers with equal total_paid keep the
    order in which they first appear among the records (the sort is stable and
    the accumulator preserves insertion order).
    """

    totals: Dict[str, Tuple[int, Decimal]] = {}
    for sale in sales:
        eggs, paid = totals.get(sale.buyer_name, (0, Decimal("0")))
        totals[sale.buyer_name] = (eggs + sale.quantity, paid + sale.price)

    buyers = [
        BuyerAggregate(name=name, total_eggs_purchased=eggs, total_paid=paid)
        for name, (eggs, paid) in totals.items()
    ]
    return sorted(buyers, key=lambda buyer: buyer.total_paid, reverse=True)


__all__ = ["BuyerAggregate", "aggregate_buyers"]
