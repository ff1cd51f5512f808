"""
Property tests for ledger invariants.

INVARIANT: after any sequence of add / delete / update / delete_customer
operations, the buyer aggregates are exactly the distinct buyer names among
the current records, each carrying the sums over that buyer's records, sorted
by total paid (highest first). The persisted copy matches the in-memory one.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from domain.sale import SaleRecord
from repositories.ledger_repository import BUYERS_KEY, SALES_KEY
from repositories.sale_codec import decode_buyers, decode_stored_sales
from repositories.store import InMemoryStore
from services.ledger_service import Ledger

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)

names = st.sampled_from(["Anna", "anna", "John", "Sarah", ""])

sales = st.builds(
    SaleRecord,
    buyer_name=names,
    date=st.integers(min_value=0, max_value=400 * 24).map(lambda hours: BASE + timedelta(hours=hours)),
    quantity=st.integers(min_value=-12, max_value=120),
    price=st.decimals(min_value=-5, max_value=100, places=2),
    notes=st.none() | st.text(max_size=10),
)

operations = st.lists(
    st.one_of(
        st.tuples(st.just("add"), sales),
        st.tuples(st.just("delete"), st.integers(min_value=0, max_value=20)),
        st.tuples(st.just("update"), st.integers(min_value=0, max_value=20), sales),
        st.tuples(st.just("delete_customer"), names),
    ),
    max_size=25,
)


def _apply(ledger: Ledger, operation: tuple) -> None:
    kind = operation[0]
    current = ledger.sales
    if kind == "add":
        ledger.add_sale(operation[1])
    elif kind == "delete":
        if current:
            ledger.delete_sale(current[operation[1] % len(current)].sale_id)
    elif kind == "update":
        if current:
            target = current[operation[1] % len(current)]
            ledger.update_sale(replace(operation[2], sale_id=target.sale_id))
    else:
        ledger.delete_customer(operation[1])


class TestBuyerAggregateProperties:
    """Property-based checks of the aggregate invariant."""

    @given(operations)
    @settings(max_examples=75, deadline=None)
    def test_aggregates_match_records_after_any_operations(self, ops):
        store = InMemoryStore()
        ledger = Ledger(store)

        for operation in ops:
            _apply(ledger, operation)

        expected = {}
        for sale in ledger.sales:
            eggs, paid = expected.get(sale.buyer_name, (0, Decimal("0")))
            expected[sale.buyer_name] = (eggs + sale.quantity, paid + sale.price)

        buyers = ledger.buyers
        assert {b.name: (b.total_eggs_purchased, b.total_paid) for b in buyers} == expected
        assert len(buyers) == len(expected)
        assert [b.total_paid for b in buyers] == sorted((b.total_paid for b in buyers), reverse=True)

        # Nothing is written until the first operation that changes state
        if store.get(SALES_KEY) is not None:
            assert decode_stored_sales(store.get(SALES_KEY)) == list(ledger.sales)
            assert decode_buyers(store.get(BUYERS_KEY)) == list(buyers)

    @given(operations, names)
    @settings(max_examples=50, deadline=None)
    def test_delete_customer_removes_all_and_only_matching_records(self, ops, name):
        ledger = Ledger(InMemoryStore())
        for operation in ops:
            _apply(ledger, operation)
        before = ledger.sales

        ledger.delete_customer(name)

        assert ledger.sales == tuple(sale for sale in before if sale.buyer_name != name)
