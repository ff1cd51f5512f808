"""
Tests for `domain/buyer.py`.

Covers:
- One aggregate per distinct buyer name, with summed eggs and payments.
- Ordering by total paid, highest first; ties keep first-appearance order.
- Buyer names are matched case-sensitively.
"""

from __future__ import annotations

from decimal import Decimal

from domain.buyer import BuyerAggregate, aggregate_buyers

from conftest import make_sale


def test_aggregate_buyers_sums_per_buyer() -> None:
    sales = [
        make_sale("Anna", quantity=24, price="6.00"),
        make_sale("John", quantity=12, price="3.50"),
        make_sale("Anna", quantity=12, price="3.00"),
    ]

    buyers = aggregate_buyers(sales)

    assert buyers == [
        BuyerAggregate(name="Anna", total_eggs_purchased=36, total_paid=Decimal("9.00")),
        BuyerAggregate(name="John", total_eggs_purchased=12, total_paid=Decimal("3.50")),
    ]
    assert buyers[0].total_dozens_purchased == Decimal("3")


def test_aggregate_buyers_sorted_by_total_paid_descending() -> None:
    sales = [
        make_sale("Low", price="1.00"),
        make_sale("High", price="10.00"),
        make_sale("Mid", price="5.00"),
    ]

    assert [buyer.name for buyer in aggregate_buyers(sales)] == ["High", "Mid", "Low"]


def test_equal_totals_keep_first_appearance_order() -> None:
    sales = [
        make_sale("Sarah", price="4.00"),
        make_sale("Anna", price="4.00"),
        make_sale("John", price="4.00"),
    ]

    assert [buyer.name for buyer in aggregate_buyers(sales)] == ["Sarah", "Anna", "John"]


def test_buyer_names_are_case_sensitive() -> None:
    sales = [make_sale("Anna"), make_sale("anna")]

    assert sorted(buyer.name for buyer in aggregate_buyers(sales)) == ["Anna", "anna"]


def test_no_sales_means_no_buyers() -> None:
    assert aggregate_buyers([]) == []
