"""
Sales history, customer lookup and dashboard figures.

Read-side helpers for the history, customer and dashboard screens. Like the
analytics service these are pure functions over a snapshot; `now` and the
local calendar are passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from domain.buyer import BuyerAggregate
from domain.sale import EGGS_PER_DOZEN, SaleRecord
from domain.time import SalesCalendar, require_utc_timestamp
from domain.timeframe import DateRange
from services.ledger_service import LedgerSnapshot


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """
    Headline figures for the dashboard.

    Dozens are whole dozens (eggs // 12), matching what the dashboard shows.
    """

    today_income: Decimal
    today_dozens: int
    monthly_income: Decimal
    monthly_dozens: int
    lifetime_income: Decimal
    total_sales_count: int
    customer_count: int


def _newest_first(sales: Sequence[SaleRecord]) -> List[SaleRecord]:
    return sorted(sales, key=lambda sale: sale.date, reverse=True)


def filter_history(
    sales: Sequence[SaleRecord],
    date_range: DateRange,
    *,
    now: datetime,
    calendar: SalesCalendar,
    customer: Optional[str] = None,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
) -> List[SaleRecord]:
    """
    Sales matching a history filter, newest first.

    Args:
        sales: All records
        date_range: TODAY, THIS_WEEK, THIS_MONTH, CUSTOM or ALL_TIME
        now: Current UTC time
        calendar: Local calendar for day, week and month boundaries
        customer: Exact buyer name to keep (None keeps every buyer)
        custom_start: Inclusive lower bound for CUSTOM
        custom_end: Inclusive upper bound for CUSTOM

    Raises:
        ValueError: If CUSTOM is requested without both bounds
    """

    require_utc_timestamp("now", now)
    selected = list(sales)

    if date_range is DateRange.TODAY:
        selected = [sale for sale in selected if calendar.is_same_day(sale.date, now)]
    elif date_range is DateRange.THIS_WEEK:
        start = calendar.start_of_week(now)
        selected = [sale for sale in selected if sale.date >= start]
    elif date_range is DateRange.THIS_MONTH:
        start = calendar.start_of_month(now)
        selected = [sale for sale in selected if sale.date >= start]
    elif date_range is DateRange.CUSTOM:
        if custom_start is None or custom_end is None:
            raise ValueError("custom_start and custom_end are required for a custom range")
        require_utc_timestamp("custom_start", custom_start)
        require_utc_timestamp("custom_end", custom_end)
        selected = [sale for sale in selected if custom_start <= sale.date <= custom_end]

    if customer is not None:
        selected = [sale for sale in selected if sale.buyer_name == customer]

    return _newest_first(selected)


def known_buyer_names(sales: Sequence[SaleRecord]) -> List[str]:
    """Distinct buyer names, sorted (used to suggest names for a new sale)."""

    return sorted({sale.buyer_name for sale in sales})


def sales_for_buyer(sales: Sequence[SaleRecord], name: str) -> List[SaleRecord]:
    return _newest_first([sale for sale in sales if sale.buyer_name == name])


def search_buyers(buyers: Sequence[BuyerAggregate], text: str) -> List[BuyerAggregate]:
    """Buyers whose name contains `text`, ignoring case. Empty text matches all."""

    if not text:
        return list(buyers)
    needle = text.casefold()
    return [buyer for buyer in buyers if needle in buyer.name.casefold()]


def recent_sales(sales: Sequence[SaleRecord], limit: int = 5) -> List[SaleRecord]:
    return _newest_first(sales)[:limit]


def dashboard_summary(
    snapshot: LedgerSnapshot,
    *,
    now: datetime,
    calendar: SalesCalendar,
) -> DashboardSummary:
    require_utc_timestamp("now", now)
    today = [sale for sale in snapshot.sales if calendar.is_same_day(sale.date, now)]
    month_start = calendar.start_of_month(now)
    this_month = [sale for sale in snapshot.sales if sale.date >= month_start]

    return DashboardSummary(
        today_income=sum((sale.price for sale in today), Decimal("0")),
        today_dozens=sum(sale.quantity for sale in today) // EGGS_PER_DOZEN,
        monthly_income=sum((sale.price for sale in this_month), Decimal("0")),
        monthly_dozens=sum(sale.quantity for sale in this_month) // EGGS_PER_DOZEN,
        lifetime_income=sum((sale.price for sale in snapshot.sales), Decimal("0")),
        total_sales_count=len(snapshot.sales),
        customer_count=len(snapshot.buyers),
    )


__all__ = [
    "DashboardSummary",
    "filter_history",
    "known_buyer_names",
    "sales_for_buyer",
    "search_buyers",
    "recent_sales",
    "dashboard_summary",
]
