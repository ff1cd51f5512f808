"""
Analytics service.

Pure functions over a ledger snapshot: timeframe filtering, summary
statistics, chart bucketing and insights. Nothing here reads the clock or
the store; `now` and the local calendar are always passed in.

Rules worth knowing when reading the numbers:
- Timeframe filters have a lower bound only (start of the current week, month
  or year) and include everything after it.
- Charts are computed over the full record set, not the filtered one.
- Quantity and average-price charts always show the last seven days, whatever
  timeframe is selected. Only the income chart follows the timeframe.
- Top customers rank lifetime totals, not totals within the timeframe.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Sequence, Tuple

from domain.buyer import BuyerAggregate
from domain.sale import SaleRecord
from domain.time import WEEKDAY_NAMES, SalesCalendar, require_utc_timestamp
from domain.timeframe import ChartType, Timeframe
from services.ledger_service import LedgerSnapshot

NOT_ENOUGH_DATA = "Not enough data"
NO_CUSTOMERS = "No customers"

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class SalesSummary:
    total_income: Decimal
    total_eggs: int
    total_sales_count: int
    average_price_per_dozen: Decimal


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """
    One chart bucket covering [start, end).

    period: display label. Weekday number (Sunday = 1) for daily buckets,
    weeks back + 1 for weekly buckets, month number for monthly buckets.
    """

    period: int
    start: datetime
    end: datetime
    value: Decimal


@dataclass(frozen=True, slots=True)
class Insights:
    best_selling_period: str
    average_order_size: Decimal
    most_active_customer: str
    top_customers: List[BuyerAggregate]


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    timeframe: Timeframe
    chart_type: ChartType
    summary: SalesSummary
    chart: List[ChartPoint]
    insights: Insights


# ============================================================================
# Filtering and summary
# ============================================================================

def timeframe_start(timeframe: Timeframe, *, now: datetime, calendar: SalesCalendar) -> datetime:
    """Inclusive lower bound of a timeframe: start of the current week, month or year."""

    if timeframe is Timeframe.WEEK:
        return calendar.start_of_week(now)
    if timeframe is Timeframe.MONTH:
        return calendar.start_of_month(now)
    return calendar.start_of_year(now)


def filter_by_timeframe(
    sales: Sequence[SaleRecord],
    timeframe: Timeframe,
    *,
    now: datetime,
    calendar: SalesCalendar,
) -> List[SaleRecord]:
    require_utc_timestamp("now", now)
    start = timeframe_start(timeframe, now=now, calendar=calendar)
    return [sale for sale in sales if sale.date >= start]


def summarize(sales: Sequence[SaleRecord]) -> SalesSummary:
    total_income = sum((sale.price for sale in sales), _ZERO)
    total_dozens = sum((sale.quantity_in_dozens for sale in sales), _ZERO)
    return SalesSummary(
        total_income=total_income,
        total_eggs=sum(sale.quantity for sale in sales),
        total_sales_count=len(sales),
        average_price_per_dozen=total_income / total_dozens if total_dozens > 0 else _ZERO,
    )


# ============================================================================
# Chart bucketing
# ============================================================================

# (period label, start, end) for each bucket, oldest first
Bucket = Tuple[int, datetime, datetime]
BucketScheme = Callable[[datetime, SalesCalendar], List[Bucket]]


def _daily_buckets(now: datetime, calendar: SalesCalendar) -> List[Bucket]:
    """Seven calendar days: six days ago through today."""

    buckets: List[Bucket] = []
    for days_back in range(6, -1, -1):
        day = calendar.add_days(now, -days_back)
        start = calendar.start_of_day(day)
        end = calendar.start_of_day(calendar.add_days(start, 1))
        buckets.append((calendar.weekday_index(day) + 1, start, end))
    return buckets


def _weekly_buckets(now: datetime, calendar: SalesCalendar) -> List[Bucket]:
    """Four 7-day windows starting 3, 2, 1 and 0 weeks before now."""

    buckets: List[Bucket] = []
    for weeks_back in range(3, -1, -1):
        start = calendar.add_days(now, -7 * weeks_back)
        buckets.append((weeks_back + 1, start, calendar.add_days(start, 7)))
    return buckets


def _monthly_buckets(now: datetime, calendar: SalesCalendar) -> List[Bucket]:
    """Twelve one-month windows starting 11 ... 0 months before now."""

    buckets: List[Bucket] = []
    for months_back in range(11, -1, -1):
        start = calendar.add_months(now, -months_back)
        end = calendar.add_months(start, 1)
        buckets.append((calendar.local(start).month, start, end))
    return buckets


# Which buckets each (chart, timeframe) pair plots. Quantity and average
# price charts use the seven-day scheme for every timeframe.
BUCKET_SCHEMES: Dict[Tuple[ChartType, Timeframe], BucketScheme] = {
    (ChartType.INCOME, Timeframe.WEEK): _daily_buckets,
    (ChartType.INCOME, Timeframe.MONTH): _weekly_buckets,
    (ChartType.INCOME, Timeframe.YEAR): _monthly_buckets,
    **{(ChartType.QUANTITY, timeframe): _daily_buckets for timeframe in Timeframe},
    **{(ChartType.AVERAGE_PRICE, timeframe): _daily_buckets for timeframe in Timeframe},
}


def _income(sales: Sequence[SaleRecord]) -> Decimal:
    return sum((sale.price for sale in sales), _ZERO)


def _quantity(sales: Sequence[SaleRecord]) -> Decimal:
    return Decimal(sum(sale.quantity for sale in sales))


def _average_price(sales: Sequence[SaleRecord]) -> Decimal:
    if not sales:
        return _ZERO
    return sum((sale.price_per_dozen for sale in sales), _ZERO) / len(sales)


BUCKET_VALUES: Dict[ChartType, Callable[[Sequence[SaleRecord]], Decimal]] = {
    ChartType.INCOME: _income,
    ChartType.QUANTITY: _quantity,
    ChartType.AVERAGE_PRICE: _average_price,
}


def chart_data(
    sales: Sequence[SaleRecord],
    chart_type: ChartType,
    timeframe: Timeframe,
    *,
    now: datetime,
    calendar: SalesCalendar,
) -> List[ChartPoint]:
    """
    Bucket the full record set for a chart, oldest bucket first.

    Args:
        sales: All records (not timeframe-filtered)
        chart_type: Value plotted per bucket
        timeframe: Selected timeframe; only the income chart follows it
        now: Current UTC time
        calendar: Local calendar for day and month boundaries
    """

    require_utc_timestamp("now", now)
    scheme = BUCKET_SCHEMES[(chart_type, timeframe)]
    value_of = BUCKET_VALUES[chart_type]

    points: List[ChartPoint] = []
    for period, start, end in scheme(now, calendar):
        in_bucket = [sale for sale in sales if start <= sale.date < end]
        points.append(ChartPoint(period=period, start=start, end=end, value=value_of(in_bucket)))
    return points


# ============================================================================
# Insights
# ============================================================================

def best_selling_period(sales: Sequence[SaleRecord], *, calendar: SalesCalendar) -> str:
    """
    Weekday with the most sales.

    Ties go to the earliest weekday in Sunday ... Saturday order.
    Returns NOT_ENOUGH_DATA when there are no sales.
    """

    if not sales:
        return NOT_ENOUGH_DATA

    counts = Counter(calendar.weekday_index(sale.date) for sale in sales)
    best = max(range(7), key=lambda index: (counts[index], -index))
    return WEEKDAY_NAMES[best]


def average_order_size(sales: Sequence[SaleRecord]) -> Decimal:
    """Mean order size in dozens; 0 when there are no sales."""

    if not sales:
        return _ZERO
    return sum((sale.quantity_in_dozens for sale in sales), _ZERO) / len(sales)


def top_customers(buyers: Sequence[BuyerAggregate]) -> List[BuyerAggregate]:
    """Lifetime buyer ranking by total paid, highest first (stable on ties)."""

    return sorted(buyers, key=lambda buyer: buyer.total_paid, reverse=True)


def most_active_customer(buyers: Sequence[BuyerAggregate]) -> str:
    ranking = top_customers(buyers)
    return ranking[0].name if ranking else NO_CUSTOMERS


def build_insights(
    filtered_sales: Sequence[SaleRecord],
    buyers: Sequence[BuyerAggregate],
    *,
    calendar: SalesCalendar,
) -> Insights:
    return Insights(
        best_selling_period=best_selling_period(filtered_sales, calendar=calendar),
        average_order_size=average_order_size(filtered_sales),
        most_active_customer=most_active_customer(buyers),
        top_customers=top_customers(buyers),
    )


def build_report(
    snapshot: LedgerSnapshot,
    timeframe: Timeframe,
    chart_type: ChartType,
    *,
    now: datetime,
    calendar: SalesCalendar,
) -> AnalyticsReport:
    """
    Everything an analytics screen shows for one timeframe and chart type.

    Example:
        report = build_report(
            ledger.snapshot(),
            Timeframe.MONTH,
            ChartType.INCOME,
            now=datetime.now(timezone.utc),
            calendar=settings.calendar(),
        )
    """

    sales = snapshot.sales
    filtered = filter_by_timeframe(sales, timeframe, now=now, calendar=calendar)
    return AnalyticsReport(
        timeframe=timeframe,
        chart_type=chart_type,
        summary=summarize(filtered),
        chart=chart_data(sales, chart_type, timeframe, now=now, calendar=calendar),
        insights=build_insights(filtered, snapshot.buyers, calendar=calendar),
    )


__all__ = [
    "NOT_ENOUGH_DATA",
    "NO_CUSTOMERS",
    "SalesSummary",
    "ChartPoint",
    "Insights",
    "AnalyticsReport",
    "BUCKET_SCHEMES",
    "timeframe_start",
    "filter_by_timeframe",
    "summarize",
    "chart_data",
    "best_selling_period",
    "average_order_size",
    "top_customers",
    "most_active_customer",
    "build_insights",
    "build_report",
]
