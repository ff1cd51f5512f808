"""
Domain: Reporting windows and chart kinds.

- Timeframe: rolling window anchored to now (current week, month or year),
  used by analytics.
- ChartType: the quantity plotted by the analytics chart.
- DateRange: history filter choices offered by the sales history screen.
"""

from __future__ import annotations

from enum import Enum


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ChartType(str, Enum):
    INCOME = "income"
    QUANTITY = "quantity"
    AVERAGE_PRICE = "averagePrice"

    @property
    def display_name(self) -> str:
        if self is ChartType.AVERAGE_PRICE:
            return "Avg Price"
        return self.value.capitalize()


class DateRange(str, Enum):
    TODAY = "today"
    THIS_WEEK = "thisWeek"
    THIS_MONTH = "thisMonth"
    CUSTOM = "custom"
    ALL_TIME = "allTime"

    @property
    def display_name(self) -> str:
        return {
            DateRange.TODAY: "Today",
            DateRange.THIS_WEEK: "This Week",
            DateRange.THIS_MONTH: "This Month",
            DateRange.CUSTOM: "Custom",
            DateRange.ALL_TIME: "All Time",
        }[self]
