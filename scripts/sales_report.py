#!/usr/bin/env python3
"""
Sales Report Script

Prints the analytics view for a timeframe: summary figures, the chart series
and insights.

Usage:
    python sales_report.py
    python sales_report.py --timeframe year --chart income
    python sales_report.py --timeframe month --chart averagePrice
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.timeframe import ChartType, Timeframe
from repositories.settings import LedgerSettings, create_store
from services.analytics_service import AnalyticsReport, build_report
from services.history_service import dashboard_summary
from services.ledger_service import Ledger


def print_report(report: AnalyticsReport) -> None:
    summary = report.summary
    insights = report.insights
    label = report.timeframe.display_name.lower()

    print("=" * 60)
    print(f"SALES REPORT - this {label}")
    print("=" * 60)
    print(f"Total income:           ${summary.total_income:.2f}")
    print(f"Eggs sold:              {summary.total_eggs}")
    print(f"Sales:                  {summary.total_sales_count}")
    print(f"Avg price per dozen:    ${summary.average_price_per_dozen:.2f}")
    print()
    print(f"{report.chart_type.display_name} chart")
    for point in report.chart:
        print(f"  {point.start.date().isoformat()}  [{point.period:>2}]  {point.value:.2f}")
    print()
    print(f"Best selling day:       {insights.best_selling_period}")
    print(f"Average order size:     {insights.average_order_size:.1f} dozen")
    print(f"Most active customer:   {insights.most_active_customer}")
    print("Top customers (all time):")
    for buyer in insights.top_customers[:5]:
        print(f"  {buyer.name:<24} ${buyer.total_paid:.2f}  ({buyer.total_dozens_purchased:.1f} dozen)")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Print sales analytics for the current week, month or year",
    )

    parser.add_argument(
        "--timeframe",
        "-t",
        choices=[timeframe.value for timeframe in Timeframe],
        default=Timeframe.WEEK.value,
        help="Reporting window (default: week)"
    )

    parser.add_argument(
        "--chart",
        "-c",
        choices=[chart_type.value for chart_type in ChartType],
        default=ChartType.INCOME.value,
        help="Chart to print (default: income)"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    settings = LedgerSettings.from_env()
    calendar = settings.calendar()
    ledger = Ledger(create_store(settings))
    snapshot = ledger.snapshot()
    now = datetime.now(timezone.utc)

    dashboard = dashboard_summary(snapshot, now=now, calendar=calendar)
    print(f"Today:      ${dashboard.today_income:.2f}  ({dashboard.today_dozens} dozen)")
    print(f"This month: ${dashboard.monthly_income:.2f}  ({dashboard.monthly_dozens} dozen)")
    print()

    report = build_report(
        snapshot,
        Timeframe(args.timeframe),
        ChartType(args.chart),
        now=now,
        calendar=calendar,
    )
    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
