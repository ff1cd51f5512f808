#!/usr/bin/env python3
"""
Sales Export Script

Writes the ledger's sales either as a JSON snapshot (the format
import_sales.py reads back) or as a CSV sales history.

Usage:
    python export_sales.py --output backup.json
    python export_sales.py --format csv --output sales.csv
    python export_sales.py --format csv --range thisMonth --customer Anna --output anna.csv
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

from domain.timeframe import DateRange
from repositories.sale_codec import EncodeError
from repositories.settings import LedgerSettings, create_store
from services.csv_export_service import generate_sales_csv
from services.history_service import filter_history
from services.ledger_service import Ledger


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export egg sales to a JSON snapshot or a CSV file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full backup that can be imported again
  python export_sales.py --output backup.json

  # Sales history as CSV
  python export_sales.py --format csv --output sales.csv

  # This month's sales for one customer
  python export_sales.py --format csv --range thisMonth --customer Anna -o anna.csv
        """
    )

    parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Path to output file"
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=["json", "csv"],
        default="json",
        help="Output format (default: json)"
    )

    parser.add_argument(
        "--range",
        "-r",
        choices=[date_range.value for date_range in DateRange if date_range is not DateRange.CUSTOM],
        default=DateRange.ALL_TIME.value,
        help="Date range for CSV export (default: allTime)"
    )

    parser.add_argument(
        "--customer",
        "-c",
        help="Only export this customer's sales (CSV only)"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = LedgerSettings.from_env()
        ledger = Ledger(create_store(settings))

        if args.format == "json":
            content = ledger.export_snapshot()
            Path(args.output).write_bytes(content)
            print(f"✓ Exported {len(ledger.sales)} sales to {args.output}")
            return 0

        sales = filter_history(
            ledger.sales,
            DateRange(args.range),
            now=datetime.now(timezone.utc),
            calendar=settings.calendar(),
            customer=args.customer,
        )
        if not sales:
            print("No sales found matching the specified filters")
            return 1

        with open(args.output, "w", newline="", encoding="utf-8") as f:
            f.write(generate_sales_csv(sales))

        print(f"✓ Exported {len(sales)} sales to {args.output}")
        return 0

    except EncodeError as e:
        print(f"\nERROR: could not encode sales: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\n\nExport interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
