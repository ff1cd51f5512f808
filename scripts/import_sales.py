#!/usr/bin/env python3
"""
Sales Import Script

Replaces the ledger's sales with the records in a JSON snapshot produced by
export_sales.py. This is a full replacement, not a merge; existing sales are
discarded. A malformed file leaves the ledger untouched.

Usage:
    python import_sales.py backup.json --replace
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.sale_codec import DecodeError
from repositories.settings import LedgerSettings, create_store
from services.ledger_service import Ledger


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Replace all ledger sales with the contents of a JSON snapshot",
    )

    parser.add_argument(
        "input",
        help="Path to a JSON snapshot written by export_sales.py"
    )

    parser.add_argument(
        "--replace",
        action="store_true",
        help="Confirm that existing sales should be replaced"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if not args.replace:
        print("Import replaces every existing sale. Re-run with --replace to confirm.")
        return 2

    path = Path(args.input)
    if not path.is_file():
        print(f"ERROR: file not found: {path}", file=sys.stderr)
        return 1

    settings = LedgerSettings.from_env()
    ledger = Ledger(create_store(settings))
    previous_count = len(ledger.sales)

    try:
        imported = ledger.import_snapshot(path.read_bytes())
    except DecodeError as e:
        print(f"ERROR: {path} is not a valid sales export: {e}", file=sys.stderr)
        print("Existing sales were left unchanged.", file=sys.stderr)
        return 1

    print("=" * 60)
    print("IMPORT SUMMARY")
    print("=" * 60)
    print(f"Sales replaced:  {previous_count}")
    print(f"Sales imported:  {imported}")
    print(f"Customers:       {len(ledger.buyers)}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
