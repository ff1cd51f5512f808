"""
CSV export service for sales history.

Renders sale records as a CSV document a seller can open in a spreadsheet.

Security:
- CSV Injection Prevention: Sanitizes free-text fields (buyer name, notes) to
  prevent formula execution
- Security Logging: Logs when dangerous characters are stripped
"""

from __future__ import annotations

import csv
import logging
from decimal import ROUND_HALF_UP, Decimal
from io import StringIO
from typing import List, Sequence

from domain.sale import SaleRecord

logger = logging.getLogger(__name__)

CSV_COLUMNS: List[str] = [
    "Sale ID",
    "Date",
    "Buyer",
    "Quantity (eggs)",
    "Dozens",
    "Price",
    "Price per Dozen",
    "Notes",
]

_CENTS = Decimal("0.01")


def sanitize_csv_field(value: str | None, field_name: str = "unknown") -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Strips leading characters that can trigger formula execution in Excel/Sheets:
    =, +, -, @, tab, carriage return

    If dangerous characters are found and stripped, a warning is logged.

    Args:
        value: Field value to sanitize
        field_name: Name of the field being sanitized (for logging)

    Returns:
        Sanitized string safe for CSV export

    Example:
        sanitize_csv_field("=HYPERLINK(...)", "buyer_name")
        # Returns "HYPERLINK(...)" and logs warning about stripped "=" character

        sanitize_csv_field("Anna", "buyer_name")
        # Returns "Anna" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value).strip()
    original_text = text
    dangerous_chars = {'=', '+', '-', '@', '\t', '\r'}

    stripped_chars = []
    while text and text[0] in dangerous_chars:
        stripped_chars.append(text[0])
        text = text[1:]

    if stripped_chars:
        logger.warning(
            f"CSV injection character(s) stripped from field '{field_name}'",
            extra={
                "field_name": field_name,
                "stripped_characters": "".join(stripped_chars),
                "original_value": original_text[:100],  # First 100 chars
                "sanitized_value": text[:100],
                "modification_type": "csv_injection_prevention"
            }
        )

    return text


def _money(value: Decimal) -> str:
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def sale_to_csv_row(sale: SaleRecord) -> List[str]:
    return [
        str(sale.sale_id),
        sale.date.isoformat(),
        sanitize_csv_field(sale.buyer_name, "buyer_name"),
        str(sale.quantity),
        str(sale.quantity_in_dozens.quantize(_CENTS, rounding=ROUND_HALF_UP)),
        _money(sale.price),
        _money(sale.price_per_dozen),
        sanitize_csv_field(sale.notes, "notes"),
    ]


def generate_sales_csv(sales: Sequence[SaleRecord]) -> str:
    """
    Generate CSV content for the given sales, in the order given.

    Args:
        sales: Records to export (typically a filtered history, newest first)

    Returns:
        CSV content as a string (header only when `sales` is empty)

    Example:
        csv_content = generate_sales_csv(ledger.sales)

        with open("egg_sales.csv", "w", newline="") as f:
            f.write(csv_content)
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)

    for sale in sales:
        writer.writerow(sale_to_csv_row(sale))

    return output.getvalue()


__all__ = [
    "CSV_COLUMNS",
    "generate_sales_csv",
    "sale_to_csv_row",
    "sanitize_csv_field",
]
