"""
Tests for `services/csv_export_service.py`.

Covers:
- Header and row layout, money rendered to cents.
- Formula characters stripped from buyer names and notes, with a warning log.
- Empty exports contain only the header.
"""

from __future__ import annotations

import csv
import logging
from io import StringIO

import pytest

from services.csv_export_service import CSV_COLUMNS, generate_sales_csv, sanitize_csv_field

from conftest import make_sale


def _rows(content: str) -> list:
    return list(csv.reader(StringIO(content)))


def test_csv_has_header_and_one_row_per_sale() -> None:
    sale = make_sale("Anna", quantity=18, price="4.5", notes="Brown eggs")

    rows = _rows(generate_sales_csv([sale]))

    assert rows[0] == CSV_COLUMNS
    assert rows[1] == [
        str(sale.sale_id),
        "2025-01-15T12:00:00+00:00",
        "Anna",
        "18",
        "1.50",
        "4.50",
        "3.00",
        "Brown eggs",
    ]


def test_csv_keeps_given_order() -> None:
    sales = [make_sale("First"), make_sale("Second"), make_sale("Third")]

    rows = _rows(generate_sales_csv(sales))

    assert [row[2] for row in rows[1:]] == ["First", "Second", "Third"]


def test_empty_export_is_header_only() -> None:
    assert _rows(generate_sales_csv([])) == [CSV_COLUMNS]


def test_zero_quantity_sale_has_zero_price_per_dozen() -> None:
    rows = _rows(generate_sales_csv([make_sale(quantity=0, price="2.00")]))

    assert rows[1][6] == "0.00"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("=HYPERLINK(\"http://evil\")", "HYPERLINK(\"http://evil\")"),
        ("+1234", "1234"),
        ("-@cmd", "cmd"),
        ("Anna", "Anna"),
        ("  Anna  ", "Anna"),
        (None, ""),
        ("", ""),
    ],
)
def test_sanitize_csv_field(value, expected) -> None:
    assert sanitize_csv_field(value, "buyer_name") == expected


def test_sanitizing_logs_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.csv_export_service"):
        rows = _rows(generate_sales_csv([make_sale("=cmd|' /C calc'!A0", notes="@SUM(A1)")]))

    assert rows[1][2] == "cmd|' /C calc'!A0"
    assert rows[1][7] == "SUM(A1)"
    fields = [record.field_name for record in caplog.records]
    assert fields == ["buyer_name", "notes"]


def test_clean_values_do_not_log(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.csv_export_service"):
        generate_sales_csv([make_sale("Anna", notes="Paid in cash")])

    assert caplog.records == []
