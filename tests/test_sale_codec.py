"""
Tests for `repositories/sale_codec.py`.

Covers:
- Stored sales keep their identifiers; exported sales do not carry them.
- Exchange format field names and value encodings.
- Imports accept numeric prices and naive timestamps (read as UTC).
- Malformed blobs raise DecodeError.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from domain.buyer import BuyerAggregate
from repositories.sale_codec import (
    DecodeError,
    decode_buyers,
    decode_exchange_sales,
    decode_stored_sales,
    encode_buyers,
    encode_exchange_sales,
    encode_stored_sales,
)

from conftest import make_sale


def test_stored_sales_keep_identifiers() -> None:
    sales = [make_sale("Anna", notes="Paid in cash"), make_sale("John", quantity=36, price="9.00")]

    decoded = decode_stored_sales(encode_stored_sales(sales))

    assert decoded == sales


def test_export_uses_exchange_field_names_without_ids() -> None:
    sale = make_sale("Anna", quantity=24, price="6.00", notes=None)

    payload = json.loads(encode_exchange_sales([sale]))

    assert payload == [
        {
            "buyerName": "Anna",
            "date": "2025-01-15T12:00:00Z",
            "quantity": 24,
            "price": "6.00",
            "notes": None,
        }
    ]


def test_import_regenerates_identifiers() -> None:
    sale = make_sale()

    (imported,) = decode_exchange_sales(encode_stored_sales([sale]))

    assert imported.sale_id != sale.sale_id
    assert (imported.buyer_name, imported.date, imported.quantity, imported.price) == (
        sale.buyer_name,
        sale.date,
        sale.quantity,
        sale.price,
    )


def test_import_accepts_numeric_price_and_naive_date() -> None:
    blob = b'[{"buyerName": "Sarah", "date": "2025-01-10T08:30:00", "quantity": 36, "price": 9.5}]'

    (sale,) = decode_exchange_sales(blob)

    assert sale.price == Decimal("9.5")
    assert sale.date == datetime(2025, 1, 10, 8, 30, tzinfo=timezone.utc)
    assert sale.notes is None


@pytest.mark.parametrize(
    "blob",
    [
        b"",
        b"not json",
        b'{"buyerName": "Anna"}',
        b'[{"buyerName": "Anna", "date": "2025-01-10T08:30:00Z", "quantity": 12}]',
        b'[{"buyerName": "Anna", "date": "yesterday", "quantity": 12, "price": "3"}]',
        b'[{"buyerName": "Anna", "date": "2025-01-10T08:30:00Z", "quantity": "a dozen", "price": "3"}]',
    ],
)
def test_malformed_blobs_raise_decode_error(blob: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_exchange_sales(blob)
    with pytest.raises(DecodeError):
        decode_stored_sales(blob)


def test_buyers_encode_with_camel_case_totals() -> None:
    buyers = [BuyerAggregate(name="Anna", total_eggs_purchased=36, total_paid=Decimal("9.00"))]

    blob = encode_buyers(buyers)

    assert json.loads(blob) == [{"name": "Anna", "totalEggsPurchased": 36, "totalPaid": "9.00"}]
    assert decode_buyers(blob) == buyers


def test_malformed_buyers_raise_decode_error() -> None:
    with pytest.raises(DecodeError):
        decode_buyers(b'[{"name": "Anna"}]')


def test_timestamp_outside_utc_range_raises_decode_error() -> None:
    """Verify a date that cannot be converted to UTC is a decode failure."""

    blob = b'[{"buyerName": "Anna", "date": "9999-12-31T23:30:00-05:00", "quantity": 12, "price": "1"}]'

    with pytest.raises(DecodeError):
        decode_exchange_sales(blob)
    with pytest.raises(DecodeError):
        decode_stored_sales(blob)
