"""
Wire codec for sale records and buyer aggregates.

Two JSON shapes are defined here with pydantic models:

- Stored shape: what the ledger persists. Sales carry their `id` so that
  identifiers survive a restart.
- Exchange shape: what export produces and import consumes. Identifiers are
  internal and are not exported; imported records get fresh identifiers.

Field names on the wire are camelCase (`buyerName`, `totalPaid`, ...).
Prices are encoded as decimal strings and timestamps as ISO-8601 UTC.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic_core import PydanticSerializationError

from domain.buyer import BuyerAggregate
from domain.sale import SaleRecord
from domain.time import as_utc


class DecodeError(Exception):
    """Raised when a blob does not match the expected shape."""
    pass


class EncodeError(Exception):
    """Raised when records cannot be serialized."""
    pass


class ExchangeSale(BaseModel):
    """One sale in the export/import format."""

    model_config = ConfigDict(populate_by_name=True)

    buyer_name: str = Field(alias="buyerName")
    date: datetime
    quantity: int
    price: Decimal
    notes: Optional[str] = None


class StoredSale(ExchangeSale):
    """One sale as persisted by the ledger."""

    id: Optional[UUID] = None


class StoredBuyer(BaseModel):
    """One buyer aggregate as persisted by the ledger."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    total_eggs_purchased: int = Field(alias="totalEggsPurchased")
    total_paid: Decimal = Field(alias="totalPaid")


_EXCHANGE_SALES = TypeAdapter(List[ExchangeSale])
_STORED_SALES = TypeAdapter(List[StoredSale])
_STORED_BUYERS = TypeAdapter(List[StoredBuyer])


def _load(adapter: TypeAdapter, blob: bytes, what: str) -> list:
    try:
        return adapter.validate_json(blob)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError; covers malformed JSON too
        raise DecodeError(f"Failed to decode {what}: {exc}") from exc


def _to_record(item: ExchangeSale, sale_id: Optional[UUID]) -> SaleRecord:
    return SaleRecord(
        buyer_name=item.buyer_name,
        date=as_utc(item.date),
        quantity=item.quantity,
        price=item.price,
        notes=item.notes,
        sale_id=sale_id if sale_id is not None else uuid4(),
    )


def _sale_fields(sale: SaleRecord) -> dict[str, Any]:
    return {
        "buyer_name": sale.buyer_name,
        "date": sale.date,
        "quantity": sale.quantity,
        "price": sale.price,
        "notes": sale.notes,
    }


def encode_stored_sales(sales: Sequence[SaleRecord]) -> bytes:
    try:
        items = [StoredSale(id=sale.sale_id, **_sale_fields(sale)) for sale in sales]
        return _STORED_SALES.dump_json(items, by_alias=True)
    except (ValueError, PydanticSerializationError) as exc:
        raise EncodeError(f"Failed to encode sales: {exc}") from exc


def _to_records(items: list, what: str, keep_ids: bool) -> List[SaleRecord]:
    try:
        return [_to_record(item, item.id if keep_ids else None) for item in items]
    except (ValueError, OverflowError) as exc:
        # Timestamps at the edge of the datetime range cannot be moved to UTC
        raise DecodeError(f"Failed to decode {what}: {exc}") from exc


def decode_stored_sales(blob: bytes) -> List[SaleRecord]:
    items = _load(_STORED_SALES, blob, "sales")
    return _to_records(items, "sales", keep_ids=True)


def encode_exchange_sales(sales: Sequence[SaleRecord]) -> bytes:
    try:
        items = [ExchangeSale(**_sale_fields(sale)) for sale in sales]
        return _EXCHANGE_SALES.dump_json(items, by_alias=True)
    except (ValueError, PydanticSerializationError) as exc:
        raise EncodeError(f"Failed to encode export: {exc}") from exc


def decode_exchange_sales(blob: bytes) -> List[SaleRecord]:
    """Decode an exported record list. Every record gets a new identifier."""

    items = _load(_EXCHANGE_SALES, blob, "import")
    return _to_records(items, "import", keep_ids=False)


def encode_buyers(buyers: Sequence[BuyerAggregate]) -> bytes:
    try:
        items = [
            StoredBuyer(
                name=buyer.name,
                total_eggs_purchased=buyer.total_eggs_purchased,
                total_paid=buyer.total_paid,
            )
            for buyer in buyers
        ]
        return _STORED_BUYERS.dump_json(items, by_alias=True)
    except (ValueError, PydanticSerializationError) as exc:
        raise EncodeError(f"Failed to encode buyers: {exc}") from exc


def decode_buyers(blob: bytes) -> List[BuyerAggregate]:
    items = _load(_STORED_BUYERS, blob, "buyers")
    return [
        BuyerAggregate(
            name=item.name,
            total_eggs_purchased=item.total_eggs_purchased,
            total_paid=item.total_paid,
        )
        for item in items
    ]


__all__ = [
    "DecodeError",
    "EncodeError",
    "encode_stored_sales",
    "decode_stored_sales",
    "encode_exchange_sales",
    "decode_exchange_sales",
    "encode_buyers",
    "decode_buyers",
]
