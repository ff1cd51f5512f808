"""
Ledger repository (persistence).

This module provides *only* persistence operations for the ledger: it maps
the record set and the buyer aggregate cache onto two blobs of a
PersistenceStore. It does not recompute aggregates or decide how to recover
from a bad blob; the ledger service does that.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from domain.buyer import BuyerAggregate
from domain.sale import SaleRecord
from repositories.sale_codec import (
    decode_buyers,
    decode_stored_sales,
    encode_buyers,
    encode_stored_sales,
)
from repositories.store import PersistenceStore

# Store keys for the two persisted collections.
SALES_KEY: str = "SavedSales"
BUYERS_KEY: str = "SavedBuyers"


def load_sales(store: PersistenceStore) -> Optional[List[SaleRecord]]:
    """
    Read the persisted record set.

    Returns:
        List of SaleRecord, or None when nothing is stored

    Raises:
        DecodeError: If the stored blob is malformed
    """

    blob = store.get(SALES_KEY)
    if blob is None:
        return None
    return decode_stored_sales(blob)


def load_buyers(store: PersistenceStore) -> Optional[List[BuyerAggregate]]:
    """
    Read the persisted buyer aggregate cache.

    Returns:
        List of BuyerAggregate, or None when nothing is stored

    Raises:
        DecodeError: If the stored blob is malformed
    """

    blob = store.get(BUYERS_KEY)
    if blob is None:
        return None
    return decode_buyers(blob)


def save_sales(store: PersistenceStore, sales: Sequence[SaleRecord]) -> None:
    """Encode and write the record set. Raises EncodeError before writing anything."""

    store.set(SALES_KEY, encode_stored_sales(sales))


def save_buyers(store: PersistenceStore, buyers: Sequence[BuyerAggregate]) -> None:
    """Encode and write the buyer aggregates. Raises EncodeError before writing anything."""

    store.set(BUYERS_KEY, encode_buyers(buyers))


def remove_all(store: PersistenceStore) -> None:
    store.remove(SALES_KEY)
    store.remove(BUYERS_KEY)


__all__ = [
    "SALES_KEY",
    "BUYERS_KEY",
    "load_sales",
    "load_buyers",
    "save_sales",
    "save_buyers",
    "remove_all",
]
