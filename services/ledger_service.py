"""
Ledger service.

The Ledger owns the sale records and the buyer aggregates derived from them.
Every mutation follows the same sequence:

1. Apply the change to the record set
2. Recompute buyer aggregates from scratch
3. Write both collections to the persistence store
4. Notify subscribers with the new snapshot

Consumers get a Ledger instance injected; there is no module-level ledger.
Mutations are serialized by a lock (single writer). Readers work from
immutable LedgerSnapshot values and need no locking.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple
from uuid import UUID

from domain.buyer import BuyerAggregate, aggregate_buyers
from domain.sale import SaleRecord
from repositories.ledger_repository import (
    load_buyers,
    load_sales,
    remove_all,
    save_buyers,
    save_sales,
)
from repositories.sale_codec import (
    DecodeError,
    EncodeError,
    decode_exchange_sales,
    encode_exchange_sales,
)
from repositories.store import PersistenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """
    Immutable view of the ledger at one version.

    version increases by one on every change to the record set, so two
    snapshots with the same version hold the same records and aggregates.
    """

    version: int
    sales: Tuple[SaleRecord, ...]
    buyers: Tuple[BuyerAggregate, ...]


Listener = Callable[[LedgerSnapshot], None]


def _totals_by_name(buyers: List[BuyerAggregate]) -> Dict[str, Tuple[int, Decimal]]:
    return {buyer.name: (buyer.total_eggs_purchased, buyer.total_paid) for buyer in buyers}


class Ledger:
    """
    Sale record store with derived buyer aggregates.

    Example:
        ledger = Ledger(FileStore("~/.egg-sales-ledger"))
        ledger.add_sale(SaleRecord(
            buyer_name="Anna",
            date=datetime.now(timezone.utc),
            quantity=24,
            price=Decimal("6.00"),
        ))
        snapshot = ledger.snapshot()
    """

    def __init__(self, store: PersistenceStore) -> None:
        self._store = store
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._sales: List[SaleRecord] = []
        self._buyers: List[BuyerAggregate] = []
        self._version = 0
        self._load()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._version

    @property
    def sales(self) -> Tuple[SaleRecord, ...]:
        return tuple(self._sales)

    @property
    def buyers(self) -> Tuple[BuyerAggregate, ...]:
        return tuple(self._buyers)

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                version=self._version,
                sales=tuple(self._sales),
                buyers=tuple(self._buyers),
            )

    def get_sale(self, sale_id: UUID) -> Optional[SaleRecord]:
        for sale in self._sales:
            if sale.sale_id == sale_id:
                return sale
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after each mutation.

        Returns:
            A callable that removes the listener
        """

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_sale(self, record: SaleRecord) -> None:
        """Append a record. No validation is applied to quantity, price or name."""

        with self._lock:
            self._commit(self._sales + [record])

    def delete_sale(self, sale_id: UUID) -> None:
        """Remove the record with `sale_id`. Absent ids are not an error."""

        with self._lock:
            self._commit([sale for sale in self._sales if sale.sale_id != sale_id])

    def update_sale(self, record: SaleRecord) -> bool:
        """
        Replace the record whose sale_id matches `record.sale_id`.

        Returns:
            True if a record was replaced. False if no record matched; in that
            case nothing is changed, recomputed or written.
        """

        with self._lock:
            for index, sale in enumerate(self._sales):
                if sale.sale_id == record.sale_id:
                    updated = list(self._sales)
                    updated[index] = record
                    self._commit(updated)
                    return True

        logger.debug("update_sale ignored: no sale with id %s", record.sale_id)
        return False

    def delete_customer(self, name: str) -> int:
        """
        Remove every record whose buyer_name equals `name` (case-sensitive).

        Returns:
            Number of records removed
        """

        with self._lock:
            kept = [sale for sale in self._sales if sale.buyer_name != name]
            removed = len(self._sales) - len(kept)
            self._commit(kept)

        logger.info("Deleted customer %r (%d sales)", name, removed)
        return removed

    def clear_all_data(self) -> None:
        """Empty both collections and remove their persisted blobs."""

        with self._lock:
            remove_all(self._store)
            self._sales = []
            self._buyers = []
            self._version += 1
            self._notify()

        logger.info("Cleared all ledger data")

    def import_snapshot(self, blob: bytes) -> int:
        """
        Replace the whole record set with the records encoded in `blob`.

        Returns:
            Number of records imported

        Raises:
            DecodeError: If `blob` is not a valid export. The ledger is left
                exactly as it was.
        """

        try:
            records = decode_exchange_sales(blob)
        except DecodeError as exc:
            logger.warning("Error importing data: %s", exc)
            raise

        with self._lock:
            self._commit(records)

        logger.info("Imported %d sales", len(records), extra={"imported_count": len(records)})
        return len(records)

    def export_snapshot(self) -> bytes:
        """
        Encode the full ordered record set in the exchange format.

        Raises:
            EncodeError: If the records cannot be serialized
        """

        with self._lock:
            sales = list(self._sales)

        try:
            return encode_exchange_sales(sales)
        except EncodeError as exc:
            logger.error("Error exporting data: %s", exc)
            raise

    def recompute_aggregates(self) -> List[BuyerAggregate]:
        """Rebuild buyer aggregates from the current records."""

        with self._lock:
            self._buyers = aggregate_buyers(self._sales)
            return list(self._buyers)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, sales: List[SaleRecord]) -> None:
        self._sales = sales
        self.recompute_aggregates()
        self._version += 1
        self._persist()
        self._notify()

    def _persist(self) -> None:
        """
        Write both collections.

        An encode failure skips the write and is logged. The in-memory state
        stays authoritative; the stored copy catches up on the next save.
        """

        try:
            save_sales(self._store, self._sales)
            save_buyers(self._store, self._buyers)
        except EncodeError:
            logger.exception(
                "Error saving data; persisted copy is stale",
                extra={"version": self._version},
            )

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def _load(self) -> None:
        sales_readable = True
        try:
            self._sales = load_sales(self._store) or []
        except DecodeError as exc:
            logger.error("Error loading sales data: %s", exc)
            self._sales = []
            sales_readable = False

        try:
            cached = load_buyers(self._store) or []
        except DecodeError as exc:
            logger.error("Error loading buyers data: %s", exc)
            cached = []

        rebuilt = aggregate_buyers(self._sales)
        if self._sales and not cached:
            logger.info("Buyer cache missing; rebuilding from %d sales", len(self._sales))
        elif _totals_by_name(cached) != _totals_by_name(rebuilt):
            logger.warning("Buyer cache does not match sales; rebuilding")
        else:
            self._buyers = cached
            return

        self._buyers = rebuilt
        # An unreadable sales blob is left in place until the next mutation.
        if sales_readable:
            self._persist()


__all__ = ["Ledger", "LedgerSnapshot", "Listener"]
