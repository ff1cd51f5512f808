"""
Supabase-backed blob store (persistence).

Stores each ledger blob as one row of a key/value table:

    key            text primary key
    value          text      -- base64 of the blob
    updated_at_utc timestamptz

Like the local stores, this module does not interpret the blobs.
"""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Any, Optional

# Default table name for ledger blobs.
# Keep this aligned with your database schema.
DEFAULT_TABLE: str = "ledger_blobs"


def _check(response: Any, action: str) -> Any:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return response


class SupabaseStore:
    """PersistenceStore implementation over a Supabase table."""

    def __init__(self, client: Any, table: str = DEFAULT_TABLE) -> None:
        self._client = client
        self.table = table

    def get(self, key: str) -> Optional[bytes]:
        response = _check(
            self._client.table(self.table).select("value").eq("key", key).limit(1).execute(),
            f"read blob {key!r}",
        )
        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return base64.b64decode(rows[0]["value"])

    def set(self, key: str, value: bytes) -> None:
        payload: dict[str, Any] = {
            "key": key,
            "value": base64.b64encode(value).decode("ascii"),
            "updated_at_utc": datetime.now(timezone.utc).isoformat(),
        }
        _check(
            self._client.table(self.table).upsert(payload).execute(),
            f"write blob {key!r}",
        )

    def remove(self, key: str) -> None:
        _check(
            self._client.table(self.table).delete().eq("key", key).execute(),
            f"remove blob {key!r}",
        )


__all__ = ["SupabaseStore", "DEFAULT_TABLE"]
