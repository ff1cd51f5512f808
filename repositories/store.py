"""
Key/value blob stores (persistence).

The ledger persists opaque byte blobs under string keys. This module defines
the store protocol and the two local implementations:

- InMemoryStore: process-local dict, used by tests and the `memory` backend.
- FileStore: one file per key inside a data directory.

Stores do not interpret the bytes they hold.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol


class PersistenceStore(Protocol):
    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStore:
    """Dict-backed store. Values are copied on the way in and out."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        value = self._data.get(key)
        return bytes(value) if value is not None else None

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileStore:
    """
    Directory-backed store: each key is a file named after the key.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a reader never sees a half-written blob.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser()

    def _path_for(self, key: str) -> Path:
        if not key or key in {".", ".."} or "/" in key or "\\" in key:
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / key

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


__all__ = ["PersistenceStore", "InMemoryStore", "FileStore"]
