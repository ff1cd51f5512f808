"""
Runtime configuration.

Settings come from the process environment, optionally seeded from a `.env`
file in the project directory. Variables already present in the environment
win over the file.

    EGG_LEDGER_BACKEND         file (default) | memory | supabase
    EGG_LEDGER_DATA_DIR        data directory for the file backend
    EGG_LEDGER_SUPABASE_TABLE  key/value table for the supabase backend
    EGG_LEDGER_TIMEZONE        IANA time zone used for calendar bucketing
    EGG_LEDGER_WEEK_START      weekday that starts a week (default: sunday)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from domain.time import SalesCalendar, parse_weekday
from repositories.store import FileStore, InMemoryStore, PersistenceStore
from repositories.supabase_store import DEFAULT_TABLE

# Look for .env in the project directory
ENV_PATH = Path(__file__).parent.parent / ".env"

BACKENDS = ("file", "memory", "supabase")
DEFAULT_DATA_DIR = Path("~/.egg-sales-ledger")


def load_environment() -> None:
    """Load `.env` into the process environment (existing variables are kept)."""

    load_dotenv(dotenv_path=ENV_PATH)


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    backend: str = "file"
    data_dir: Path = DEFAULT_DATA_DIR
    supabase_table: str = DEFAULT_TABLE
    timezone_name: str = "UTC"
    week_start: int = 6  # Python numbering, Sunday

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "LedgerSettings":
        """
        Build settings from an environment mapping.

        When `environ` is omitted, `.env` is loaded and os.environ is used.

        Raises:
            RuntimeError: If a variable holds an unsupported value
        """

        if environ is None:
            load_environment()
            environ = os.environ

        backend = environ.get("EGG_LEDGER_BACKEND", "file").strip().lower() or "file"
        if backend not in BACKENDS:
            raise RuntimeError(
                f"Invalid EGG_LEDGER_BACKEND: {backend!r}. "
                f"Expected one of: {', '.join(BACKENDS)}."
            )

        week_start_raw = environ.get("EGG_LEDGER_WEEK_START", "sunday")
        try:
            week_start = parse_weekday(week_start_raw)
        except ValueError as exc:
            raise RuntimeError(f"Invalid EGG_LEDGER_WEEK_START: {week_start_raw!r}") from exc

        settings = LedgerSettings(
            backend=backend,
            data_dir=Path(environ.get("EGG_LEDGER_DATA_DIR") or DEFAULT_DATA_DIR),
            supabase_table=environ.get("EGG_LEDGER_SUPABASE_TABLE") or DEFAULT_TABLE,
            timezone_name=environ.get("EGG_LEDGER_TIMEZONE") or "UTC",
            week_start=week_start,
        )
        # Fail on a bad zone name at startup rather than on the first report.
        settings.calendar()
        return settings

    def calendar(self) -> SalesCalendar:
        if self.timezone_name.upper() == "UTC":
            return SalesCalendar(tz=timezone.utc, first_weekday=self.week_start)
        try:
            tz = ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RuntimeError(f"Invalid EGG_LEDGER_TIMEZONE: {self.timezone_name!r}") from exc
        return SalesCalendar(tz=tz, first_weekday=self.week_start)


def create_store(settings: LedgerSettings) -> PersistenceStore:
    """Build the persistence store selected by `settings.backend`."""

    if settings.backend == "memory":
        return InMemoryStore()

    if settings.backend == "supabase":
        from repositories.client import get_supabase_client
        from repositories.supabase_store import SupabaseStore

        return SupabaseStore(get_supabase_client(), table=settings.supabase_table)

    return FileStore(settings.data_dir)


__all__ = ["LedgerSettings", "create_store", "load_environment"]
