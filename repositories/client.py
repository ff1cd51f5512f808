"""
Supabase client initialization.

This module contains *only* the connection setup for the optional Supabase
store backend. The client is created on first use so that the local backends
never need Supabase credentials.

Environment variables required (supabase backend only):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only)
"""

from __future__ import annotations

import os
from functools import lru_cache

# The dependency is `supabase` (supabase-py).
from supabase import Client, create_client  # type: ignore[import-not-found]

from repositories.settings import load_environment


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create (once) the Supabase client from environment credentials."""

    load_environment()

    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(supabase_url, supabase_key)


__all__ = ["get_supabase_client"]
