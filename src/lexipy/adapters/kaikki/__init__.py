"""Kaikki (wiktextract) dictionary adapter."""

from __future__ import annotations

from .client import KAIKKI_BASE_URL, KaikkiAPIError, KaikkiProvider, kaikki_url, parse_entries
from .translator import KAIKKI_SOURCE, lookup_from_entries, select_entries

__all__ = [
    "KAIKKI_BASE_URL",
    "KAIKKI_SOURCE",
    "KaikkiAPIError",
    "KaikkiProvider",
    "kaikki_url",
    "lookup_from_entries",
    "parse_entries",
    "select_entries",
]
