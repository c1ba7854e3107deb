"""Text normalization and dedup keys for collected candidates."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_WHITESPACE_RE = re.compile(r"\s+")
_TARGET_LANGUAGE_CODES = frozenset({"en", "eng", "english"})


def normalize_text(value: object) -> str | None:
    """Collapse whitespace, trim and NFC-normalize; blank values become ``None``."""

    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    collapsed = _WHITESPACE_RE.sub(" ", value).strip()
    if not collapsed:
        return None
    return unicodedata.normalize("NFC", collapsed)


def is_blank(value: object) -> bool:
    return normalize_text(value) is None


def make_dedup_key(*parts: object) -> str:
    return "::".join((normalize_text(part) or "").lower() for part in parts)


def normalize_string_list(values: Iterable[object]) -> list[str]:
    """Normalize values, dropping blanks and case-insensitive duplicates (first spelling wins)."""

    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        normalized = normalize_text(value)
        if normalized is None:
            continue
        key = normalized.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(normalized)
    return result


def merge_string_lists(*lists: Iterable[object]) -> list[str]:
    return normalize_string_list(value for values in lists for value in values)


def sort_strings(values: Iterable[object]) -> list[str]:
    return sorted(normalize_string_list(values), key=lambda item: (item.lower(), item))


def is_target_language(language: str | None) -> bool:
    """Whether ``language`` classifies as English (unset counts as English)."""

    normalized = normalize_text(language)
    if normalized is None:
        return True
    code = normalized.lower().replace("_", "-").replace(" ", "-")
    if code in _TARGET_LANGUAGE_CODES:
        return True
    return code.startswith(("en-", "english"))


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))
