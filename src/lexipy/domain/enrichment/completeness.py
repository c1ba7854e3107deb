"""Completeness and missing-field detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from lexipy.domain.model import WordClass

from .records import read_examples
from .text import is_blank

if TYPE_CHECKING:
    from lexipy.domain.model import Entry, EntryPatch


def _value(entry: Entry, patch: EntryPatch | None, name: str) -> object:
    if patch is not None and name in patch:
        return patch[name]
    return getattr(entry, name)


def has_example_pair(entry: Entry, patch: EntryPatch | None = None) -> bool:
    if not is_blank(_value(entry, patch, "example_de")) and not is_blank(
        _value(entry, patch, "example_en")
    ):
        return True
    records = read_examples(_value(entry, patch, "examples")).records
    return any(record.get("exampleDe") and record.get("exampleEn") for record in records)


def required_morphology(word_class: WordClass) -> tuple[str, ...]:
    match word_class:
        case WordClass.VERB:
            return ("praeteritum", "partizip_ii", "perfekt")
        case WordClass.NOUN:
            return ("gender", "plural")
        case WordClass.ADJECTIVE:
            return ("comparative", "superlative")
        case WordClass.PREPOSITION | WordClass.OTHER:
            return ()
        case _:
            assert_never(word_class)


def detect_missing_fields(entry: Entry, patch: EntryPatch | None = None) -> list[str]:
    """Fields still missing on ``entry`` once ``patch`` is applied."""

    missing: list[str] = []
    if is_blank(_value(entry, patch, "english")):
        missing.append("english")
    if not has_example_pair(entry, patch):
        missing.append("example")
    missing.extend(
        name
        for name in required_morphology(entry.word_class)
        if is_blank(_value(entry, patch, name))
    )
    return missing


def compute_completeness(entry: Entry, patch: EntryPatch | None = None) -> bool:
    return not detect_missing_fields(entry, patch)
