"""Lenient readers for the JSON arrays and attributes stored on an entry."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, NamedTuple

from lexipy.domain.errors import NormalizationError

from .text import make_dedup_key, normalize_string_list, normalize_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lexipy.domain.model import ExampleRecord, PosAttributes, TranslationRecord

log = logging.getLogger(__name__)


def parse_translation_record(raw: object) -> TranslationRecord:
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"Translation record must be an object, got {type(raw).__name__}")
    value = normalize_text(raw.get("value"))
    if value is None:
        raise NormalizationError("Translation record has no value")
    record: TranslationRecord = {"value": value}
    source = normalize_text(raw.get("source"))
    if source is not None:
        record["source"] = source
    language = normalize_text(raw.get("language"))
    if language is not None:
        record["language"] = language
    confidence = raw.get("confidence")
    if isinstance(confidence, int | float) and not isinstance(confidence, bool):
        record["confidence"] = float(confidence)
    elif confidence is not None:
        log.warning("Ignoring non-numeric confidence %r for translation %r", confidence, value)
    return record


def parse_example_record(raw: object) -> ExampleRecord:
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"Example record must be an object, got {type(raw).__name__}")
    example_de = normalize_text(raw.get("exampleDe"))
    example_en = normalize_text(raw.get("exampleEn"))
    if example_de is None and example_en is None:
        raise NormalizationError("Example record has neither sentence")
    return {
        "exampleDe": example_de,
        "exampleEn": example_en,
        "source": normalize_text(raw.get("source")),
    }


def translation_key(record: TranslationRecord) -> str:
    return make_dedup_key(record["value"], record.get("source"), record.get("language"))


def example_key(record: ExampleRecord) -> str:
    return make_dedup_key(record.get("exampleDe"), record.get("exampleEn"), record.get("source"))


class StoredRecords[T](NamedTuple):
    """Parsed view of a stored array.

    ``rejected`` keeps the raw items that could not be parsed so a rewrite can carry
    them forward unchanged; ``duplicates`` counts items collapsed onto an earlier key.
    """

    records: list[T]
    rejected: list[object]
    duplicates: int = 0


def _read_records[T](
    raw: object,
    parser: Callable[[object], T],
    key: Callable[[T], str],
    *,
    label: str,
) -> StoredRecords[T]:
    if raw is None:
        return StoredRecords([], [])
    if not isinstance(raw, list):
        log.warning("Keeping stored %s as is: expected a list, got %s", label, type(raw).__name__)
        return StoredRecords([], [raw])
    records: list[T] = []
    rejected: list[object] = []
    seen: set[str] = set()
    duplicates = 0
    for item in raw:
        try:
            record = parser(item)
        except NormalizationError as exc:
            log.warning("Keeping unparsable stored %s item as is: %s", label, exc)
            rejected.append(item)
            continue
        record_key = key(record)
        if record_key in seen:
            duplicates += 1
            continue
        seen.add(record_key)
        records.append(record)
    return StoredRecords(records, rejected, duplicates)


def read_translations(raw: object) -> StoredRecords[TranslationRecord]:
    return _read_records(raw, parse_translation_record, translation_key, label="translation")


def read_examples(raw: object) -> StoredRecords[ExampleRecord]:
    return _read_records(raw, parse_example_record, example_key, label="example")


def _confidence_key(record: TranslationRecord) -> float:
    confidence = record.get("confidence")
    return float("-inf") if confidence is None else float(confidence)


def canonical_translations(
    records: Iterable[TranslationRecord],
) -> list[tuple[str, str, str, float]]:
    return sorted(
        (
            record["value"],
            record.get("source") or "",
            record.get("language") or "",
            _confidence_key(record),
        )
        for record in records
    )


def canonical_examples(records: Iterable[ExampleRecord]) -> list[tuple[str, str, str]]:
    return sorted(
        (record.get("exampleDe") or "", record.get("exampleEn") or "", record.get("source") or "")
        for record in records
    )


def _string_list(raw: object) -> list[str]:
    if isinstance(raw, str):
        return normalize_string_list([raw])
    if isinstance(raw, list):
        return normalize_string_list(item for item in raw if isinstance(item, str))
    return []


def read_pos_attributes(raw: object) -> PosAttributes:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        log.warning("Ignoring stored part-of-speech attributes of type %s", type(raw).__name__)
        return {}
    attributes: PosAttributes = {}
    label = normalize_text(raw.get("pos"))
    if label is not None:
        attributes["pos"] = label
    preposition = raw.get("preposition")
    if isinstance(preposition, Mapping):
        cases = _string_list(preposition.get("cases"))
        notes = _string_list(preposition.get("notes"))
        if cases or notes:
            attributes["preposition"] = {}
            if cases:
                attributes["preposition"]["cases"] = cases
            if notes:
                attributes["preposition"]["notes"] = notes
    tags = _string_list(raw.get("tags"))
    if tags:
        attributes["tags"] = tags
    notes = _string_list(raw.get("notes"))
    if notes:
        attributes["notes"] = notes
    return attributes
