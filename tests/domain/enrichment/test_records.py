from __future__ import annotations

import pytest

from lexipy.domain.enrichment.completeness import (
    compute_completeness,
    detect_missing_fields,
    has_example_pair,
)
from lexipy.domain.enrichment.records import (
    parse_translation_record,
    read_examples,
    read_pos_attributes,
    read_translations,
)
from lexipy.domain.errors import NormalizationError
from tests.helpers.enrichment import make_entry


def test_read_translations_separates_unparsable_items() -> None:
    stored = read_translations(
        [
            {"value": " to turn ", "source": "mymemory.translated.net", "confidence": 90},
            "not an object",
            {"value": "to turn", "source": "MyMemory.translated.net"},
            {"source": "kaikki.org"},
        ]
    )

    assert stored.records == [
        {"value": "to turn", "source": "mymemory.translated.net", "confidence": 90.0}
    ]
    assert stored.rejected == ["not an object", {"source": "kaikki.org"}]
    assert stored.duplicates == 1


def test_read_translations_keeps_non_list_value_as_rejected() -> None:
    assert read_translations({"value": "to turn"}) == ([], [{"value": "to turn"}], 0)
    assert read_translations(None) == ([], [], 0)


def test_non_numeric_confidence_is_left_out() -> None:
    record = parse_translation_record({"value": "to turn", "confidence": "high"})

    assert record == {"value": "to turn"}


def test_translation_without_value_is_rejected() -> None:
    with pytest.raises(NormalizationError):
        parse_translation_record({"source": "manual"})


def test_read_examples_keeps_half_pairs() -> None:
    stored = read_examples(
        [{"exampleDe": "Biege ab.", "exampleEn": None}, {"exampleDe": " ", "exampleEn": ""}]
    )

    assert stored.records == [{"exampleDe": "Biege ab.", "exampleEn": None, "source": None}]
    assert stored.rejected == [{"exampleDe": " ", "exampleEn": ""}]


def test_read_pos_attributes_normalizes_lists() -> None:
    attributes = read_pos_attributes(
        {"pos": " prep ", "preposition": {"cases": "Dativ", "notes": []}, "tags": ["a", "A"]}
    )

    assert attributes == {"pos": "prep", "preposition": {"cases": ["Dativ"]}, "tags": ["a"]}
    assert read_pos_attributes(["prep"]) == {}


def test_verb_missing_fields() -> None:
    entry = make_entry(english="to turn off", praeteritum="bog ab")

    assert detect_missing_fields(entry) == ["example", "partizip_ii", "perfekt"]
    assert detect_missing_fields(entry, {"partizip_ii": "abgebogen"}) == ["example", "perfekt"]


def test_example_pair_can_come_from_examples_list() -> None:
    entry = make_entry(
        lemma="Haus",
        pos="N",
        english="house",
        gender="das",
        plural="Häuser",
        examples=[{"exampleDe": "Das Haus ist alt.", "exampleEn": "The house is old."}],
    )

    assert has_example_pair(entry)
    assert compute_completeness(entry)


def test_other_parts_of_speech_need_only_translation_and_example() -> None:
    entry = make_entry(
        lemma="schon", pos="Adv", english="already", example_de="Schon da.", example_en="Here."
    )

    assert detect_missing_fields(entry) == []


def test_removing_plural_makes_noun_incomplete() -> None:
    entry = make_entry(
        lemma="Apfel",
        pos="N",
        english="apple",
        gender="der",
        plural="Äpfel",
        example_de="Der Apfel ist rot.",
        example_en="The apple is red.",
    )

    assert compute_completeness(entry)
    assert not compute_completeness(entry, {"plural": None})
    assert detect_missing_fields(entry, {"plural": None}) == ["plural"]
