from __future__ import annotations

import pytest

from lexipy.domain.model import (
    AdjectiveFormSuggestion,
    Entry,
    FormEntry,
    NounFormSuggestion,
    PrepositionSuggestion,
    VerbFormSuggestion,
    describe_suggestion,
    group_suggestions,
    provider_rank,
    suggestion_from_payload,
    word_class_for,
)
from lexipy.domain.model.enums import WordClass


def test_verb_payload_uses_camel_case_keys() -> None:
    suggestion = VerbFormSuggestion(
        source="kaikki.org",
        praeteritum="bog ab",
        partizip_ii="abgebogen",
        auxiliaries=("haben", "sein"),
        perfekt_options=("hat abgebogen", "ist abgebogen"),
    )

    payload = suggestion.to_payload()

    assert payload["partizipIi"] == "abgebogen"
    assert payload["perfektOptions"] == ["hat abgebogen", "ist abgebogen"]
    assert suggestion_from_payload("verb", payload) == suggestion
    assert suggestion.ambiguous_perfekt


def test_from_payload_ignores_malformed_values() -> None:
    suggestion = suggestion_from_payload(
        "noun",
        {
            "source": "kaikki.org",
            "genders": ["n", 3],
            "plurals": "Häuser",
            "forms": [{"form": "Häuser", "tags": ["plural"]}, "broken"],
        },
    )

    assert suggestion == NounFormSuggestion(
        source="kaikki.org", genders=("n",), forms=(FormEntry("Häuser", ("plural",)),)
    )


def test_from_payload_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="Unknown suggestion kind"):
        suggestion_from_payload("adverb", {})


def test_group_suggestions_lists_every_collection() -> None:
    grouped = group_suggestions(
        [
            AdjectiveFormSuggestion(source="kaikki.org", comparatives=("schneller",)),
            PrepositionSuggestion(source="kaikki.org", cases=("Dativ",)),
        ]
    )

    assert grouped["verbForms"] == []
    assert grouped["nounForms"] == []
    assert grouped["adjectiveForms"][0]["comparatives"] == ["schneller"]
    assert grouped["prepositionAttributes"][0]["cases"] == ["Dativ"]


def test_describe_suggestion() -> None:
    verb = VerbFormSuggestion(source="kaikki.org", praeteritum="bog ab", partizip_ii="abgebogen")

    assert describe_suggestion(verb) == "bog ab, abgebogen"


@pytest.mark.parametrize(
    ("pos", "expected"),
    [
        ("V", WordClass.VERB),
        ("N", WordClass.NOUN),
        ("Adj", WordClass.ADJECTIVE),
        ("Präp", WordClass.PREPOSITION),
        ("Adv", WordClass.OTHER),
        ("", WordClass.OTHER),
    ],
)
def test_word_class_for(pos: str, expected: WordClass) -> None:
    assert word_class_for(pos) is expected


def test_provider_rank_follows_declaration_order() -> None:
    assert provider_rank("wiktextract") < provider_rank("MyMemory") < provider_rank("openai")
    assert provider_rank("somewhere") == 5


def test_entry_rejects_unknown_patch_fields() -> None:
    entry = Entry(lemma="abbiegen", pos="V")

    with pytest.raises(KeyError):
        entry.apply({"lemma": "biegen"})


def test_entry_payload_is_camel_case() -> None:
    payload = Entry(lemma="abbiegen", pos="V", partizip_ii="abgebogen").to_payload()

    assert payload["partizipIi"] == "abgebogen"
    assert payload["enrichmentAppliedAt"] is None
    assert isinstance(payload["createdAt"], str)
