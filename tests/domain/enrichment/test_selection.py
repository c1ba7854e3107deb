from __future__ import annotations

import pytest

from lexipy.domain.enrichment.selection import (
    AUX_BOTH,
    derive_perfekt,
    normalize_auxiliary,
    pick_adjective_degree,
    pick_example,
    pick_gender,
    pick_plural,
    pick_primary_translation,
    pick_verb_suggestion,
    resolve_auxiliary,
)
from lexipy.domain.model import (
    AdjectiveFormSuggestion,
    ExampleCandidate,
    FormEntry,
    NounFormSuggestion,
    SuggestionBundle,
    TranslationCandidate,
    VerbFormSuggestion,
)

SOURCE_ORDER = ("kaikki.org", "mymemory.translated.net", "tatoeba.org", "openai:gpt-4o-mini")


def test_primary_translation_prefers_english_from_highest_ranked_source() -> None:
    bundle = SuggestionBundle(
        source_order=SOURCE_ORDER,
        translations=[
            TranslationCandidate(value="to turn", source="mymemory.translated.net", language="en"),
            TranslationCandidate(value="abbiegen", source="kaikki.org", language="de"),
            TranslationCandidate(value="to turn off", source="kaikki.org", language="en"),
        ],
    )

    picked = pick_primary_translation(bundle)

    assert picked is not None
    assert picked.value == "to turn off"


def test_primary_translation_falls_back_to_any_language() -> None:
    bundle = SuggestionBundle(
        source_order=SOURCE_ORDER,
        translations=[TranslationCandidate(value="tourner", source="kaikki.org", language="fr")],
    )

    picked = pick_primary_translation(bundle)

    assert picked is not None
    assert picked.value == "tourner"


def test_primary_translation_none_without_candidates() -> None:
    assert pick_primary_translation(SuggestionBundle()) is None


def test_pick_example_prefers_rank_then_full_pairs() -> None:
    bundle = SuggestionBundle(
        source_order=SOURCE_ORDER,
        examples=[
            ExampleCandidate(
                source="tatoeba.org", example_de="Er biegt ab.", example_en="He turns."
            ),
            ExampleCandidate(source="kaikki.org", example_de="Biege links ab."),
            ExampleCandidate(
                source="kaikki.org", example_de="Wir biegen ab.", example_en="We turn off."
            ),
        ],
    )

    picked = pick_example(bundle)

    assert picked is not None
    assert picked.example_de == "Wir biegen ab."
    assert picked.has_pair


def test_pick_example_returns_half_pair_when_nothing_better() -> None:
    bundle = SuggestionBundle(
        source_order=SOURCE_ORDER,
        examples=[ExampleCandidate(source="kaikki.org", example_de="Biege links ab.")],
    )

    picked = pick_example(bundle)

    assert picked is not None
    assert not picked.has_pair


def test_pick_verb_suggestion_takes_first_with_forms() -> None:
    empty = VerbFormSuggestion(source="kaikki.org")
    first = VerbFormSuggestion(source="kaikki.org", praeteritum="bog ab")
    second = VerbFormSuggestion(source="openai:gpt-4o-mini", praeteritum="biegte ab")
    bundle = SuggestionBundle(pos_suggestions=[empty, first, second])

    assert pick_verb_suggestion(bundle) is first


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("haben", "haben"),
        (" Sein ", "sein"),
        ("haben/sein", AUX_BOTH),
        ("sein / haben", AUX_BOTH),
        ("werden", None),
        (None, None),
    ],
)
def test_normalize_auxiliary(value: str | None, expected: str | None) -> None:
    assert normalize_auxiliary(value) == expected


def test_resolve_auxiliary_combines_both_auxiliaries() -> None:
    suggestion = VerbFormSuggestion(source="kaikki.org", auxiliaries=("haben", "sein"))

    assert resolve_auxiliary(suggestion) == AUX_BOTH


def test_resolve_auxiliary_falls_back_to_aux_field() -> None:
    suggestion = VerbFormSuggestion(source="kaikki.org", aux="sein")

    assert resolve_auxiliary(suggestion) == "sein"


@pytest.mark.parametrize(
    ("aux", "expected"),
    [
        ("haben", "hat gemacht"),
        ("sein", "ist gemacht"),
        (AUX_BOTH, "hat gemacht / ist gemacht"),
        (None, None),
    ],
)
def test_derive_perfekt(aux: str | None, expected: str | None) -> None:
    assert derive_perfekt(aux, "gemacht") == expected


def test_derive_perfekt_requires_participle() -> None:
    assert derive_perfekt("haben", "  ") is None


def test_pick_gender_maps_codes_and_prefers_articles_in_order() -> None:
    suggestions = [
        NounFormSuggestion(source="kaikki.org", genders=("n",)),
        NounFormSuggestion(source="kaikki.org", genders=("m",)),
    ]

    assert pick_gender(suggestions) == "der"


def test_pick_gender_reads_form_tags() -> None:
    suggestions = [
        NounFormSuggestion(
            source="kaikki.org", forms=(FormEntry("Häuser", ("plural", "neuter")),)
        )
    ]

    assert pick_gender(suggestions) == "das"


def test_pick_plural_prefers_nominative_plural_form() -> None:
    suggestions = [
        NounFormSuggestion(
            source="kaikki.org",
            plurals=("Hause",),
            forms=(
                FormEntry("Häusern", ("dative", "plural")),
                FormEntry("Häuser", ("nominative", "plural")),
            ),
        )
    ]

    assert pick_plural(suggestions) == "Häuser"


def test_pick_plural_uses_explicit_plural_without_forms() -> None:
    suggestions = [NounFormSuggestion(source="kaikki.org", plurals=("Bücher",))]

    assert pick_plural(suggestions) == "Bücher"


def test_pick_adjective_degree_is_lexicographic() -> None:
    suggestions = [
        AdjectiveFormSuggestion(
            source="kaikki.org",
            comparatives=("schneller",),
            forms=(FormEntry("am schnellsten", ("superlative",)),),
            superlatives=("schnellste",),
        )
    ]

    assert pick_adjective_degree(suggestions, "comparative") == "schneller"
    assert pick_adjective_degree(suggestions, "superlative") == "am schnellsten"
    assert pick_adjective_degree([], "comparative") is None
