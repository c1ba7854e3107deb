"""Translate Kaikki dictionary entries into provider lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from lexipy.domain.model import (
    AdjectiveFormSuggestion,
    ExampleCandidate,
    FormEntry,
    NounFormSuggestion,
    PartOfSpeech,
    PosSuggestion,
    PrepositionSuggestion,
    ProviderLookup,
    TranslationCandidate,
    VerbFormSuggestion,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .schema import KaikkiEntry, KaikkiForm

KAIKKI_SOURCE: Final[str] = "kaikki.org"

_POS_MAP: Final[dict[str, frozenset[str]]] = {
    PartOfSpeech.VERB: frozenset({"verb"}),
    PartOfSpeech.NOUN: frozenset({"noun"}),
    PartOfSpeech.ADJECTIVE: frozenset({"adj"}),
    PartOfSpeech.ADVERB: frozenset({"adv"}),
    PartOfSpeech.PRONOUN: frozenset({"pron"}),
    PartOfSpeech.DETERMINER: frozenset({"det", "article"}),
    PartOfSpeech.PREPOSITION: frozenset({"prep"}),
    PartOfSpeech.CONJUNCTION: frozenset({"conj"}),
    PartOfSpeech.NUMERAL: frozenset({"num"}),
    PartOfSpeech.PARTICLE: frozenset({"particle"}),
    PartOfSpeech.INTERJECTION: frozenset({"intj"}),
}

_IGNORED_FORM_TAGS: Final[frozenset[str]] = frozenset(
    {"table-tags", "inflection-template", "class"}
)
_CASE_TAGS: Final[dict[str, str]] = {
    "with-accusative": "Akkusativ",
    "with-dative": "Dativ",
    "with-genitive": "Genitiv",
}
_AUXILIARIES: Final[frozenset[str]] = frozenset({"haben", "sein"})
_GENDER_CODES: Final[frozenset[str]] = frozenset({"m", "f", "n"})
_GENDER_TAGS: Final[frozenset[str]] = frozenset({"masculine", "feminine", "neuter"})


def _unique(values: Iterable[str | None]) -> list[str]:
    result: list[str] = []
    seen: set[str] = set()
    for value in values:
        text = (value or "").strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        result.append(text)
    return result


def select_entries(entries: Sequence[KaikkiEntry], pos: str | None) -> list[KaikkiEntry]:
    """German entries matching ``pos``; all German entries when none match."""

    german = [entry for entry in entries if entry.is_german]
    wanted = _POS_MAP.get(pos or "")
    if wanted:
        matching = [entry for entry in german if entry.pos in wanted]
        if matching:
            return matching
    return german


def _usable_forms(forms: Sequence[KaikkiForm]) -> list[KaikkiForm]:
    return [
        form
        for form in forms
        if form.form.strip() and not _IGNORED_FORM_TAGS.intersection(form.tags)
    ]


def verb_forms(entry: KaikkiEntry) -> VerbFormSuggestion | None:
    forms = _usable_forms(entry.forms)
    praeteritum = next(
        (
            form.form
            for form in forms
            if "past" in form.tags
            and "participle" not in form.tags
            and not any(tag.startswith("subjunctive") for tag in form.tags)
        ),
        None,
    )
    partizip_ii = next((form.form for form in forms if form.has_tags("participle", "past")), None)

    perfect = [form for form in forms if "perfect" in form.tags]
    third_person = [form for form in perfect if form.has_tags("third-person", "singular")]
    perfekt_options = tuple(_unique(form.form for form in third_person or perfect))

    auxiliaries = tuple(
        value
        for value in _unique(form.form.lower() for form in forms if "auxiliary" in form.tags)
        if value in _AUXILIARIES
    )

    suggestion = VerbFormSuggestion(
        source=KAIKKI_SOURCE,
        praeteritum=praeteritum,
        partizip_ii=partizip_ii,
        perfekt=perfekt_options[0] if len(perfekt_options) == 1 else None,
        aux=auxiliaries[0] if len(auxiliaries) == 1 else None,
        auxiliaries=auxiliaries,
        perfekt_options=perfekt_options,
    )
    return suggestion if suggestion.has_forms else None


def _form_entries(forms: Sequence[KaikkiForm]) -> tuple[FormEntry, ...]:
    return tuple(FormEntry(form=form.form, tags=tuple(form.tags)) for form in _usable_forms(forms))


def noun_forms(entry: KaikkiEntry) -> NounFormSuggestion | None:
    genders: list[str | None] = []
    for template in entry.head_templates:
        for key in ("g", "g2", "g3"):
            code = template.args.get(key, "").split("-")[0].strip().lower()
            if code in _GENDER_CODES:
                genders.append(code)
    genders.extend(tag for tag in entry.tags if tag in _GENDER_TAGS)
    for sense in entry.senses:
        genders.extend(tag for tag in sense.tags if tag in _GENDER_TAGS)

    forms = _form_entries(entry.forms)
    suggestion = NounFormSuggestion(
        source=KAIKKI_SOURCE,
        genders=tuple(_unique(genders)),
        plurals=tuple(_unique(form.form for form in forms if form.has_tag("plural"))),
        forms=forms,
    )
    if suggestion.genders or suggestion.plurals or suggestion.forms:
        return suggestion
    return None


def adjective_forms(entry: KaikkiEntry) -> AdjectiveFormSuggestion | None:
    forms = _form_entries(entry.forms)
    suggestion = AdjectiveFormSuggestion(
        source=KAIKKI_SOURCE,
        comparatives=tuple(_unique(form.form for form in forms if form.has_tag("comparative"))),
        superlatives=tuple(_unique(form.form for form in forms if form.has_tag("superlative"))),
        forms=forms,
    )
    if suggestion.comparatives or suggestion.superlatives:
        return suggestion
    return None


def preposition_attributes(entry: KaikkiEntry) -> PrepositionSuggestion | None:
    tags = [*entry.tags, *(tag for sense in entry.senses for tag in sense.tags)]
    cases = _unique(_CASE_TAGS[tag] for tag in tags if tag in _CASE_TAGS)
    notes = _unique(sense.qualifier for sense in entry.senses)
    if not cases and not notes:
        return None
    return PrepositionSuggestion(source=KAIKKI_SOURCE, cases=tuple(cases), notes=tuple(notes))


def pos_suggestion(entry: KaikkiEntry) -> PosSuggestion | None:
    match entry.pos:
        case "verb":
            return verb_forms(entry)
        case "noun":
            return noun_forms(entry)
        case "adj":
            return adjective_forms(entry)
        case "prep":
            return preposition_attributes(entry)
        case _:
            return None


def lookup_from_entries(
    entries: Sequence[KaikkiEntry], *, lemma: str, pos: str | None
) -> ProviderLookup | None:
    """Fold the matching dictionary entries into a single lookup."""

    selected = select_entries(entries, pos)
    if not selected:
        return None

    translations = _unique(
        translation.word
        for entry in selected
        for translation in [
            *entry.translations,
            *(item for sense in entry.senses for item in sense.translations),
        ]
        if translation.is_english
    )
    glosses = _unique(
        gloss for entry in selected for sense in entry.senses for gloss in sense.glosses
    )
    if not translations:
        translations = glosses

    lookup = ProviderLookup(
        translations=[
            TranslationCandidate(value=value, source=KAIKKI_SOURCE, language="en")
            for value in translations
        ],
        english_hints=glosses,
        synonyms=_unique(
            synonym.word
            for entry in selected
            for synonym in [*entry.synonyms, *(s for sense in entry.senses for s in sense.synonyms)]
        ),
        pos_label=next((entry.pos for entry in selected if entry.pos), None),
        pos_tags=_unique(tag for entry in selected for tag in entry.tags),
        raw_payload={
            "lemma": lemma,
            "entries": [entry.model_dump(mode="json") for entry in selected],
        },
    )

    for entry in selected:
        for sense in entry.senses:
            for example in sense.examples:
                if example.text and example.english_text:
                    lookup.examples.append(
                        ExampleCandidate(
                            source=KAIKKI_SOURCE,
                            example_de=example.text,
                            example_en=example.english_text,
                        )
                    )
        suggestion = pos_suggestion(entry)
        if suggestion is not None:
            lookup.pos_suggestions.append(suggestion)

    return lookup
