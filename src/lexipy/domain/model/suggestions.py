"""Candidate facts collected from providers for a single entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, assert_never

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .entry import ExampleRecord, TranslationRecord


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _strings(value: object) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _forms(value: object) -> tuple[FormEntry, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(FormEntry.from_payload(item) for item in value if isinstance(item, dict))


@dataclass(slots=True, frozen=True, kw_only=True)
class TranslationCandidate:
    value: str
    source: str
    language: str | None = None
    confidence: float | None = None

    def to_record(self) -> TranslationRecord:
        record: TranslationRecord = {"value": self.value, "source": self.source}
        if self.language is not None:
            record["language"] = self.language
        if self.confidence is not None:
            record["confidence"] = self.confidence
        return record


@dataclass(slots=True, frozen=True, kw_only=True)
class ExampleCandidate:
    source: str
    example_de: str | None = None
    example_en: str | None = None

    @property
    def has_pair(self) -> bool:
        return bool(self.example_de) and bool(self.example_en)

    def to_record(self) -> ExampleRecord:
        return {"exampleDe": self.example_de, "exampleEn": self.example_en, "source": self.source}


@dataclass(slots=True, frozen=True)
class FormEntry:
    form: str
    tags: tuple[str, ...] = ()

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_payload(self) -> dict[str, object]:
        return {"form": self.form, "tags": list(self.tags)}

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> FormEntry:
        return cls(form=str(payload.get("form") or ""), tags=_strings(payload.get("tags")))


@dataclass(slots=True, frozen=True, kw_only=True)
class VerbFormSuggestion:
    source: str
    praeteritum: str | None = None
    partizip_ii: str | None = None
    perfekt: str | None = None
    aux: str | None = None
    auxiliaries: tuple[str, ...] = ()
    perfekt_options: tuple[str, ...] = ()
    kind: Literal["verb"] = "verb"

    @property
    def has_forms(self) -> bool:
        return bool(self.praeteritum or self.partizip_ii or self.perfekt or self.auxiliaries)

    @property
    def ambiguous_perfekt(self) -> bool:
        return len(self.perfekt_options) > 1

    def to_payload(self) -> dict[str, object]:
        return {
            "source": self.source,
            "praeteritum": self.praeteritum,
            "partizipIi": self.partizip_ii,
            "perfekt": self.perfekt,
            "aux": self.aux,
            "auxiliaries": list(self.auxiliaries),
            "perfektOptions": list(self.perfekt_options),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> VerbFormSuggestion:
        return cls(
            source=_text(payload.get("source")) or "",
            praeteritum=_text(payload.get("praeteritum")),
            partizip_ii=_text(payload.get("partizipIi")),
            perfekt=_text(payload.get("perfekt")),
            aux=_text(payload.get("aux")),
            auxiliaries=_strings(payload.get("auxiliaries")),
            perfekt_options=_strings(payload.get("perfektOptions")),
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class NounFormSuggestion:
    source: str
    genders: tuple[str, ...] = ()
    plurals: tuple[str, ...] = ()
    forms: tuple[FormEntry, ...] = ()
    kind: Literal["noun"] = "noun"

    def to_payload(self) -> dict[str, object]:
        return {
            "source": self.source,
            "genders": list(self.genders),
            "plurals": list(self.plurals),
            "forms": [form.to_payload() for form in self.forms],
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> NounFormSuggestion:
        return cls(
            source=_text(payload.get("source")) or "",
            genders=_strings(payload.get("genders")),
            plurals=_strings(payload.get("plurals")),
            forms=_forms(payload.get("forms")),
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class AdjectiveFormSuggestion:
    source: str
    comparatives: tuple[str, ...] = ()
    superlatives: tuple[str, ...] = ()
    forms: tuple[FormEntry, ...] = ()
    kind: Literal["adjective"] = "adjective"

    def to_payload(self) -> dict[str, object]:
        return {
            "source": self.source,
            "comparatives": list(self.comparatives),
            "superlatives": list(self.superlatives),
            "forms": [form.to_payload() for form in self.forms],
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> AdjectiveFormSuggestion:
        return cls(
            source=_text(payload.get("source")) or "",
            comparatives=_strings(payload.get("comparatives")),
            superlatives=_strings(payload.get("superlatives")),
            forms=_forms(payload.get("forms")),
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class PrepositionSuggestion:
    source: str
    cases: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    kind: Literal["preposition"] = "preposition"

    def to_payload(self) -> dict[str, object]:
        return {"source": self.source, "cases": list(self.cases), "notes": list(self.notes)}

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> PrepositionSuggestion:
        return cls(
            source=_text(payload.get("source")) or "",
            cases=_strings(payload.get("cases")),
            notes=_strings(payload.get("notes")),
        )


type PosSuggestion = (
    VerbFormSuggestion | NounFormSuggestion | AdjectiveFormSuggestion | PrepositionSuggestion
)

SUGGESTION_PAYLOAD_KEYS: dict[str, str] = {
    "verb": "verbForms",
    "noun": "nounForms",
    "adjective": "adjectiveForms",
    "preposition": "prepositionAttributes",
}


def suggestion_from_payload(kind: str, payload: Mapping[str, object]) -> PosSuggestion:
    """Rebuild a suggestion from its stored payload; ``kind`` is the discriminator."""

    match kind:
        case "verb":
            return VerbFormSuggestion.from_payload(payload)
        case "noun":
            return NounFormSuggestion.from_payload(payload)
        case "adjective":
            return AdjectiveFormSuggestion.from_payload(payload)
        case "preposition":
            return PrepositionSuggestion.from_payload(payload)
        case _:
            raise ValueError(f"Unknown suggestion kind: {kind!r}")


def group_suggestions(
    suggestions: list[PosSuggestion],
) -> dict[str, list[dict[str, object]]]:
    """Group suggestion payloads under their camelCase collection key."""

    grouped: dict[str, list[dict[str, object]]] = {
        key: [] for key in SUGGESTION_PAYLOAD_KEYS.values()
    }
    for suggestion in suggestions:
        grouped[SUGGESTION_PAYLOAD_KEYS[suggestion.kind]].append(suggestion.to_payload())
    return grouped


@dataclass(slots=True, kw_only=True)
class ProviderLookup:
    """Normalized candidate bundle returned by a provider adapter."""

    translations: list[TranslationCandidate] = field(default_factory=list)
    examples: list[ExampleCandidate] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    english_hints: list[str] = field(default_factory=list)
    pos_suggestions: list[PosSuggestion] = field(default_factory=list)
    pos_label: str | None = None
    pos_tags: list[str] = field(default_factory=list)
    pos_notes: list[str] = field(default_factory=list)
    raw_payload: object = None


@dataclass(slots=True, kw_only=True)
class SuggestionBundle:
    """Deduplicated union of every provider's candidates for one entry.

    Lists keep provider declaration order; ``source_order`` ranks candidate source tags.
    """

    translations: list[TranslationCandidate] = field(default_factory=list)
    examples: list[ExampleCandidate] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    english_hints: list[str] = field(default_factory=list)
    pos_suggestions: list[PosSuggestion] = field(default_factory=list)
    pos_label: str | None = None
    pos_tags: list[str] = field(default_factory=list)
    pos_notes: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    source_order: tuple[str, ...] = ()

    @property
    def verb_forms(self) -> list[VerbFormSuggestion]:
        return [s for s in self.pos_suggestions if isinstance(s, VerbFormSuggestion)]

    @property
    def noun_forms(self) -> list[NounFormSuggestion]:
        return [s for s in self.pos_suggestions if isinstance(s, NounFormSuggestion)]

    @property
    def adjective_forms(self) -> list[AdjectiveFormSuggestion]:
        return [s for s in self.pos_suggestions if isinstance(s, AdjectiveFormSuggestion)]

    @property
    def preposition_attributes(self) -> list[PrepositionSuggestion]:
        return [s for s in self.pos_suggestions if isinstance(s, PrepositionSuggestion)]

    def source_rank(self, source: str | None) -> int:
        if source is None:
            return len(self.source_order)
        try:
            return self.source_order.index(source)
        except ValueError:
            return len(self.source_order)


def describe_suggestion(suggestion: PosSuggestion) -> str:
    match suggestion:
        case VerbFormSuggestion():
            values = [suggestion.praeteritum, suggestion.partizip_ii, suggestion.perfekt]
        case NounFormSuggestion():
            values = [*suggestion.genders[:1], *suggestion.plurals[:1]]
        case AdjectiveFormSuggestion():
            values = [*suggestion.comparatives[:1], *suggestion.superlatives[:1]]
        case PrepositionSuggestion():
            values = list(suggestion.cases)
        case _:
            assert_never(suggestion)
    return ", ".join(value for value in values if value)
