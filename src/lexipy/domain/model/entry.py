"""The stored lexical entry and the JSON shapes it carries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NotRequired, TypedDict

from .enums import WordClass, word_class_for


def _utcnow() -> datetime:
    return datetime.now(UTC)


# JSON shapes use the camelCase vocabulary shared with snapshot files and reports.


class TranslationRecord(TypedDict):
    value: str
    source: NotRequired[str | None]
    language: NotRequired[str | None]
    confidence: NotRequired[float | None]


class ExampleRecord(TypedDict, total=False):
    exampleDe: str | None
    exampleEn: str | None
    source: str | None


class PrepositionAttributes(TypedDict, total=False):
    cases: list[str]
    notes: list[str]


class PosAttributes(TypedDict, total=False):
    pos: str
    preposition: PrepositionAttributes
    tags: list[str]
    notes: list[str]


type EntryPatch = dict[str, object]
"""Field name -> new value, holding only fields whose value changes."""


@dataclass(eq=False, kw_only=True)
class Entry:
    """Canonical record for one lemma/part-of-speech pair."""

    lemma: str
    pos: str
    id: int | None = None
    canonical: bool = False
    english: str | None = None
    example_de: str | None = None
    example_en: str | None = None
    gender: str | None = None
    plural: str | None = None
    praeteritum: str | None = None
    partizip_ii: str | None = None
    perfekt: str | None = None
    aux: str | None = None
    comparative: str | None = None
    superlative: str | None = None
    sources_csv: str | None = None
    translations: list[TranslationRecord] | None = None
    examples: list[ExampleRecord] | None = None
    pos_attributes: PosAttributes | None = None
    complete: bool = False
    enrichment_applied_at: datetime | None = None
    enrichment_method: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def word_class(self) -> WordClass:
        return word_class_for(self.pos)

    def apply(self, patch: EntryPatch) -> None:
        for name, value in patch.items():
            if name not in PATCHABLE_FIELDS:
                raise KeyError(f"Entry field {name!r} cannot be patched")
            setattr(self, name, value)

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "lemma": self.lemma,
            "pos": self.pos,
            "canonical": self.canonical,
            "english": self.english,
            "exampleDe": self.example_de,
            "exampleEn": self.example_en,
            "gender": self.gender,
            "plural": self.plural,
            "praeteritum": self.praeteritum,
            "partizipIi": self.partizip_ii,
            "perfekt": self.perfekt,
            "aux": self.aux,
            "comparative": self.comparative,
            "superlative": self.superlative,
            "sourcesCsv": self.sources_csv,
            "translations": self.translations,
            "examples": self.examples,
            "posAttributes": self.pos_attributes,
            "complete": self.complete,
            "enrichmentAppliedAt": _isoformat(self.enrichment_applied_at),
            "enrichmentMethod": self.enrichment_method,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


PATCHABLE_FIELDS = frozenset(
    {
        "english",
        "example_de",
        "example_en",
        "gender",
        "plural",
        "praeteritum",
        "partizip_ii",
        "perfekt",
        "aux",
        "comparative",
        "superlative",
        "sources_csv",
        "translations",
        "examples",
        "pos_attributes",
        "complete",
        "enrichment_applied_at",
        "enrichment_method",
        "updated_at",
    }
)
