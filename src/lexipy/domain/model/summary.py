"""Per-entry outcome records written into run reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .suggestions import group_suggestions

if TYPE_CHECKING:
    from .entry import PosAttributes
    from .snapshot import ProviderDiagnostic
    from .suggestions import ExampleCandidate, PosSuggestion, TranslationCandidate


@dataclass(slots=True, frozen=True, kw_only=True)
class FieldUpdate:
    field: str
    previous: object
    next: object
    source: str | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "field": self.field,
            "previous": _jsonable(self.previous),
            "next": _jsonable(self.next),
            "source": self.source,
        }


def _jsonable(value: object) -> object:
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    return value


@dataclass(slots=True, kw_only=True)
class EntrySummary:
    id: int | None
    lemma: str
    pos: str
    missing_fields: list[str] = field(default_factory=list)
    translation: TranslationCandidate | None = None
    translations: list[TranslationCandidate] = field(default_factory=list)
    english_hints: list[str] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    example: ExampleCandidate | None = None
    examples: list[ExampleCandidate] = field(default_factory=list)
    pos_suggestions: list[PosSuggestion] = field(default_factory=list)
    pos_attributes: PosAttributes | None = None
    updates: list[FieldUpdate] = field(default_factory=list)
    applied: bool = False
    sources: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    ai_used: bool = False
    provider_diagnostics: list[ProviderDiagnostic] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        grouped = group_suggestions(self.pos_suggestions)
        return {
            "id": self.id,
            "lemma": self.lemma,
            "pos": self.pos,
            "missingFields": list(self.missing_fields),
            "translation": dict(self.translation.to_record()) if self.translation else None,
            "translations": [dict(candidate.to_record()) for candidate in self.translations],
            "englishHints": list(self.english_hints),
            "synonyms": list(self.synonyms),
            "example": dict(self.example.to_record()) if self.example else None,
            "examples": [dict(candidate.to_record()) for candidate in self.examples],
            **grouped,
            "posAttributes": self.pos_attributes,
            "updates": [update.to_payload() for update in self.updates],
            "applied": self.applied,
            "sources": list(self.sources),
            "errors": list(self.errors),
            "aiUsed": self.ai_used,
            "providerDiagnostics": [diag.to_payload() for diag in self.provider_diagnostics],
        }


@dataclass(slots=True, kw_only=True)
class PipelineTotals:
    scanned: int = 0
    proposed_updates: int = 0
    applied: int = 0

    def to_payload(self) -> dict[str, int]:
        return {
            "scanned": self.scanned,
            "proposedUpdates": self.proposed_updates,
            "applied": self.applied,
        }
