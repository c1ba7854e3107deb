"""Provider snapshots and per-provider diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .enums import ProviderStatus
from .suggestions import group_suggestions

if TYPE_CHECKING:
    from .entry import Entry
    from .enums import SelectionMode, SnapshotTrigger
    from .suggestions import ExampleCandidate, PosSuggestion, TranslationCandidate


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class ProviderDiagnostic:
    id: str
    label: str
    status: ProviderStatus
    error: str | None = None
    payload: object = None
    snapshot_id: int | None = None
    previous_snapshot_id: int | None = None
    has_changes: bool | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "status": str(self.status),
            "error": self.error,
            "payload": self.payload,
            "snapshotId": self.snapshot_id,
            "previousSnapshotId": self.previous_snapshot_id,
            "hasChanges": self.has_changes,
        }


@dataclass(slots=True, kw_only=True)
class SnapshotDraft:
    """What one provider returned for one entry, before it is persisted."""

    provider_id: str
    provider_label: str
    status: ProviderStatus
    error: str | None = None
    translations: list[TranslationCandidate] = field(default_factory=list)
    examples: list[ExampleCandidate] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    english_hints: list[str] = field(default_factory=list)
    pos_suggestions: list[PosSuggestion] = field(default_factory=list)
    raw_payload: object = None


def _list_or_none[T](values: list[T]) -> list[T] | None:
    return values or None


@dataclass(eq=False, kw_only=True)
class ProviderSnapshot:
    """Append-only record of one provider lookup for one entry."""

    entry_id: int
    lemma: str
    pos: str
    provider_id: str
    provider_label: str
    status: str
    trigger: str
    mode: str
    error: str | None = None
    translations: list[dict[str, object]] | None = None
    examples: list[dict[str, object]] | None = None
    synonyms: list[str] | None = None
    english_hints: list[str] | None = None
    verb_forms: list[dict[str, object]] | None = None
    noun_forms: list[dict[str, object]] | None = None
    adjective_forms: list[dict[str, object]] | None = None
    preposition_attributes: list[dict[str, object]] | None = None
    raw_payload: object = None
    collected_at: datetime = field(default_factory=_utcnow)
    created_at: datetime = field(default_factory=_utcnow)
    id: int | None = None

    @classmethod
    def from_draft(
        cls,
        draft: SnapshotDraft,
        *,
        entry: Entry,
        trigger: SnapshotTrigger,
        mode: SelectionMode,
        collected_at: datetime,
    ) -> ProviderSnapshot:
        if entry.id is None:
            raise ValueError(f"Entry {entry.lemma!r} has not been persisted")
        snapshot = cls(
            entry_id=entry.id,
            lemma=entry.lemma,
            pos=entry.pos,
            provider_id=draft.provider_id,
            provider_label=draft.provider_label,
            status=str(draft.status),
            error=draft.error,
            trigger=str(trigger),
            mode=str(mode),
            raw_payload=draft.raw_payload,
            collected_at=collected_at,
            created_at=collected_at,
        )
        if draft.status is ProviderStatus.SUCCESS:
            grouped = group_suggestions(draft.pos_suggestions)
            snapshot.translations = _list_or_none(
                [dict(candidate.to_record()) for candidate in draft.translations]
            )
            snapshot.examples = _list_or_none(
                [dict(candidate.to_record()) for candidate in draft.examples]
            )
            snapshot.synonyms = _list_or_none(list(draft.synonyms))
            snapshot.english_hints = _list_or_none(list(draft.english_hints))
            snapshot.verb_forms = _list_or_none(grouped["verbForms"])
            snapshot.noun_forms = _list_or_none(grouped["nounForms"])
            snapshot.adjective_forms = _list_or_none(grouped["adjectiveForms"])
            snapshot.preposition_attributes = _list_or_none(grouped["prepositionAttributes"])
        return snapshot

    def candidate_payload(self) -> dict[str, object]:
        return {
            "translations": self.translations,
            "examples": self.examples,
            "synonyms": self.synonyms,
            "englishHints": self.english_hints,
            "verbForms": self.verb_forms,
            "nounForms": self.noun_forms,
            "adjectiveForms": self.adjective_forms,
            "prepositionAttributes": self.preposition_attributes,
        }
