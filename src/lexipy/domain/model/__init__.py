"""Public domain model surface."""

from __future__ import annotations

from lexipy.domain.model.entry import (
    PATCHABLE_FIELDS,
    Entry,
    EntryPatch,
    ExampleRecord,
    PosAttributes,
    PrepositionAttributes,
    TranslationRecord,
)
from lexipy.domain.model.enums import (
    BULK_ENRICHMENT_METHOD,
    PROVIDER_PRIORITY,
    PartOfSpeech,
    ProviderId,
    ProviderStatus,
    SelectionMode,
    SnapshotTrigger,
    WordClass,
    provider_rank,
    word_class_for,
)
from lexipy.domain.model.snapshot import ProviderDiagnostic, ProviderSnapshot, SnapshotDraft
from lexipy.domain.model.suggestions import (
    AdjectiveFormSuggestion,
    ExampleCandidate,
    FormEntry,
    NounFormSuggestion,
    PosSuggestion,
    PrepositionSuggestion,
    ProviderLookup,
    SuggestionBundle,
    TranslationCandidate,
    VerbFormSuggestion,
    describe_suggestion,
    group_suggestions,
    suggestion_from_payload,
)
from lexipy.domain.model.summary import EntrySummary, FieldUpdate, PipelineTotals

__all__ = [  # noqa: RUF022
    # entry
    "Entry",
    "EntryPatch",
    "ExampleRecord",
    "PATCHABLE_FIELDS",
    "PosAttributes",
    "PrepositionAttributes",
    "TranslationRecord",
    # enums
    "BULK_ENRICHMENT_METHOD",
    "PROVIDER_PRIORITY",
    "PartOfSpeech",
    "ProviderId",
    "ProviderStatus",
    "SelectionMode",
    "SnapshotTrigger",
    "WordClass",
    "provider_rank",
    "word_class_for",
    # snapshots
    "ProviderDiagnostic",
    "ProviderSnapshot",
    "SnapshotDraft",
    # suggestions
    "AdjectiveFormSuggestion",
    "ExampleCandidate",
    "FormEntry",
    "NounFormSuggestion",
    "PosSuggestion",
    "PrepositionSuggestion",
    "ProviderLookup",
    "SuggestionBundle",
    "TranslationCandidate",
    "VerbFormSuggestion",
    "describe_suggestion",
    "group_suggestions",
    "suggestion_from_payload",
    # summaries
    "EntrySummary",
    "FieldUpdate",
    "PipelineTotals",
]
