"""Suggestion collection: query every enabled provider for one entry."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, assert_never

from lexipy.domain.model import (
    AdjectiveFormSuggestion,
    ExampleCandidate,
    FormEntry,
    NounFormSuggestion,
    PrepositionSuggestion,
    ProviderDiagnostic,
    ProviderId,
    ProviderStatus,
    SnapshotDraft,
    SuggestionBundle,
    TranslationCandidate,
    VerbFormSuggestion,
)

from .text import make_dedup_key, merge_string_lists, normalize_string_list, normalize_text

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from lexipy.domain.model import Entry, PosSuggestion, ProviderLookup
    from lexipy.domain.ports.providers import ProviderAdapter

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class CollectionResult:
    bundle: SuggestionBundle
    drafts: list[SnapshotDraft] = field(default_factory=list)
    diagnostics: list[ProviderDiagnostic] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    ai_used: bool = False


def _tags(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(tag.lower() for tag in normalize_string_list(values))


def _forms(forms: Iterable[FormEntry]) -> tuple[FormEntry, ...]:
    result: list[FormEntry] = []
    seen: set[str] = set()
    for entry in forms:
        form = normalize_text(entry.form)
        if form is None:
            continue
        normalized = FormEntry(form=form, tags=_tags(entry.tags))
        key = make_dedup_key(form, *normalized.tags)
        if key in seen:
            continue
        seen.add(key)
        result.append(normalized)
    return tuple(result)


def normalize_suggestion(suggestion: PosSuggestion, *, source: str) -> PosSuggestion | None:
    """Return a whitespace-normalized copy, or ``None`` if nothing usable remains."""

    tag = normalize_text(suggestion.source) or source
    match suggestion:
        case VerbFormSuggestion():
            auxiliaries = tuple(
                value.lower() for value in normalize_string_list(suggestion.auxiliaries)
            )
            aux = normalize_text(suggestion.aux)
            verb = VerbFormSuggestion(
                source=tag,
                praeteritum=normalize_text(suggestion.praeteritum),
                partizip_ii=normalize_text(suggestion.partizip_ii),
                perfekt=normalize_text(suggestion.perfekt),
                aux=aux.lower() if aux else None,
                auxiliaries=auxiliaries,
                perfekt_options=tuple(normalize_string_list(suggestion.perfekt_options)),
            )
            return verb if verb.has_forms or verb.aux else None
        case NounFormSuggestion():
            noun = NounFormSuggestion(
                source=tag,
                genders=tuple(normalize_string_list(suggestion.genders)),
                plurals=tuple(normalize_string_list(suggestion.plurals)),
                forms=_forms(suggestion.forms),
            )
            return noun if noun.genders or noun.plurals or noun.forms else None
        case AdjectiveFormSuggestion():
            adjective = AdjectiveFormSuggestion(
                source=tag,
                comparatives=tuple(normalize_string_list(suggestion.comparatives)),
                superlatives=tuple(normalize_string_list(suggestion.superlatives)),
                forms=_forms(suggestion.forms),
            )
            if adjective.comparatives or adjective.superlatives or adjective.forms:
                return adjective
            return None
        case PrepositionSuggestion():
            preposition = PrepositionSuggestion(
                source=tag,
                cases=tuple(normalize_string_list(suggestion.cases)),
                notes=tuple(normalize_string_list(suggestion.notes)),
            )
            return preposition if preposition.cases or preposition.notes else None
        case _:
            assert_never(suggestion)


def _confidence(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


class _BundleBuilder:
    def __init__(self, source_order: tuple[str, ...]) -> None:
        self.bundle = SuggestionBundle(source_order=source_order)
        self._translation_keys: set[str] = set()
        self._example_keys: set[str] = set()

    def add_translation(
        self, candidate: TranslationCandidate, *, source: str
    ) -> TranslationCandidate | None:
        value = normalize_text(candidate.value)
        if value is None:
            return None
        normalized = TranslationCandidate(
            value=value,
            source=normalize_text(candidate.source) or source,
            language=normalize_text(candidate.language),
            confidence=_confidence(candidate.confidence),
        )
        key = make_dedup_key(normalized.value, normalized.source, normalized.language)
        if key in self._translation_keys:
            return None
        self._translation_keys.add(key)
        self.bundle.translations.append(normalized)
        return normalized

    def add_example(self, candidate: ExampleCandidate, *, source: str) -> ExampleCandidate | None:
        example_de = normalize_text(candidate.example_de)
        example_en = normalize_text(candidate.example_en)
        if example_de is None and example_en is None:
            return None
        normalized = ExampleCandidate(
            source=normalize_text(candidate.source) or source,
            example_de=example_de,
            example_en=example_en,
        )
        key = make_dedup_key(example_de, example_en, normalized.source)
        if key in self._example_keys:
            return None
        self._example_keys.add(key)
        self.bundle.examples.append(normalized)
        return normalized

    def absorb(
        self, provider: ProviderAdapter, lookup: ProviderLookup, draft: SnapshotDraft
    ) -> None:
        bundle = self.bundle
        for translation in lookup.translations:
            added = self.add_translation(translation, source=provider.source)
            if added is not None:
                draft.translations.append(added)
        for example in lookup.examples:
            added_example = self.add_example(example, source=provider.source)
            if added_example is not None:
                draft.examples.append(added_example)

        draft.synonyms = normalize_string_list(lookup.synonyms)
        draft.english_hints = normalize_string_list(lookup.english_hints)
        bundle.synonyms = merge_string_lists(bundle.synonyms, draft.synonyms)
        bundle.english_hints = merge_string_lists(bundle.english_hints, draft.english_hints)

        for suggestion in lookup.pos_suggestions:
            normalized = normalize_suggestion(suggestion, source=provider.source)
            if normalized is not None:
                draft.pos_suggestions.append(normalized)
                bundle.pos_suggestions.append(normalized)

        if bundle.pos_label is None:
            bundle.pos_label = normalize_text(lookup.pos_label)
        bundle.pos_tags = merge_string_lists(bundle.pos_tags, lookup.pos_tags)
        bundle.pos_notes = merge_string_lists(bundle.pos_notes, lookup.pos_notes)

        provider_key = provider.id.lower()
        if provider_key not in bundle.sources:
            bundle.sources.append(provider_key)


def _payload_summary(draft: SnapshotDraft) -> dict[str, int]:
    return {
        "translations": len(draft.translations),
        "examples": len(draft.examples),
        "synonyms": len(draft.synonyms),
        "englishHints": len(draft.english_hints),
        "posSuggestions": len(draft.pos_suggestions),
    }


class SuggestionCollector:
    """Run every enabled provider for an entry and fold the results in declaration order.

    Lookups for one entry run concurrently; results are combined only after all of
    them have settled, so candidate precedence never depends on network timing.
    """

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        *,
        enabled: Collection[str] | None = None,
        pos_filters: Collection[str] = (),
    ) -> None:
        self._providers = tuple(providers)
        self._enabled = (
            frozenset(provider.id for provider in self._providers)
            if enabled is None
            else frozenset(str(provider_id) for provider_id in enabled)
        )
        self._pos_filters = frozenset(pos_filters)

    @property
    def providers(self) -> tuple[ProviderAdapter, ...]:
        return self._providers

    async def collect(self, entry: Entry) -> CollectionResult:
        builder = _BundleBuilder(tuple(dict.fromkeys(p.source for p in self._providers)))
        result = CollectionResult(bundle=builder.bundle)

        pos_allowed = not self._pos_filters or entry.pos in self._pos_filters
        active: list[ProviderAdapter] = []
        for provider in self._providers:
            if provider.id not in self._enabled or not pos_allowed:
                result.diagnostics.append(
                    ProviderDiagnostic(
                        id=provider.id, label=provider.label, status=ProviderStatus.SKIPPED
                    )
                )
                continue
            reason = provider.unavailable_reason()
            if reason is not None:
                result.diagnostics.append(
                    ProviderDiagnostic(
                        id=provider.id,
                        label=provider.label,
                        status=ProviderStatus.ERROR,
                        error=reason,
                    )
                )
                result.errors.append(f"{provider.label}: {reason}")
                continue
            active.append(provider)

        outcomes = await asyncio.gather(
            *(provider.lookup(entry.lemma, entry.pos) for provider in active),
            return_exceptions=True,
        )

        for provider, outcome in zip(active, outcomes, strict=True):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                message = str(outcome) or type(outcome).__name__
                log.warning("Provider %s failed for %r: %s", provider.id, entry.lemma, message)
                result.drafts.append(
                    SnapshotDraft(
                        provider_id=provider.id,
                        provider_label=provider.label,
                        status=ProviderStatus.ERROR,
                        error=message,
                    )
                )
                result.diagnostics.append(
                    ProviderDiagnostic(
                        id=provider.id,
                        label=provider.label,
                        status=ProviderStatus.ERROR,
                        error=message,
                    )
                )
                result.errors.append(f"{provider.label}: {message}")
                continue

            draft = SnapshotDraft(
                provider_id=provider.id,
                provider_label=provider.label,
                status=ProviderStatus.SUCCESS,
                raw_payload=outcome.raw_payload if outcome is not None else None,
            )
            if outcome is not None:
                builder.absorb(provider, outcome, draft)
                if provider.id == ProviderId.OPENAI:
                    result.ai_used = True
            result.drafts.append(draft)
            result.diagnostics.append(
                ProviderDiagnostic(
                    id=provider.id,
                    label=provider.label,
                    status=ProviderStatus.SUCCESS,
                    payload=_payload_summary(draft) if outcome is not None else None,
                )
            )

        order = {provider.id: index for index, provider in enumerate(self._providers)}
        result.diagnostics.sort(key=lambda diagnostic: order[diagnostic.id])

        log.debug(
            "Collected %s translations and %s examples for %r",
            len(result.bundle.translations),
            len(result.bundle.examples),
            entry.lemma,
        )
        return result
