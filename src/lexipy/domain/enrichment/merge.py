"""Merge collected suggestions into an entry and compute the minimal patch.

``compute_patch`` is pure: the same entry, bundle and overwrite flag always produce
the same patch, and applying that patch then recomputing yields an empty one.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, assert_never

from lexipy.domain.model import FieldUpdate, WordClass

from .completeness import compute_completeness
from .records import (
    canonical_examples,
    canonical_translations,
    example_key,
    read_examples,
    read_pos_attributes,
    read_translations,
    translation_key,
)
from .selection import (
    derive_perfekt,
    pick_adjective_degree,
    pick_example,
    pick_gender,
    pick_plural,
    pick_primary_translation,
    pick_verb_suggestion,
    resolve_auxiliary,
)
from .text import is_blank, normalize_text, sort_strings

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lexipy.domain.model import (
        Entry,
        EntryPatch,
        ExampleCandidate,
        ExampleRecord,
        PosAttributes,
        SuggestionBundle,
        TranslationCandidate,
        TranslationRecord,
    )

    from .records import StoredRecords

log = logging.getLogger(__name__)

_SOURCES_SPLIT_RE = re.compile(r"[,;]")


@dataclass(slots=True, kw_only=True)
class MergeResult:
    patch: EntryPatch = field(default_factory=dict)
    updates: list[FieldUpdate] = field(default_factory=list)
    translation: TranslationCandidate | None = None
    example: ExampleCandidate | None = None
    translations: list[TranslationRecord] = field(default_factory=list)
    examples: list[ExampleRecord] = field(default_factory=list)
    pos_attributes: PosAttributes | None = None

    @property
    def has_changes(self) -> bool:
        return bool(self.patch)


class _PatchBuilder:
    def __init__(self, entry: Entry, *, allow_overwrite: bool) -> None:
        self.entry = entry
        self.allow_overwrite = allow_overwrite
        self.result = MergeResult()

    def value(self, name: str) -> object:
        if name in self.result.patch:
            return self.result.patch[name]
        return getattr(self.entry, name)

    def set(self, name: str, value: object, *, source: str | None) -> None:
        if value == self.value(name):
            return
        self.result.patch[name] = value
        self.result.updates = [u for u in self.result.updates if u.field != name]
        self.result.updates.append(
            FieldUpdate(field=name, previous=getattr(self.entry, name), next=value, source=source)
        )

    def propose(self, name: str, value: str | None, *, source: str | None) -> None:
        """Set a scalar field unless the overwrite guard protects the stored value."""

        normalized = normalize_text(value)
        if normalized is None:
            return
        if not self.allow_overwrite and not is_blank(getattr(self.entry, name)):
            return
        self.set(name, normalized, source=source)


def _merge_stored[T](
    builder: _PatchBuilder,
    name: str,
    stored: StoredRecords[T],
    additions: Iterable[T],
    key: Callable[[T], str],
    canonical: Callable[[Iterable[T]], object],
) -> list[T]:
    """Append unseen additions to the parsed stored records and patch ``name`` on change.

    Items that failed to parse are never the reason for a rewrite, and a rewrite
    carries them forward verbatim after the parsed records.
    """

    merged = list(stored.records)
    keys = {key(record) for record in merged}
    for record in additions:
        record_key = key(record)
        if record_key not in keys:
            keys.add(record_key)
            merged.append(record)
    if stored.duplicates or canonical(merged) != canonical(stored.records):
        builder.set(name, [*merged, *stored.rejected] or None, source="merge")
    return merged


def _merge_translations(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    builder.result.translations = _merge_stored(
        builder,
        "translations",
        read_translations(builder.entry.translations),
        (candidate.to_record() for candidate in bundle.translations),
        translation_key,
        canonical_translations,
    )


def _merge_examples(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    builder.result.examples = _merge_stored(
        builder,
        "examples",
        read_examples(builder.entry.examples),
        (candidate.to_record() for candidate in bundle.examples),
        example_key,
        canonical_examples,
    )


def _merge_verb(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    suggestion = pick_verb_suggestion(bundle)
    resolved_aux: str | None = None
    if suggestion is not None:
        builder.propose("praeteritum", suggestion.praeteritum, source=suggestion.source)
        builder.propose("partizip_ii", suggestion.partizip_ii, source=suggestion.source)
        if not suggestion.ambiguous_perfekt:
            builder.propose("perfekt", suggestion.perfekt, source=suggestion.source)
        resolved_aux = resolve_auxiliary(suggestion)
        builder.propose("aux", resolved_aux, source=suggestion.source)

    if not is_blank(builder.value("perfekt")):
        return
    aux = normalize_text(builder.value("aux")) or resolved_aux
    participle = normalize_text(builder.value("partizip_ii"))
    if participle is None and suggestion is not None:
        participle = suggestion.partizip_ii
    derived = derive_perfekt(aux, participle)
    if derived is not None:
        builder.set("perfekt", derived, source="derived")


def _merge_noun(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    suggestions = bundle.noun_forms
    if not suggestions:
        return
    source = suggestions[0].source
    builder.propose("gender", pick_gender(suggestions), source=source)
    builder.propose("plural", pick_plural(suggestions), source=source)


def _merge_adjective(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    suggestions = bundle.adjective_forms
    if not suggestions:
        return
    source = suggestions[0].source
    builder.propose("comparative", pick_adjective_degree(suggestions, "comparative"), source=source)
    builder.propose("superlative", pick_adjective_degree(suggestions, "superlative"), source=source)


def _merge_morphology(builder: _PatchBuilder, bundle: SuggestionBundle) -> None:
    word_class = builder.entry.word_class
    match word_class:
        case WordClass.VERB:
            _merge_verb(builder, bundle)
        case WordClass.NOUN:
            _merge_noun(builder, bundle)
        case WordClass.ADJECTIVE:
            _merge_adjective(builder, bundle)
        case WordClass.PREPOSITION | WordClass.OTHER:
            pass
        case _:
            assert_never(word_class)


def merge_pos_attributes(entry: Entry, bundle: SuggestionBundle) -> PosAttributes | None:
    existing = read_pos_attributes(entry.pos_attributes)
    merged: PosAttributes = {}

    existing_preposition = existing.get("preposition", {})
    cases: list[str] = list(existing_preposition.get("cases", []))
    notes: list[str] = list(existing_preposition.get("notes", []))
    if entry.word_class is WordClass.PREPOSITION:
        for suggestion in bundle.preposition_attributes:
            cases.extend(suggestion.cases)
            notes.extend(suggestion.notes)
    cases = sort_strings(cases)
    notes = sort_strings(notes)
    if cases or notes:
        merged["preposition"] = {}
        if cases:
            merged["preposition"]["cases"] = cases
        if notes:
            merged["preposition"]["notes"] = notes

    tags = sort_strings([*existing.get("tags", []), *bundle.pos_tags])
    if tags:
        merged["tags"] = tags
    pos_notes = sort_strings([*existing.get("notes", []), *bundle.pos_notes])
    if pos_notes:
        merged["notes"] = pos_notes

    label = normalize_text(bundle.pos_label) or existing.get("pos") or normalize_text(entry.pos)
    if label:
        merged["pos"] = label
    return merged or None


def _canonical_json(value: object) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def merge_sources(existing: str | None, observed: list[str]) -> str | None:
    tokens: dict[str, str] = {}
    for token in [*_SOURCES_SPLIT_RE.split(existing or ""), *observed]:
        normalized = normalize_text(token)
        if normalized is not None:
            tokens.setdefault(normalized.lower(), normalized)
    if not tokens:
        return None
    return ",".join(sorted(tokens.values(), key=lambda item: (item.lower(), item)))


def compute_patch(entry: Entry, bundle: SuggestionBundle, *, allow_overwrite: bool) -> MergeResult:
    builder = _PatchBuilder(entry, allow_overwrite=allow_overwrite)
    result = builder.result

    translation = pick_primary_translation(bundle)
    result.translation = translation
    if translation is not None:
        builder.propose("english", translation.value, source=translation.source)

    _merge_translations(builder, bundle)
    _merge_examples(builder, bundle)

    example = pick_example(bundle)
    result.example = example
    if example is not None and example.has_pair:
        builder.propose("example_de", example.example_de, source=example.source)
        builder.propose("example_en", example.example_en, source=example.source)

    _merge_morphology(builder, bundle)

    pos_attributes = merge_pos_attributes(entry, bundle)
    result.pos_attributes = pos_attributes
    if _canonical_json(pos_attributes) != _canonical_json(entry.pos_attributes):
        builder.set("pos_attributes", pos_attributes, source="merge")

    sources = merge_sources(entry.sources_csv, bundle.sources)
    if sources != entry.sources_csv and not (sources is None and is_blank(entry.sources_csv)):
        builder.set("sources_csv", sources, source="provenance")

    complete = compute_completeness(entry, result.patch)
    if complete != entry.complete:
        builder.set("complete", complete, source="derived")

    if result.patch:
        log.debug("Patch for %r touches %s", entry.lemma, ", ".join(result.patch))
    return result
