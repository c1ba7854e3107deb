"""Candidate-selection policies used by the merge engine.

Every function here is deterministic: candidate lists arrive in provider
declaration order and ties are broken by source rank or lexicographic order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Literal

from .text import is_target_language, normalize_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lexipy.domain.model import (
        AdjectiveFormSuggestion,
        ExampleCandidate,
        NounFormSuggestion,
        SuggestionBundle,
        TranslationCandidate,
        VerbFormSuggestion,
    )

AUX_HABEN: Final[str] = "haben"
AUX_SEIN: Final[str] = "sein"
AUX_BOTH: Final[str] = "haben / sein"

GENDER_PREFERENCE: Final[tuple[str, ...]] = ("der", "die", "das")
_GENDER_ALIASES: Final[dict[str, str]] = {
    "der": "der",
    "m": "der",
    "masculine": "der",
    "maskulinum": "der",
    "die": "die",
    "f": "die",
    "feminine": "die",
    "femininum": "die",
    "das": "das",
    "n": "das",
    "neuter": "das",
    "neutrum": "das",
}
_GENDER_TAGS: Final[frozenset[str]] = frozenset({"masculine", "feminine", "neuter"})

# Lower scores win when picking a plural.
_PLURAL_NOMINATIVE_FORM: Final[int] = 0
_PLURAL_TAGGED_FORM: Final[int] = 1
_PLURAL_EXPLICIT: Final[int] = 2


def pick_primary_translation(bundle: SuggestionBundle) -> TranslationCandidate | None:
    """Prefer English candidates from the highest-ranked source, else any non-empty one."""

    ranked = sorted(bundle.translations, key=lambda candidate: bundle.source_rank(candidate.source))
    for candidate in ranked:
        if candidate.value.strip() and is_target_language(candidate.language):
            return candidate
    for candidate in ranked:
        if candidate.value.strip():
            return candidate
    return None


def _example_completeness(candidate: ExampleCandidate) -> int:
    if candidate.example_de and candidate.example_en:
        return 0
    if candidate.example_de:
        return 1
    return 2


def pick_example(bundle: SuggestionBundle) -> ExampleCandidate | None:
    """Highest-ranked source first, then full pairs before German-only before English-only."""

    if not bundle.examples:
        return None
    return min(
        bundle.examples,
        key=lambda candidate: (
            bundle.source_rank(candidate.source),
            _example_completeness(candidate),
        ),
    )


def pick_verb_suggestion(bundle: SuggestionBundle) -> VerbFormSuggestion | None:
    # first provider in declaration order wins
    for suggestion in bundle.verb_forms:
        if suggestion.has_forms or suggestion.aux:
            return suggestion
    return None


def normalize_auxiliary(value: str | None) -> str | None:
    text = normalize_text(value)
    if text is None:
        return None
    lowered = text.lower()
    if lowered.replace(" ", "") in {"haben/sein", "sein/haben"}:
        return AUX_BOTH
    if lowered in {AUX_HABEN, AUX_SEIN}:
        return lowered
    return None


def resolve_auxiliary(suggestion: VerbFormSuggestion) -> str | None:
    values = {normalize_auxiliary(value) for value in suggestion.auxiliaries} - {None}
    if AUX_BOTH in values or {AUX_HABEN, AUX_SEIN} <= values:
        return AUX_BOTH
    if len(values) == 1:
        return values.pop()
    return normalize_auxiliary(suggestion.aux)


def derive_perfekt(aux: str | None, participle: str | None) -> str | None:
    participle = normalize_text(participle)
    if participle is None:
        return None
    match normalize_auxiliary(aux):
        case "haben":
            return f"hat {participle}"
        case "sein":
            return f"ist {participle}"
        case "haben / sein":
            return f"hat {participle} / ist {participle}"
        case _:
            return None


def _gender_hints(suggestions: Sequence[NounFormSuggestion]) -> list[str]:
    hints: list[str] = []
    for suggestion in suggestions:
        hints.extend(suggestion.genders)
        for form in suggestion.forms:
            hints.extend(tag for tag in form.tags if tag in _GENDER_TAGS)
    return hints


def pick_gender(suggestions: Sequence[NounFormSuggestion]) -> str | None:
    hints = []
    for hint in _gender_hints(suggestions):
        normalized = normalize_text(hint)
        if normalized is not None:
            hints.append(_GENDER_ALIASES.get(normalized.lower(), normalized))
    for preferred in GENDER_PREFERENCE:
        if preferred in hints:
            return preferred
    return min(hints) if hints else None


def pick_plural(suggestions: Sequence[NounFormSuggestion]) -> str | None:
    scored: list[tuple[int, str]] = []
    for suggestion in suggestions:
        scored.extend((_PLURAL_EXPLICIT, value) for value in suggestion.plurals)
        for form in suggestion.forms:
            if not form.has_tag("plural"):
                continue
            score = _PLURAL_NOMINATIVE_FORM if form.has_tag("nominative") else _PLURAL_TAGGED_FORM
            scored.append((score, form.form))
    scored = [(score, value) for score, value in scored if normalize_text(value)]
    return min(scored)[1] if scored else None


def pick_adjective_degree(
    suggestions: Sequence[AdjectiveFormSuggestion],
    degree: Literal["comparative", "superlative"],
) -> str | None:
    values: list[str] = []
    for suggestion in suggestions:
        explicit = suggestion.comparatives if degree == "comparative" else suggestion.superlatives
        values.extend(explicit)
        values.extend(form.form for form in suggestion.forms if form.has_tag(degree))
    values = [value for value in values if normalize_text(value)]
    return min(values) if values else None
