"""Enumerations shared across the enrichment model."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class PartOfSpeech(StrEnum):
    VERB = "V"
    NOUN = "N"
    ADJECTIVE = "Adj"
    ADVERB = "Adv"
    PRONOUN = "Pron"
    DETERMINER = "Det"
    PREPOSITION = "Präp"
    CONJUNCTION = "Konj"
    NUMERAL = "Num"
    PARTICLE = "Part"
    INTERJECTION = "Interj"


class WordClass(StrEnum):
    """Morphology family an entry's part of speech belongs to."""

    VERB = "verb"
    NOUN = "noun"
    ADJECTIVE = "adjective"
    PREPOSITION = "preposition"
    OTHER = "other"


class ProviderId(StrEnum):
    # Declaration order is provider priority.
    WIKTEXTRACT = "wiktextract"
    MYMEMORY = "mymemory"
    TATOEBA = "tatoeba"
    OPENTHESAURUS = "openthesaurus"
    OPENAI = "openai"


class ProviderStatus(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


class SnapshotTrigger(StrEnum):
    PREVIEW = "preview"
    APPLY = "apply"


class SelectionMode(StrEnum):
    NON_CANONICAL = "non-canonical"
    CANONICAL = "canonical"
    ALL = "all"


PROVIDER_PRIORITY: Final[tuple[ProviderId, ...]] = tuple(ProviderId)
BULK_ENRICHMENT_METHOD: Final[str] = "bulk"


def word_class_for(pos: str | None) -> WordClass:
    match pos:
        case PartOfSpeech.VERB:
            return WordClass.VERB
        case PartOfSpeech.NOUN:
            return WordClass.NOUN
        case PartOfSpeech.ADJECTIVE:
            return WordClass.ADJECTIVE
        case PartOfSpeech.PREPOSITION:
            return WordClass.PREPOSITION
        case _:
            return WordClass.OTHER


def provider_rank(provider_id: str) -> int:
    """Position of ``provider_id`` in the fixed priority order; unknown ids sort last."""

    try:
        return PROVIDER_PRIORITY.index(ProviderId(provider_id.lower()))
    except ValueError:
        return len(PROVIDER_PRIORITY)
