"""OpenThesaurus synonym adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field

from lexipy.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    decode_response,
    default_client_factory,
)
from lexipy.domain.errors import ProviderError
from lexipy.domain.model import ProviderId, ProviderLookup

if TYPE_CHECKING:
    from collections.abc import Callable

OPENTHESAURUS_URL: Final[str] = "https://www.openthesaurus.de/synonyme/search"
OPENTHESAURUS_SOURCE: Final[str] = "openthesaurus.de"
MAX_SYNONYMS: Final[int] = 10


class OpenThesaurusTerm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    term: str | None = None


class OpenThesaurusSynset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    terms: list[OpenThesaurusTerm] = Field(default_factory=list)


class OpenThesaurusResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    synsets: list[OpenThesaurusSynset] = Field(default_factory=list)


class OpenThesaurusAPIError(ProviderError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, provider=ProviderId.OPENTHESAURUS, status_code=status_code)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="openthesaurus",
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        cache=CacheConfig(backend="memory"),
    )


def synonyms_from_response(payload: OpenThesaurusResponse, lemma: str) -> list[str]:
    collected: dict[str, str] = {}
    for synset in payload.synsets:
        for term in synset.terms:
            value = (term.term or "").strip()
            if not value or value.lower() == lemma.lower():
                continue
            collected.setdefault(value.lower(), value)
    return list(collected.values())[:MAX_SYNONYMS]


@dataclass(slots=True)
class OpenThesaurusProvider:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    id: str = field(default=ProviderId.OPENTHESAURUS, init=False)
    label: str = field(default="OpenThesaurus", init=False)
    source: str = field(default=OPENTHESAURUS_SOURCE, init=False)

    def unavailable_reason(self) -> str | None:
        return None

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        _ = pos
        async with self.client_factory(self.resilience) as client:
            response = await client.get(
                OPENTHESAURUS_URL, params={"q": lemma, "format": "application/json"}
            )
        payload = decode_response(response, OpenThesaurusResponse, error=OpenThesaurusAPIError)
        synonyms = synonyms_from_response(payload, lemma)
        if not synonyms:
            return None
        return ProviderLookup(synonyms=synonyms, raw_payload={"synonyms": synonyms})
