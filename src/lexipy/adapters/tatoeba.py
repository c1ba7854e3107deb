"""Tatoeba example-sentence adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lexipy.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    decode_response,
    default_client_factory,
)
from lexipy.domain.errors import ProviderError
from lexipy.domain.model import ExampleCandidate, ProviderId, ProviderLookup

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

TATOEBA_URL: Final[str] = "https://tatoeba.org/en/api_v0/search"
TATOEBA_SOURCE: Final[str] = "tatoeba.org"


class TatoebaTranslation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    lang: str | None = None


class TatoebaResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    lang: str | None = None
    translations: list[TatoebaTranslation] = Field(default_factory=list)

    @field_validator("translations", mode="before")
    @classmethod
    def flatten_translation_groups(cls, value: object) -> object:
        # the API groups direct and indirect translations as nested lists
        if not isinstance(value, list):
            return []
        flattened: list[object] = []
        for item in value:
            if isinstance(item, list):
                flattened.extend(item)
            else:
                flattened.append(item)
        return flattened


class TatoebaResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[TatoebaResult] = Field(default_factory=list)


class TatoebaAPIError(ProviderError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, provider=ProviderId.TATOEBA, status_code=status_code)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="tatoeba",
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=CacheConfig(backend="memory"),
    )


def example_from_response(payload: TatoebaResponse) -> ExampleCandidate | None:
    if not payload.results:
        return None
    result = payload.results[0]
    german = (result.text or "").strip()
    if not german:
        return None
    for translation in result.translations:
        english = (translation.text or "").strip()
        if translation.lang == "eng" and english:
            return ExampleCandidate(source=TATOEBA_SOURCE, example_de=german, example_en=english)
    return None


@dataclass(slots=True)
class TatoebaProvider:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    id: str = field(default=ProviderId.TATOEBA, init=False)
    label: str = field(default="Tatoeba", init=False)
    source: str = field(default=TATOEBA_SOURCE, init=False)

    def unavailable_reason(self) -> str | None:
        return None

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        _ = pos
        params = {
            "query": lemma,
            "from": "deu",
            "to": "eng",
            "sort": "relevance",
            "limit": "1",
        }
        async with self.client_factory(self.resilience) as client:
            response = await client.get(TATOEBA_URL, params=params)
        payload = decode_response(response, TatoebaResponse, error=TatoebaAPIError)
        example = example_from_response(payload)
        if example is None:
            log.debug("Tatoeba has no example for %r", lemma)
            return None
        return ProviderLookup(
            examples=[example],
            raw_payload=payload.results[0].model_dump(mode="json", exclude_none=True),
        )
