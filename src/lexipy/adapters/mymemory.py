"""MyMemory translation memory adapter."""

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
from lexipy.domain.model import ProviderId, ProviderLookup, TranslationCandidate

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

MYMEMORY_URL: Final[str] = "https://api.mymemory.translated.net/get"
MYMEMORY_SOURCE: Final[str] = "mymemory.translated.net"
MIN_MATCH_QUALITY: Final[float] = 80.0


def _lenient_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


class MyMemoryMatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    translation: str | None = None
    quality: float | None = None
    match: float | None = None

    @field_validator("quality", "match", mode="before")
    @classmethod
    def coerce_numeric(cls, value: object) -> float | None:
        return _lenient_float(value)


class MyMemoryResponseData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    translated_text: str | None = Field(default=None, alias="translatedText")
    match: float | None = None

    @field_validator("match", mode="before")
    @classmethod
    def coerce_numeric(cls, value: object) -> float | None:
        return _lenient_float(value)


class MyMemoryResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    response_data: MyMemoryResponseData | None = Field(default=None, alias="responseData")
    matches: list[MyMemoryMatch] = Field(default_factory=list)

    @field_validator("matches", mode="before")
    @classmethod
    def matches_as_list(cls, value: object) -> object:
        return value if isinstance(value, list) else []


class MyMemoryAPIError(ProviderError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, provider=ProviderId.MYMEMORY, status_code=status_code)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="mymemory",
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=CacheConfig(backend="memory"),
    )


def translation_from_response(payload: MyMemoryResponse, lemma: str) -> TranslationCandidate | None:
    """Pick the first high-quality memory match, else the machine translation."""

    for match in payload.matches:
        translation = (match.translation or "").strip()
        if match.quality is None or match.quality < MIN_MATCH_QUALITY or not translation:
            continue
        return TranslationCandidate(
            value=translation, source=MYMEMORY_SOURCE, language="en", confidence=match.quality
        )

    data = payload.response_data
    fallback = (data.translated_text or "").strip() if data else ""
    if fallback and fallback.lower() != lemma.lower():
        confidence = data.match * 100 if data and data.match is not None else None
        return TranslationCandidate(
            value=fallback, source=MYMEMORY_SOURCE, language="en", confidence=confidence
        )
    return None


@dataclass(slots=True)
class MyMemoryProvider:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    id: str = field(default=ProviderId.MYMEMORY, init=False)
    label: str = field(default="MyMemory", init=False)
    source: str = field(default=MYMEMORY_SOURCE, init=False)

    def unavailable_reason(self) -> str | None:
        return None

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        _ = pos
        async with self.client_factory(self.resilience) as client:
            response = await client.get(MYMEMORY_URL, params={"q": lemma, "langpair": "de|en"})
        payload = decode_response(response, MyMemoryResponse, error=MyMemoryAPIError)
        candidate = translation_from_response(payload, lemma)
        if candidate is None:
            log.debug("MyMemory has no translation for %r", lemma)
            return None
        return ProviderLookup(
            translations=[candidate],
            raw_payload=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
