"""Kaikki dictionary client and provider adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from lexipy.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    default_client_factory,
)
from lexipy.domain.errors import ProviderError
from lexipy.domain.model import ProviderId, ProviderLookup

from .schema import KaikkiEntry
from .translator import KAIKKI_SOURCE, lookup_from_entries

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

KAIKKI_BASE_URL: Final[str] = "https://kaikki.org/dictionary/German/meaning"


class KaikkiAPIError(ProviderError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, provider=ProviderId.WIKTEXTRACT, status_code=status_code)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="kaikki",
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        cache=CacheConfig(backend="memory"),
    )


def kaikki_url(lemma: str) -> str:
    """Kaikki shards its dump by the first one and two characters of the headword."""

    word = lemma.strip()
    segments = (word[:1], word[:2], word)
    path = "/".join(quote(segment, safe="") for segment in segments)
    return f"{KAIKKI_BASE_URL}/{path}.jsonl"


def parse_entries(text: str) -> list[KaikkiEntry]:
    entries: list[KaikkiEntry] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entries.append(KaikkiEntry.model_validate_json(line))
        except ValidationError as exc:
            raise KaikkiAPIError(f"Invalid Kaikki entry on line {number}: {exc}") from exc
    return entries


@dataclass(slots=True)
class KaikkiProvider:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    id: str = field(default=ProviderId.WIKTEXTRACT, init=False)
    label: str = field(default="Wiktextract", init=False)
    source: str = field(default=KAIKKI_SOURCE, init=False)

    def unavailable_reason(self) -> str | None:
        return None

    async def fetch_entries(self, lemma: str) -> list[KaikkiEntry] | None:
        if not lemma.strip():
            return None
        async with self.client_factory(self.resilience) as client:
            response = await client.get(kaikki_url(lemma))
        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("Kaikki has no entry for %r", lemma)
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise KaikkiAPIError(
                f"Kaikki request failed: {exc}", status_code=response.status_code
            ) from exc
        return parse_entries(response.text)

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        entries = await self.fetch_entries(lemma)
        if not entries:
            return None
        return lookup_from_entries(entries, lemma=lemma, pos=pos)
