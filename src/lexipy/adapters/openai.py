"""OpenAI chat-completions adapter for translations and example sentences."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lexipy.adapters.http_resilience import (
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    decode_response,
    default_client_factory,
)
from lexipy.config.providers import OpenAIConfig, get_openai_config
from lexipy.domain.errors import ProviderError
from lexipy.domain.model import (
    ExampleCandidate,
    ProviderId,
    ProviderLookup,
    TranslationCandidate,
)

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

MISSING_KEY_MESSAGE: Final[str] = "Missing OpenAI API key"
_SYSTEM_PROMPT: Final[str] = (
    "You are a linguistics assistant that responds with valid JSON only. Provide "
    "translations and simple bilingual example sentences for German vocabulary."
)


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str | None = None


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: ChatMessage | None = None


class ChatCompletionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    choices: list[ChatChoice] = Field(default_factory=list)


class AssistantSuggestion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    translation: str | None = None
    example_de: str | None = Field(default=None, alias="exampleDe")
    example_en: str | None = Field(default=None, alias="exampleEn")


class OpenAIAPIError(ProviderError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, provider=ProviderId.OPENAI, status_code=status_code)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="openai",
        timeout_seconds=60.0,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        cache=None,
    )


def build_request(lemma: str, pos: str | None, *, model: str) -> dict[str, object]:
    word_kind = pos or "word"
    return {
        "model": model,
        "temperature": 0.2,
        "messages": [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Return a JSON object with keys translation, exampleDe, exampleEn for the "
                    f'German {word_kind} "{lemma}". Use neutral tone and CEFR A2 difficulty. '
                    "If unsure, omit the key."
                ),
            },
        ],
        "response_format": {"type": "json_object"},
    }


def parse_completion(payload: ChatCompletionResponse) -> AssistantSuggestion | None:
    message = payload.choices[0].message if payload.choices else None
    content = message.content if message else None
    if not content:
        return None
    try:
        return AssistantSuggestion.model_validate_json(content)
    except ValidationError as exc:
        raise OpenAIAPIError(f"Failed to parse OpenAI response: {exc}") from exc


@dataclass(slots=True)
class OpenAIProvider:
    config: OpenAIConfig = field(default_factory=get_openai_config)
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    id: str = field(default=ProviderId.OPENAI, init=False)
    label: str = field(default="OpenAI", init=False)

    @property
    def source(self) -> str:
        return f"openai:{self.config.model}"

    def unavailable_reason(self) -> str | None:
        return None if self.config.configured else MISSING_KEY_MESSAGE

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        if not self.config.configured:
            raise OpenAIAPIError(MISSING_KEY_MESSAGE)
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        async with self.client_factory(self.resilience) as client:
            response = await client.post(
                url, json=build_request(lemma, pos, model=self.config.model), headers=headers
            )
        payload = decode_response(response, ChatCompletionResponse, error=OpenAIAPIError)
        suggestion = parse_completion(payload)
        if suggestion is None:
            log.debug("OpenAI returned no content for %r", lemma)
            return None

        lookup = ProviderLookup(raw_payload=suggestion.model_dump(mode="json", by_alias=True))
        translation = (suggestion.translation or "").strip()
        if translation:
            lookup.translations.append(
                TranslationCandidate(value=translation, source=self.source, language="en")
            )
        if (suggestion.example_de or "").strip() or (suggestion.example_en or "").strip():
            lookup.examples.append(
                ExampleCandidate(
                    source=self.source,
                    example_de=suggestion.example_de,
                    example_en=suggestion.example_en,
                )
            )
        if not lookup.translations and not lookup.examples:
            return None
        return lookup
