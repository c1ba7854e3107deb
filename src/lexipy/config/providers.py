"""Credentials and defaults for the optional AI provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env

DEFAULT_OPENAI_MODEL: Final[str] = "gpt-4o-mini"
OPENAI_BASE_URL: Final[str] = "https://api.openai.com/v1"


@dataclass(frozen=True, slots=True)
class OpenAIConfig:
    api_key: str | None = None
    model: str = DEFAULT_OPENAI_MODEL
    base_url: str = OPENAI_BASE_URL

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


def get_openai_config(*, model: str | None = None) -> OpenAIConfig:
    """Read OpenAI settings; a missing key is not an error until the provider runs."""

    return OpenAIConfig(
        api_key=optional_env("OPENAI_API_KEY"),
        model=model or optional_env("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        base_url=optional_env("OPENAI_BASE_URL") or OPENAI_BASE_URL,
    )
