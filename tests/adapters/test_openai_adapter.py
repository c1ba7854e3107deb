from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from lexipy.adapters.openai import MISSING_KEY_MESSAGE, OpenAIAPIError, OpenAIProvider
from lexipy.config.providers import OpenAIConfig
from tests.helpers.http import make_client_factory, offline_resilience


def _completion(content: str | None) -> dict[str, object]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _provider(
    handler: Callable[[httpx.Request], httpx.Response], *, api_key: str | None = "sk-test"
) -> OpenAIProvider:
    return OpenAIProvider(
        config=OpenAIConfig(api_key=api_key, base_url="https://llm.example/v1/"),
        resilience=offline_resilience("openai"),
        client_factory=make_client_factory(handler),
    )


def test_lookup_parses_json_content() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        content = json.dumps(
            {
                "translation": "to turn off",
                "exampleDe": "Wir biegen hier ab.",
                "exampleEn": "We turn off here.",
            }
        )
        return httpx.Response(200, json=_completion(content))

    provider = _provider(handler)
    lookup = asyncio.run(provider.lookup("abbiegen", "V"))

    assert lookup is not None
    assert provider.source == "openai:gpt-4o-mini"
    assert [c.value for c in lookup.translations] == ["to turn off"]
    assert lookup.translations[0].source == "openai:gpt-4o-mini"
    (example,) = lookup.examples
    assert (example.example_de, example.example_en) == ("Wir biegen hier ab.", "We turn off here.")

    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://llm.example/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert '"abbiegen"' in body["messages"][1]["content"]


def test_empty_content_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, json=_completion(None))

    assert asyncio.run(_provider(handler).lookup("abbiegen")) is None


def test_invalid_json_content_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, json=_completion("not json"))

    with pytest.raises(OpenAIAPIError, match="Failed to parse OpenAI response"):
        asyncio.run(_provider(handler).lookup("abbiegen"))


def test_missing_key_is_reported_as_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request to {request.url}")

    provider = _provider(handler, api_key=None)

    assert provider.unavailable_reason() == MISSING_KEY_MESSAGE
    with pytest.raises(OpenAIAPIError, match=MISSING_KEY_MESSAGE):
        asyncio.run(provider.lookup("abbiegen"))
