from __future__ import annotations

import asyncio

import httpx
import pytest

from lexipy.adapters.tatoeba import (
    TATOEBA_SOURCE,
    TatoebaAPIError,
    TatoebaProvider,
    TatoebaResponse,
    example_from_response,
)
from tests.helpers.http import make_client_factory, offline_resilience

SEARCH_RESULT = {
    "results": [
        {
            "id": 1,
            "text": "An der Ampel musst du links abbiegen.",
            "lang": "deu",
            "translations": [
                [{"text": "Au feu, tourne à gauche.", "lang": "fra"}],
                [{"text": "Turn left at the traffic light.", "lang": "eng"}],
            ],
        }
    ]
}


def test_lookup_pairs_first_result_with_english_translation() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=SEARCH_RESULT)

    provider = TatoebaProvider(
        resilience=offline_resilience("tatoeba"), client_factory=make_client_factory(handler)
    )
    lookup = asyncio.run(provider.lookup("abbiegen"))

    assert lookup is not None
    (example,) = lookup.examples
    assert example.source == TATOEBA_SOURCE
    assert example.example_de == "An der Ampel musst du links abbiegen."
    assert example.example_en == "Turn left at the traffic light."
    assert isinstance(lookup.raw_payload, dict)
    assert lookup.raw_payload["lang"] == "deu"
    params = requests[0].url.params
    assert (params["query"], params["from"], params["to"]) == ("abbiegen", "deu", "eng")


def test_no_english_translation_means_no_example() -> None:
    payload = TatoebaResponse.model_validate(
        {"results": [{"text": "Biege ab.", "translations": [[{"text": "Tourne.", "lang": "fra"}]]}]}
    )

    assert example_from_response(payload) is None
    assert example_from_response(TatoebaResponse()) is None


def test_server_error_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(500)

    provider = TatoebaProvider(
        resilience=offline_resilience("tatoeba"), client_factory=make_client_factory(handler)
    )

    with pytest.raises(TatoebaAPIError, match="status 500"):
        asyncio.run(provider.lookup("abbiegen"))
