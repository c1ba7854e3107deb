from __future__ import annotations

import asyncio

import httpx

from lexipy.adapters.openthesaurus import (
    MAX_SYNONYMS,
    OpenThesaurusProvider,
    OpenThesaurusResponse,
    synonyms_from_response,
)
from tests.helpers.http import make_client_factory, offline_resilience


def test_lookup_collects_unique_synonyms() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "abbiegen"
        return httpx.Response(
            200,
            json={
                "synsets": [
                    {"terms": [{"term": "abbiegen"}, {"term": "einbiegen"}]},
                    {"terms": [{"term": "Einbiegen"}, {"term": "abzweigen"}, {"term": " "}]},
                ]
            },
        )

    provider = OpenThesaurusProvider(
        resilience=offline_resilience("openthesaurus"),
        client_factory=make_client_factory(handler),
    )
    lookup = asyncio.run(provider.lookup("abbiegen"))

    assert lookup is not None
    assert lookup.synonyms == ["einbiegen", "abzweigen"]
    assert lookup.raw_payload == {"synonyms": ["einbiegen", "abzweigen"]}


def test_synonyms_are_capped() -> None:
    payload = OpenThesaurusResponse.model_validate(
        {"synsets": [{"terms": [{"term": f"wort{index}"} for index in range(15)]}]}
    )

    assert len(synonyms_from_response(payload, "abbiegen")) == MAX_SYNONYMS


def test_empty_result_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, json={"synsets": []})

    provider = OpenThesaurusProvider(
        resilience=offline_resilience("openthesaurus"),
        client_factory=make_client_factory(handler),
    )

    assert asyncio.run(provider.lookup("xyz")) is None
