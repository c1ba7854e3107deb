"""Shared async HTTP client with retries, rate limiting and response caching."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport
from pydantic import BaseModel, ValidationError

from lexipy.config.http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from lexipy.config.storage import get_http_cache_path

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from lexipy.domain.errors import ProviderError

__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "decode_response",
    "default_client_factory",
]


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    json: object
    headers: HeaderTypes | None
    timeout: TimeoutTypes


def build_transport(policy: RetryPolicy) -> RetryTransport:
    retry = Retry(
        total=policy.attempts,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(sorted(policy.methods)),
        status_forcelist=tuple(sorted(policy.statuses)),
        retry_on_exceptions=policy.exceptions,
    )
    return RetryTransport(retry=retry)


def build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    """Return hishel storage for ``config`` or ``None`` when caching is off."""

    if config is None or not config.enabled:
        return None
    match config.backend:
        case "sqlite":
            database_path = config.sqlite_path or str(get_http_cache_path())
        case "memory":
            database_path = ":memory:"
        case other:
            msg = f"Unsupported cache backend: {other}"
            raise ValueError(msg)
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


class ResilientClient:
    """``httpx.AsyncClient`` wrapper shared by every provider adapter.

    Requests go through a retrying transport, an optional ``AsyncLimiter`` and, when a
    cache is configured, hishel's caching client.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        transport = build_transport(config.retry)
        headers = dict(config.default_headers)
        base_url = config.base_url or ""
        storage = build_cache_storage(config.cache)
        if storage is None:
            self._client: httpx.AsyncClient = httpx.AsyncClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=transport,
            )
        else:
            self._client = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=transport,
                storage=storage,
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self, method: str, url: URLTypes, **kwargs: Unpack[RequestOptions]
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def decode_response[T: BaseModel](
    response: httpx.Response,
    model: type[T],
    *,
    error: Callable[..., ProviderError],
) -> T:
    """Raise ``error`` for HTTP failures, otherwise validate the JSON body as ``model``."""

    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise error(
            f"Request failed with status {response.status_code}",
            status_code=response.status_code,
        ) from exc
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise error(f"Unexpected response payload: {exc}") from exc
