"""Provider adapter contract."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from lexipy.domain.model import ProviderLookup


@runtime_checkable
class ProviderAdapter(Protocol):
    """One external source of candidate facts.

    ``lookup`` returns ``None`` for an ordinary "not found" and raises
    :class:`~lexipy.domain.errors.ProviderError` only for transport or parse failures.
    """

    @property
    def id(self) -> str: ...

    @property
    def label(self) -> str: ...

    @property
    def source(self) -> str:
        """Source tag attached to every candidate this provider produces."""
        ...

    def unavailable_reason(self) -> str | None:
        """Explain why an enabled provider cannot run (e.g. missing credentials)."""
        ...

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None: ...
