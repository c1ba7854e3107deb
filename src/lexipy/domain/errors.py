"""Error taxonomy for the enrichment engine."""

from __future__ import annotations


class EnrichmentError(RuntimeError):
    """Base class for enrichment failures."""


class ProviderError(EnrichmentError):
    """Raised by provider adapters on transport or payload failures."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class NormalizationError(EnrichmentError, ValueError):
    """Raised for malformed stored or candidate data; callers treat the value as absent."""


class PersistenceError(EnrichmentError):
    """Raised when the entry or snapshot store fails."""


class SnapshotFileError(PersistenceError):
    """Raised when a provider snapshot file cannot be read or written."""
