"""File-level sinks used by the snapshot recorder and the pipeline runner."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime
    from pathlib import Path

    from lexipy.domain.model import Entry, ProviderSnapshot


@runtime_checkable
class SnapshotFileStore(Protocol):
    def persist(self, snapshot: ProviderSnapshot) -> Path: ...


@runtime_checkable
class SnapshotMirror(Protocol):
    """Best-effort remote copy of snapshot files."""

    def upload(self, relative_path: str, data: bytes) -> None: ...


class NullMirror:
    """Mirror that discards uploads."""

    def upload(self, relative_path: str, data: bytes) -> None:
        _ = relative_path, data


@runtime_checkable
class RunArtifactWriter(Protocol):
    def write_backup(self, entries: Sequence[Entry], *, created_at: datetime) -> Path: ...

    def write_report(self, report: Mapping[str, object], *, generated_at: datetime) -> Path: ...
