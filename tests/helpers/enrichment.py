"""Reusable fakes and factories for enrichment tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from lexipy.domain.errors import PersistenceError, SnapshotFileError
from lexipy.domain.model import PATCHABLE_FIELDS, Entry, SelectionMode

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from lexipy.domain.model import EntryPatch, ProviderLookup, ProviderSnapshot
    from lexipy.domain.ports.persistence import EntrySelection

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def make_entry(lemma: str = "abbiegen", pos: str = "V", **fields: object) -> Entry:
    """Create an entry with an identifier and the given field values."""

    fields.setdefault("id", 1)
    return Entry(lemma=lemma, pos=pos, **fields)  # type: ignore[arg-type]


def fixed_clock(moment: datetime = FIXED_NOW) -> Callable[[], datetime]:
    def clock() -> datetime:
        return moment

    return clock


@dataclass
class FakeProvider:
    """Provider double returning a canned lookup, ``None`` or raising an exception."""

    id: str
    label: str
    source: str
    result: ProviderLookup | Exception | None = None
    reason: str | None = None
    delay: float = 0.0
    calls: list[tuple[str, str | None]] = field(default_factory=list)

    def unavailable_reason(self) -> str | None:
        return self.reason

    async def lookup(self, lemma: str, pos: str | None = None) -> ProviderLookup | None:
        self.calls.append((lemma, pos))
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeEntryRepository:
    """In-memory entry store keyed by identifier."""

    def __init__(self, initial: Iterable[Entry] = ()) -> None:
        self.items: dict[int, Entry] = {}
        self.patches: list[tuple[int, EntryPatch]] = []
        self.fail_on_patch = False
        for entry in initial:
            self.add(entry)

    def add(self, entry: Entry) -> None:
        if entry.id is None:
            entry.id = max(self.items, default=0) + 1
        self.items[entry.id] = entry

    def get(self, entry_id: int) -> Entry | None:
        return self.items.get(entry_id)

    def select_candidates(self, selection: EntrySelection) -> list[Entry]:
        selected: list[Entry] = []
        for entry_id in sorted(self.items):
            entry = self.items[entry_id]
            if selection.mode is SelectionMode.NON_CANONICAL and entry.canonical:
                continue
            if selection.mode is SelectionMode.CANONICAL and not entry.canonical:
                continue
            if selection.only_incomplete and entry.complete:
                continue
            if selection.pos_filters and entry.pos not in selection.pos_filters:
                continue
            selected.append(entry)
        selected = selected[selection.offset :]
        return selected if selection.limit is None else selected[: selection.limit]

    def apply_patch(self, entry_id: int, patch: EntryPatch) -> Entry:
        if self.fail_on_patch:
            raise PersistenceError(f"Could not update entry {entry_id}")
        unknown = set(patch).difference(PATCHABLE_FIELDS)
        if unknown:
            raise KeyError(", ".join(sorted(unknown)))
        entry = self.items[entry_id]
        self.patches.append((entry_id, dict(patch)))
        for name, value in patch.items():
            setattr(entry, name, value)
        return entry


class FakeSnapshotRepository:
    """Append-only in-memory snapshot store."""

    def __init__(self) -> None:
        self.items: list[ProviderSnapshot] = []

    def add(self, snapshot: ProviderSnapshot) -> None:
        snapshot.id = len(self.items) + 1
        self.items.append(snapshot)

    def latest_before(self, snapshot: ProviderSnapshot) -> ProviderSnapshot | None:
        earlier = [
            item
            for item in self.items
            if item.entry_id == snapshot.entry_id
            and item.provider_id == snapshot.provider_id
            and item.id is not None
            and snapshot.id is not None
            and item.id < snapshot.id
        ]
        if not earlier:
            return None
        return max(earlier, key=lambda item: (item.collected_at, item.id or 0))

    def list_for_entry(self, entry_id: int) -> list[ProviderSnapshot]:
        return [item for item in self.items if item.entry_id == entry_id]


@dataclass(slots=True)
class FakeEnrichmentRepositories:
    entries: FakeEntryRepository
    snapshots: FakeSnapshotRepository


class FakeEnrichmentUnitOfWork:
    """Unit of work sharing one set of in-memory repositories across instances."""

    def __init__(self, repositories: FakeEnrichmentRepositories) -> None:
        self.repositories = repositories
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self) -> FakeEnrichmentUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: object | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeUnitOfWorkFactory:
    """Callable handing out units of work over the same repositories."""

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self.repositories = FakeEnrichmentRepositories(
            entries=FakeEntryRepository(entries), snapshots=FakeSnapshotRepository()
        )
        self.created: list[FakeEnrichmentUnitOfWork] = []

    def __call__(self) -> FakeEnrichmentUnitOfWork:
        uow = FakeEnrichmentUnitOfWork(self.repositories)
        self.created.append(uow)
        return uow

    @property
    def commits(self) -> int:
        return sum(uow.commits for uow in self.created)


class FakeFileStore:
    """Snapshot file store recording persisted snapshots; can fail for chosen providers."""

    def __init__(self, *, fail_for: Iterable[str] = ()) -> None:
        self.persisted: list[ProviderSnapshot] = []
        self.fail_for = set(fail_for)

    def persist(self, snapshot: ProviderSnapshot) -> Path:
        if snapshot.provider_id in self.fail_for:
            raise SnapshotFileError(f"disk full for {snapshot.provider_id}")
        self.persisted.append(snapshot)
        return Path(snapshot.pos) / f"{snapshot.provider_id}.json"


class FakeArtifactWriter:
    """Run artifact writer keeping backups and reports in memory."""

    def __init__(self) -> None:
        self.backups: list[list[dict[str, object]]] = []
        self.reports: list[dict[str, object]] = []

    def write_backup(self, entries: Sequence[Entry], *, created_at: datetime) -> Path:
        _ = created_at
        self.backups.append([entry.to_payload() for entry in entries])
        return Path(f"backup-{len(self.backups)}.json")

    def write_report(self, report: Mapping[str, object], *, generated_at: datetime) -> Path:
        _ = generated_at
        self.reports.append(dict(report))
        return Path(f"report-{len(self.reports)}.json")


class RecordingMirror:
    """Snapshot mirror that records uploads, optionally failing every call."""

    def __init__(self, *, fail: bool = False) -> None:
        self.uploads: dict[str, bytes] = {}
        self.fail = fail

    def upload(self, relative_path: str, data: bytes) -> None:
        if self.fail:
            raise RuntimeError("bucket unavailable")
        self.uploads[relative_path] = data


if TYPE_CHECKING:
    from lexipy.domain.ports.persistence import EntryRepository, SnapshotRepository
    from lexipy.domain.ports.providers import ProviderAdapter
    from lexipy.domain.ports.storage import RunArtifactWriter, SnapshotFileStore, SnapshotMirror

    _check_entries: EntryRepository = FakeEntryRepository()
    _check_snapshots: SnapshotRepository = FakeSnapshotRepository()
    _check_provider: ProviderAdapter = FakeProvider(id="x", label="X", source="x")
    _check_store: SnapshotFileStore = FakeFileStore()
    _check_artifacts: RunArtifactWriter = FakeArtifactWriter()
    _check_mirror: SnapshotMirror = RecordingMirror()
