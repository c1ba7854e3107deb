"""Snapshot recording: persist provider drafts and flag changes between runs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from lexipy.domain.errors import SnapshotFileError
from lexipy.domain.model import ProviderSnapshot, ProviderStatus, SnapshotTrigger

if TYPE_CHECKING:
    from collections.abc import Callable

    from lexipy.domain.model import Entry, SelectionMode
    from lexipy.domain.ports.storage import SnapshotFileStore
    from lexipy.domain.ports.unit_of_work import EnrichmentUnitOfWork

    from .collector import CollectionResult

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def canonicalize(value: object) -> object:
    """Recursively sort every array by a deterministic key so payloads compare by content."""

    if isinstance(value, dict):
        return {str(key): canonicalize(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        items = [canonicalize(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True, ensure_ascii=False))
    return value


def comparable_payload(snapshot: ProviderSnapshot) -> dict[str, object]:
    return {
        "status": snapshot.status,
        "error": snapshot.error,
        **{key: canonicalize(value or []) for key, value in snapshot.candidate_payload().items()},
    }


def snapshots_differ(current: ProviderSnapshot, previous: ProviderSnapshot | None) -> bool:
    if previous is None:
        return True
    return comparable_payload(current) != comparable_payload(previous)


@dataclass(slots=True, frozen=True, kw_only=True)
class SnapshotComparison:
    snapshot: ProviderSnapshot
    previous: ProviderSnapshot | None
    has_changes: bool


class SnapshotRecorder:
    """Append one snapshot per provider draft and mirror successful apply runs to files."""

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], EnrichmentUnitOfWork],
        file_store: SnapshotFileStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._file_store = file_store
        self._clock = clock

    def record(
        self,
        entry: Entry,
        collection: CollectionResult,
        *,
        trigger: SnapshotTrigger,
        mode: SelectionMode,
    ) -> list[SnapshotComparison]:
        if not collection.drafts:
            return []

        collected_at = self._clock()
        comparisons: list[SnapshotComparison] = []
        with self._unit_of_work_factory() as uow:
            snapshots = uow.repositories.snapshots
            for draft in collection.drafts:
                snapshot = ProviderSnapshot.from_draft(
                    draft, entry=entry, trigger=trigger, mode=mode, collected_at=collected_at
                )
                snapshots.add(snapshot)
                previous = snapshots.latest_before(snapshot)
                comparisons.append(
                    SnapshotComparison(
                        snapshot=snapshot,
                        previous=previous,
                        has_changes=snapshots_differ(snapshot, previous),
                    )
                )
            uow.commit()

        by_provider = {diag.id: diag for diag in collection.diagnostics}
        for comparison in comparisons:
            diagnostic = by_provider.get(comparison.snapshot.provider_id)
            if diagnostic is not None:
                diagnostic.snapshot_id = comparison.snapshot.id
                diagnostic.previous_snapshot_id = (
                    comparison.previous.id if comparison.previous is not None else None
                )
                diagnostic.has_changes = comparison.has_changes

        if trigger is SnapshotTrigger.APPLY and self._file_store is not None:
            _persist_files(self._file_store, comparisons, collection)
        return comparisons


def _persist_files(
    file_store: SnapshotFileStore,
    comparisons: list[SnapshotComparison],
    collection: CollectionResult,
) -> None:
    # file failures stay local to the provider that produced them
    for comparison in comparisons:
        snapshot = comparison.snapshot
        if snapshot.status != ProviderStatus.SUCCESS:
            continue
        try:
            file_store.persist(snapshot)
        except (SnapshotFileError, OSError) as exc:
            log.warning(
                "Could not persist %s snapshot for %r: %s",
                snapshot.provider_id,
                snapshot.lemma,
                exc,
            )
            collection.errors.append(f"{snapshot.provider_label} snapshot file: {exc}")
