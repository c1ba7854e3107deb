"""Repository protocols for entries and provider snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lexipy.domain.model import SelectionMode

if TYPE_CHECKING:
    from lexipy.domain.model import Entry, EntryPatch, ProviderSnapshot


@dataclass(slots=True, frozen=True, kw_only=True)
class EntrySelection:
    """Filters for choosing which entries a run processes."""

    mode: SelectionMode = SelectionMode.NON_CANONICAL
    only_incomplete: bool = True
    pos_filters: tuple[str, ...] = field(default_factory=tuple)
    limit: int | None = 50
    offset: int = 0


@runtime_checkable
class EntryRepository(Protocol):
    def add(self, entry: Entry) -> None: ...

    def get(self, entry_id: int) -> Entry | None: ...

    def select_candidates(self, selection: EntrySelection) -> list[Entry]: ...

    def apply_patch(self, entry_id: int, patch: EntryPatch) -> Entry:
        """Write ``patch`` onto the stored entry; raises if the entry does not exist."""
        ...


@runtime_checkable
class SnapshotRepository(Protocol):
    def add(self, snapshot: ProviderSnapshot) -> None:
        """Append ``snapshot``; assigns its identifier."""
        ...

    def latest_before(self, snapshot: ProviderSnapshot) -> ProviderSnapshot | None:
        """Most recent snapshot for the same (entry, provider) pair strictly before ``snapshot``."""
        ...

    def list_for_entry(self, entry_id: int) -> list[ProviderSnapshot]: ...
