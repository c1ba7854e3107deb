"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from lexipy.adapters.sqlalchemy.mappings import provider_snapshot_table, word_table
from lexipy.domain.errors import PersistenceError
from lexipy.domain.model import PATCHABLE_FIELDS, Entry, ProviderSnapshot, SelectionMode

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from lexipy.domain.model import EntryPatch
    from lexipy.domain.ports.persistence import EntrySelection


class SqlAlchemyEntryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entry: Entry) -> None:
        self.session.add(entry)
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not store entry {entry.lemma!r}: {exc}") from exc

    def get(self, entry_id: int) -> Entry | None:
        return self.session.get(Entry, entry_id)

    def _selection_statement(self, selection: EntrySelection) -> Select[tuple[Entry]]:
        stmt = select(Entry)
        match selection.mode:
            case SelectionMode.NON_CANONICAL:
                stmt = stmt.where(word_table.c.canonical.is_(False))
            case SelectionMode.CANONICAL:
                stmt = stmt.where(word_table.c.canonical.is_(True))
            case SelectionMode.ALL:
                pass
        if selection.only_incomplete:
            stmt = stmt.where(word_table.c.complete.is_(False))
        if selection.pos_filters:
            stmt = stmt.where(word_table.c.pos.in_(selection.pos_filters))
        stmt = stmt.order_by(word_table.c.id)
        if selection.offset:
            stmt = stmt.offset(selection.offset)
        if selection.limit is not None:
            stmt = stmt.limit(selection.limit)
        return stmt

    def select_candidates(self, selection: EntrySelection) -> list[Entry]:
        return list(self.session.execute(self._selection_statement(selection)).scalars())

    def apply_patch(self, entry_id: int, patch: EntryPatch) -> Entry:
        unknown = set(patch).difference(PATCHABLE_FIELDS)
        if unknown:
            raise KeyError(f"Entry fields cannot be patched: {', '.join(sorted(unknown))}")
        entry = self.get(entry_id)
        if entry is None:
            raise PersistenceError(f"Entry {entry_id} does not exist")
        for name, value in patch.items():
            setattr(entry, name, value)
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not update entry {entry_id}: {exc}") from exc
        return entry


class SqlAlchemySnapshotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, snapshot: ProviderSnapshot) -> None:
        self.session.add(snapshot)
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Could not store {snapshot.provider_id} snapshot for {snapshot.lemma!r}: {exc}"
            ) from exc

    def latest_before(self, snapshot: ProviderSnapshot) -> ProviderSnapshot | None:
        columns = provider_snapshot_table.c
        stmt = (
            select(ProviderSnapshot)
            .where(columns.entry_id == snapshot.entry_id)
            .where(columns.provider_id == snapshot.provider_id)
        )
        if snapshot.id is not None:
            stmt = stmt.where(columns.id < snapshot.id)
        stmt = stmt.order_by(columns.collected_at.desc(), columns.id.desc()).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_entry(self, entry_id: int) -> list[ProviderSnapshot]:
        columns = provider_snapshot_table.c
        stmt = (
            select(ProviderSnapshot)
            .where(columns.entry_id == entry_id)
            .order_by(columns.collected_at, columns.id)
        )
        return list(self.session.execute(stmt).scalars())
