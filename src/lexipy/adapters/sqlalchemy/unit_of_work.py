"""SQLAlchemy-backed unit of work for the enrichment pipeline.

The adapter keeps one engine per process. ``startup()`` binds it (running the
Alembic migrations first) and every :class:`SqlAlchemyEnrichmentUnitOfWork`
opens a fresh session from it.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lexipy.adapters.sqlalchemy.mappings import start_mappers
from lexipy.adapters.sqlalchemy.migrations import upgrade_head
from lexipy.adapters.sqlalchemy.repositories import (
    SqlAlchemyEntryRepository,
    SqlAlchemySnapshotRepository,
)
from lexipy.config.storage import get_database_uri
from lexipy.domain.errors import PersistenceError
from lexipy.domain.ports.unit_of_work import EnrichmentRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup()`` or started twice."""


class _Binding:
    __slots__ = ("engine", "sessions")

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "SQLAlchemy adapter not started; call "
                "lexipy.adapters.sqlalchemy.startup() before opening a unit of work."
            )
        return self.sessions()


_BINDING = _Binding()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create (or adopt) the engine, migrate it to head and bind the session factory."""

    if _BINDING.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind.")
    if engine is None:
        engine = create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=engine)
    _BINDING.bind(engine)
    log.debug("SQLAlchemy adapter bound to %s", engine.url.render_as_string(hide_password=True))


def is_started() -> bool:
    return _BINDING.engine is not None


def shutdown() -> None:
    """Dispose the bound engine and unbind the adapter."""

    if _BINDING.engine is not None:
        _BINDING.engine.dispose()
    _BINDING.bind(None)


class SqlAlchemyEnrichmentUnitOfWork:
    """Session-scoped transaction over the entry and snapshot repositories.

    Leaving the ``with`` block on an exception rolls back; nothing is committed
    implicitly.
    """

    def __init__(self) -> None:
        self._session: Session | None = None
        self._repositories: EnrichmentRepositories | None = None

    def __enter__(self) -> SqlAlchemyEnrichmentUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = _BINDING.open_session()
        self._session = session
        self._repositories = EnrichmentRepositories(
            entries=SqlAlchemyEntryRepository(session),
            snapshots=SqlAlchemySnapshotRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> EnrichmentRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from lexipy.domain.ports.unit_of_work import EnrichmentUnitOfWork

    _uow_check: EnrichmentUnitOfWork = SqlAlchemyEnrichmentUnitOfWork()
