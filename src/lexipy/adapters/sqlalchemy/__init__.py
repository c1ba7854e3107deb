"""SQLAlchemy adapter package for lexipy."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyEntryRepository, SqlAlchemySnapshotRepository
from .unit_of_work import (
    SqlAlchemyEnrichmentUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEnrichmentUnitOfWork",
    "SqlAlchemyEntryRepository",
    "SqlAlchemySnapshotRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
