"""SQLAlchemy mapping metadata for lexical entries and provider snapshots."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from lexipy.domain.model import Entry, ProviderSnapshot

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

word_table = Table(
    "words",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("lemma", String, nullable=False),
    Column("pos", String(16), nullable=False),
    Column("canonical", Boolean, nullable=False, default=False),
    Column("english", Text, nullable=True),
    Column("example_de", Text, nullable=True),
    Column("example_en", Text, nullable=True),
    Column("gender", String(16), nullable=True),
    Column("plural", String, nullable=True),
    Column("praeteritum", String, nullable=True),
    Column("partizip_ii", String, nullable=True),
    Column("perfekt", String, nullable=True),
    Column("aux", String(16), nullable=True),
    Column("comparative", String, nullable=True),
    Column("superlative", String, nullable=True),
    Column("sources_csv", Text, nullable=True),
    Column("translations", JSON, nullable=True),
    Column("examples", JSON, nullable=True),
    Column("pos_attributes", JSON, nullable=True),
    Column("complete", Boolean, nullable=False, default=False),
    Column("enrichment_applied_at", UTCDateTime(), nullable=True),
    Column("enrichment_method", String(32), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("lemma", "pos", name="uq_words_lemma_pos"),
    Index("ix_words_pos", "pos"),
)

provider_snapshot_table = Table(
    "enrichment_provider_snapshots",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "word_id",
        Integer,
        ForeignKey("words.id", ondelete="CASCADE"),
        key="entry_id",
        nullable=False,
    ),
    Column("lemma", String, nullable=False),
    Column("pos", String(16), nullable=False),
    Column("provider_id", String(32), nullable=False),
    Column("provider_label", String, nullable=False),
    Column("status", String(16), nullable=False),
    Column("error", Text, nullable=True),
    Column("trigger", String(16), nullable=False),
    Column("mode", String(16), nullable=False),
    Column("translations", JSON, nullable=True),
    Column("examples", JSON, nullable=True),
    Column("synonyms", JSON, nullable=True),
    Column("english_hints", JSON, nullable=True),
    Column("verb_forms", JSON, nullable=True),
    Column("noun_forms", JSON, nullable=True),
    Column("adjective_forms", JSON, nullable=True),
    Column("preposition_attributes", JSON, nullable=True),
    Column("raw_payload", JSON, nullable=True),
    Column("collected_at", UTCDateTime(), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_enrichment_provider_snapshots_word_provider", "entry_id", "provider_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Entry, word_table)
    mapper_registry.map_imperatively(ProviderSnapshot, provider_snapshot_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
