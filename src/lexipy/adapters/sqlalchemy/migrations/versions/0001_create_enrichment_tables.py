"""Create words and enrichment provider snapshot tables.

Revision ID: 0001
Revises:
Create Date: 2025-01-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from lexipy.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "words",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lemma", sa.String(), nullable=False),
        sa.Column("pos", sa.String(length=16), nullable=False),
        sa.Column("canonical", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("english", sa.Text(), nullable=True),
        sa.Column("example_de", sa.Text(), nullable=True),
        sa.Column("example_en", sa.Text(), nullable=True),
        sa.Column("gender", sa.String(length=16), nullable=True),
        sa.Column("plural", sa.String(), nullable=True),
        sa.Column("praeteritum", sa.String(), nullable=True),
        sa.Column("partizip_ii", sa.String(), nullable=True),
        sa.Column("perfekt", sa.String(), nullable=True),
        sa.Column("aux", sa.String(length=16), nullable=True),
        sa.Column("comparative", sa.String(), nullable=True),
        sa.Column("superlative", sa.String(), nullable=True),
        sa.Column("sources_csv", sa.Text(), nullable=True),
        sa.Column("translations", sa.JSON(), nullable=True),
        sa.Column("examples", sa.JSON(), nullable=True),
        sa.Column("pos_attributes", sa.JSON(), nullable=True),
        sa.Column("complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("enrichment_applied_at", UTCDateTime(), nullable=True),
        sa.Column("enrichment_method", sa.String(length=32), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_words"),
        sa.UniqueConstraint("lemma", "pos", name="uq_words_lemma_pos"),
    )
    op.create_index("ix_words_pos", "words", ["pos"])

    op.create_table(
        "enrichment_provider_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("word_id", sa.Integer(), nullable=False),
        sa.Column("lemma", sa.String(), nullable=False),
        sa.Column("pos", sa.String(length=16), nullable=False),
        sa.Column("provider_id", sa.String(length=32), nullable=False),
        sa.Column("provider_label", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("trigger", sa.String(length=16), nullable=False),
        sa.Column("mode", sa.String(length=16), nullable=False),
        sa.Column("translations", sa.JSON(), nullable=True),
        sa.Column("examples", sa.JSON(), nullable=True),
        sa.Column("synonyms", sa.JSON(), nullable=True),
        sa.Column("english_hints", sa.JSON(), nullable=True),
        sa.Column("verb_forms", sa.JSON(), nullable=True),
        sa.Column("noun_forms", sa.JSON(), nullable=True),
        sa.Column("adjective_forms", sa.JSON(), nullable=True),
        sa.Column("preposition_attributes", sa.JSON(), nullable=True),
        sa.Column("raw_payload", sa.JSON(), nullable=True),
        sa.Column("collected_at", UTCDateTime(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_enrichment_provider_snapshots"),
        sa.ForeignKeyConstraint(
            ["word_id"],
            ["words.id"],
            name="fk_enrichment_provider_snapshots_word_id_words",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_enrichment_provider_snapshots_word_provider",
        "enrichment_provider_snapshots",
        ["word_id", "provider_id"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_enrichment_provider_snapshots_word_provider",
        table_name="enrichment_provider_snapshots",
    )
    op.drop_table("enrichment_provider_snapshots")
    op.drop_index("ix_words_pos", table_name="words")
    op.drop_table("words")
