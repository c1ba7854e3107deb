"""Pipeline runner: select entries, enrich them one at a time, apply and report."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from lexipy.domain.model import (
    BULK_ENRICHMENT_METHOD,
    EntrySummary,
    FieldUpdate,
    PipelineTotals,
    describe_suggestion,
)
from lexipy.domain.ports.persistence import EntrySelection

from .completeness import detect_missing_fields
from .merge import MergeResult, compute_patch

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from lexipy.config.pipeline import PipelineConfig
    from lexipy.domain.model import Entry
    from lexipy.domain.ports.storage import RunArtifactWriter
    from lexipy.domain.ports.unit_of_work import EnrichmentUnitOfWork

    from .collector import CollectionResult, SuggestionCollector
    from .snapshots import SnapshotRecorder

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class EntryEnrichment:
    entry: Entry
    collection: CollectionResult
    merge: MergeResult
    summary: EntrySummary


@dataclass(slots=True, kw_only=True)
class PipelineRun:
    generated_at: datetime
    totals: PipelineTotals = field(default_factory=PipelineTotals)
    summaries: list[EntrySummary] = field(default_factory=list)
    backup_path: Path | None = None
    report_path: Path | None = None

    def report(self, config: PipelineConfig) -> dict[str, object]:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "config": config.to_report(),
            "totals": self.totals.to_payload(),
            "entries": [summary.to_payload() for summary in self.summaries],
        }


def build_summary(
    entry: Entry, collection: CollectionResult, merge: MergeResult
) -> EntrySummary:
    bundle = collection.bundle
    return EntrySummary(
        id=entry.id,
        lemma=entry.lemma,
        pos=entry.pos,
        missing_fields=detect_missing_fields(entry),
        translation=merge.translation,
        translations=list(bundle.translations),
        english_hints=list(bundle.english_hints),
        synonyms=list(bundle.synonyms),
        example=merge.example,
        examples=list(bundle.examples),
        pos_suggestions=list(bundle.pos_suggestions),
        pos_attributes=merge.pos_attributes,
        updates=list(merge.updates),
        sources=list(bundle.sources),
        errors=list(collection.errors),
        ai_used=collection.ai_used,
        provider_diagnostics=list(collection.diagnostics),
    )


class EnrichmentPipeline:
    """Process selected entries strictly sequentially.

    Each entry runs collector, snapshot recorder and merge engine in turn. In apply
    mode every patch is committed in its own transaction, so an error halts the run
    at that entry while earlier entries stay committed.
    """

    def __init__(
        self,
        *,
        config: PipelineConfig,
        collector: SuggestionCollector,
        recorder: SnapshotRecorder,
        unit_of_work_factory: Callable[[], EnrichmentUnitOfWork],
        artifacts: RunArtifactWriter | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._collector = collector
        self._recorder = recorder
        self._unit_of_work_factory = unit_of_work_factory
        self._artifacts = artifacts
        self._clock = clock
        self._sleep = sleep

    def select_entries(self) -> list[Entry]:
        selection = EntrySelection(
            mode=self.config.mode,
            only_incomplete=self.config.only_incomplete,
            pos_filters=self.config.pos_filters,
            limit=self.config.limit,
        )
        with self._unit_of_work_factory() as uow:
            return uow.repositories.entries.select_candidates(selection)

    async def enrich_entry(self, entry: Entry) -> EntryEnrichment:
        collection = await self._collector.collect(entry)
        self._recorder.record(
            entry, collection, trigger=self.config.trigger, mode=self.config.mode
        )
        merge = compute_patch(
            entry, collection.bundle, allow_overwrite=self.config.allow_overwrite
        )
        summary = build_summary(entry, collection, merge)
        for suggestion in collection.bundle.pos_suggestions:
            description = describe_suggestion(suggestion)
            log.debug("%r %s suggestion: %s", entry.lemma, suggestion.kind, description)
        return EntryEnrichment(entry=entry, collection=collection, merge=merge, summary=summary)

    def apply(self, enrichment: EntryEnrichment) -> bool:
        merge = enrichment.merge
        if not merge.patch:
            return False
        entry = enrichment.entry
        if entry.id is None:
            raise ValueError(f"Entry {entry.lemma!r} has not been persisted")

        applied_at = self._clock()
        patch = dict(merge.patch)
        stamps = {
            "enrichment_applied_at": applied_at,
            "enrichment_method": BULK_ENRICHMENT_METHOD,
        }
        for name, value in stamps.items():
            patch[name] = value
            enrichment.summary.updates.append(
                FieldUpdate(
                    field=name, previous=getattr(entry, name), next=value, source="pipeline"
                )
            )
        patch["updated_at"] = applied_at

        with self._unit_of_work_factory() as uow:
            uow.repositories.entries.apply_patch(entry.id, patch)
            uow.commit()
        entry.apply(patch)
        enrichment.summary.applied = True
        return True

    async def run(self) -> PipelineRun:
        config = self.config
        run = PipelineRun(generated_at=self._clock())
        entries = self.select_entries()
        run.totals.scanned = len(entries)
        log.info(
            "Selected %s entries (mode=%s, apply=%s, providers=%s)",
            len(entries),
            config.mode,
            config.apply,
            ",".join(config.enabled_providers()),
        )

        if config.apply and config.backup and entries and self._artifacts is not None:
            run.backup_path = self._artifacts.write_backup(entries, created_at=self._clock())
            log.info("Wrote backup of %s entries to %s", len(entries), run.backup_path)

        try:
            for index, entry in enumerate(entries):
                if index and config.delay_ms:
                    await self._sleep(config.delay_ms / 1000)
                enrichment = await self.enrich_entry(entry)
                run.summaries.append(enrichment.summary)
                if enrichment.merge.patch:
                    run.totals.proposed_updates += 1
                if config.apply and self.apply(enrichment):
                    run.totals.applied += 1
                log.info(
                    "%s (%s): %s updates%s%s",
                    entry.lemma,
                    entry.pos,
                    len(enrichment.merge.updates),
                    ", applied" if enrichment.summary.applied else "",
                    f", errors: {'; '.join(enrichment.summary.errors)}"
                    if enrichment.summary.errors
                    else "",
                )
        finally:
            if config.emit_report and self._artifacts is not None:
                run.report_path = self._artifacts.write_report(
                    run.report(config), generated_at=run.generated_at
                )
                log.info("Wrote enrichment report to %s", run.report_path)

        log.info(
            "Enrichment finished: scanned=%s, proposed=%s, applied=%s",
            run.totals.scanned,
            run.totals.proposed_updates,
            run.totals.applied,
        )
        return run
