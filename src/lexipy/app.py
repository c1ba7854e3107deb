"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from lexipy.adapters.kaikki import KaikkiProvider
from lexipy.adapters.mymemory import MyMemoryProvider
from lexipy.adapters.openai import OpenAIProvider
from lexipy.adapters.openthesaurus import OpenThesaurusProvider
from lexipy.adapters.provider_files import MirrorSyncResult, ProviderFileStore, mirror_directory
from lexipy.adapters.run_files import RunFileWriter
from lexipy.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyEnrichmentUnitOfWork,
    is_started,
    startup,
)
from lexipy.adapters.supabase_storage import SupabaseStorageMirror
from lexipy.adapters.tatoeba import TatoebaProvider
from lexipy.config import (
    get_enrichment_dir,
    get_openai_config,
    get_pipeline_config,
    get_supabase_mirror_config,
    require_supabase_mirror_config,
)
from lexipy.domain.enrichment.collector import SuggestionCollector
from lexipy.domain.enrichment.pipeline import EnrichmentPipeline, PipelineRun
from lexipy.domain.enrichment.snapshots import SnapshotRecorder
from lexipy.domain.ports.storage import NullMirror
from lexipy.domain.ports.unit_of_work import EnrichmentUnitOfWork

if TYPE_CHECKING:
    from pathlib import Path

    from lexipy.config import OpenAIConfig, PipelineConfig
    from lexipy.domain.ports.providers import ProviderAdapter
    from lexipy.domain.ports.storage import RunArtifactWriter, SnapshotFileStore, SnapshotMirror

UnitOfWorkFactory = Callable[[], EnrichmentUnitOfWork]


log = getLogger(__name__)


def build_providers(
    config: PipelineConfig, *, openai_config: OpenAIConfig | None = None
) -> list[ProviderAdapter]:
    """Every known provider in declaration order; the collector skips disabled ones."""

    return [
        KaikkiProvider(),
        MyMemoryProvider(),
        TatoebaProvider(),
        OpenThesaurusProvider(),
        OpenAIProvider(config=openai_config or get_openai_config(model=config.openai_model)),
    ]


def build_mirror() -> SnapshotMirror:
    mirror_config = get_supabase_mirror_config()
    if mirror_config is None:
        return NullMirror()
    log.info("Mirroring provider files to Supabase bucket %s", mirror_config.bucket)
    return SupabaseStorageMirror(mirror_config)


def build_file_store(
    *, root: Path | None = None, mirror: SnapshotMirror | None = None
) -> ProviderFileStore:
    return ProviderFileStore(root or get_enrichment_dir(), mirror=mirror or build_mirror())


def build_pipeline(
    config: PipelineConfig,
    *,
    providers: list[ProviderAdapter],
    unit_of_work_factory: UnitOfWorkFactory,
    file_store: SnapshotFileStore | None,
    artifacts: RunArtifactWriter | None,
) -> EnrichmentPipeline:
    collector = SuggestionCollector(
        providers, enabled=config.enabled_providers(), pos_filters=config.pos_filters
    )
    recorder = SnapshotRecorder(unit_of_work_factory=unit_of_work_factory, file_store=file_store)
    return EnrichmentPipeline(
        config=config,
        collector=collector,
        recorder=recorder,
        unit_of_work_factory=unit_of_work_factory,
        artifacts=artifacts,
    )


def run_enrichment(
    config: PipelineConfig | None = None,
    *,
    providers: list[ProviderAdapter] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    file_store: SnapshotFileStore | None = None,
    artifacts: RunArtifactWriter | None = None,
) -> PipelineRun:
    """Run one enrichment pass using the configured adapters."""

    effective_config = config or get_pipeline_config()
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyEnrichmentUnitOfWork

    pipeline = build_pipeline(
        effective_config,
        providers=providers if providers is not None else build_providers(effective_config),
        unit_of_work_factory=unit_of_work_factory,
        file_store=file_store if file_store is not None else build_file_store(),
        artifacts=artifacts
        or RunFileWriter(
            output_dir=effective_config.output_dir,
            backup_dir=effective_config.backup_dir,
            report_file=effective_config.report_file,
        ),
    )
    log.info(
        "Starting enrichment: limit=%s, mode=%s, apply=%s, overwrite=%s",
        effective_config.limit,
        effective_config.mode,
        effective_config.apply,
        effective_config.allow_overwrite,
    )
    return asyncio.run(pipeline.run())


def mirror_provider_files(
    *, root: Path | None = None, mirror: SnapshotMirror | None = None
) -> MirrorSyncResult:
    """Re-upload every stored provider file to the configured object store."""

    effective_mirror = mirror or SupabaseStorageMirror(require_supabase_mirror_config())
    result = mirror_directory(root or get_enrichment_dir(), effective_mirror)
    log.info(
        "Finished mirroring: total=%s, uploaded=%s, failed=%s",
        result.total_files,
        result.uploaded,
        len(result.failed),
    )
    return result
