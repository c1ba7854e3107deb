from __future__ import annotations

import json
from typing import TYPE_CHECKING

from lexipy.adapters.provider_files import ProviderFileStore
from lexipy.app import mirror_provider_files, run_enrichment
from lexipy.config import PipelineConfig
from lexipy.domain.model import (
    Entry,
    ExampleCandidate,
    ProviderId,
    ProviderLookup,
    TranslationCandidate,
    VerbFormSuggestion,
)
from tests.helpers.enrichment import FakeProvider, RecordingMirror, fixed_clock

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from lexipy.adapters.sqlalchemy import SqlAlchemyEnrichmentUnitOfWork


def _providers() -> list[FakeProvider]:
    kaikki = FakeProvider(
        id=ProviderId.WIKTEXTRACT,
        label="Wiktextract",
        source="kaikki.org",
        result=ProviderLookup(
            translations=[TranslationCandidate(value="to turn off", source="kaikki.org")],
            pos_suggestions=[
                VerbFormSuggestion(
                    source="kaikki.org",
                    praeteritum="bog ab",
                    partizip_ii="abgebogen",
                    auxiliaries=("sein",),
                )
            ],
        ),
    )
    tatoeba = FakeProvider(
        id=ProviderId.TATOEBA,
        label="Tatoeba",
        source="tatoeba.org",
        result=ProviderLookup(
            examples=[
                ExampleCandidate(
                    source="tatoeba.org",
                    example_de="Hier musst du abbiegen.",
                    example_en="You have to turn here.",
                )
            ]
        ),
    )
    return [kaikki, tatoeba]


def test_apply_run_updates_database_and_provider_files(
    sqlite_unit_of_work: Callable[[], SqlAlchemyEnrichmentUnitOfWork], tmp_path: Path
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.entries.add(Entry(lemma="abbiegen", pos="V"))
        uow.commit()

    config = PipelineConfig(
        apply=True,
        delay_ms=0,
        output_dir=tmp_path / "reports",
        backup_dir=tmp_path / "backups",
        report_file="latest.json",
    )
    mirror = RecordingMirror()
    file_store = ProviderFileStore(tmp_path / "providers", mirror=mirror, clock=fixed_clock())

    run = run_enrichment(
        config,
        providers=_providers(),  # type: ignore[arg-type]
        unit_of_work_factory=sqlite_unit_of_work,
        file_store=file_store,
    )

    assert run.totals.applied == 1
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.entries.get(1)
        assert stored is not None
        assert stored.english == "to turn off"
        assert stored.praeteritum == "bog ab"
        assert stored.perfekt == "ist abgebogen"
        assert stored.example_en == "You have to turn here."
        assert stored.sources_csv == "tatoeba,wiktextract"
        assert stored.complete is True
        assert len(uow.repositories.snapshots.list_for_entry(1)) == 2

    report = json.loads((tmp_path / "reports" / "latest.json").read_text(encoding="utf-8"))
    assert report["totals"] == {"scanned": 1, "proposedUpdates": 1, "applied": 1}
    assert run.backup_path is not None
    assert run.backup_path.parent == tmp_path / "backups"
    assert sorted(mirror.uploads) == ["v/tatoeba.json", "v/wiktextract.json"]


def test_mirror_provider_files_uploads_existing_files(tmp_path: Path) -> None:
    target = tmp_path / "n" / "mymemory.json"
    target.parent.mkdir(parents=True)
    target.write_text("{}", encoding="utf-8")
    mirror = RecordingMirror()

    result = mirror_provider_files(root=tmp_path, mirror=mirror)

    assert result.uploaded == 1
    assert mirror.uploads == {"n/mymemory.json": b"{}"}
