from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from lexipy import main as main_module
from lexipy.adapters.provider_files import MirrorSyncResult
from lexipy.config import PipelineConfig
from lexipy.domain.model import ProviderId, SelectionMode
from tests.helpers.environment import PIPELINE_ENV


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in PIPELINE_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def captured_configs(monkeypatch: pytest.MonkeyPatch) -> list[PipelineConfig]:
    captured: list[PipelineConfig] = []

    def fake_run(config: PipelineConfig) -> SimpleNamespace:
        captured.append(config)
        return SimpleNamespace(report_path=None)

    monkeypatch.setattr(main_module, "run_enrichment", fake_run)
    return captured


def test_enrich_defaults(captured_configs: list[PipelineConfig]) -> None:
    main_module.main(["enrich"])

    (config,) = captured_configs
    assert config.apply is False
    assert config.limit == 50
    assert config.mode is SelectionMode.NON_CANONICAL


def test_enrich_with_flags(captured_configs: list[PipelineConfig]) -> None:
    main_module.main(
        [
            "enrich",
            "--apply",
            "--limit",
            "10",
            "--mode",
            "all",
            "--no-only-incomplete",
            "--delay-ms",
            "0",
            "--output-dir",
            "reports",
            "--ai",
            "--no-wiktextract",
            "--providers",
            "mymemory,tatoeba",
            "--pos",
            "verb,nomen",
        ]
    )

    (config,) = captured_configs
    assert config.apply is True
    assert config.dry_run is False
    assert config.limit == 10
    assert config.mode is SelectionMode.ALL
    assert config.only_incomplete is False
    assert config.delay_ms == 0
    assert config.output_dir == Path("reports")
    assert config.pos_filters == ("V", "N")
    assert config.enabled_providers() == (
        ProviderId.MYMEMORY,
        ProviderId.TATOEBA,
        ProviderId.OPENAI,
    )


@pytest.mark.parametrize(
    "argv",
    [
        ["enrich", "--mode", "bogus"],
        ["enrich", "--limit", "-1"],
        ["enrich", "--providers", "leo"],
    ],
)
def test_invalid_options_exit_with_usage_error(
    captured_configs: list[PipelineConfig], argv: list[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(argv)

    assert excinfo.value.code == 2
    assert captured_configs == []


def test_run_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_run(config: PipelineConfig) -> None:
        raise RuntimeError(f"database unavailable for {config.limit} entries")

    monkeypatch.setattr(main_module, "run_enrichment", failing_run)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["enrich"])

    assert excinfo.value.code == 1


def test_mirror_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_mirror() -> MirrorSyncResult:
        calls.append("mirror")
        return MirrorSyncResult(total_files=1, uploaded=0, failed=(("v/x.json", "boom"),))

    monkeypatch.setattr(main_module, "mirror_provider_files", fake_mirror)

    main_module.main(["mirror"])

    assert calls == ["mirror"]
