from __future__ import annotations

import json
from typing import TYPE_CHECKING

from lexipy.adapters.run_files import RunFileWriter
from tests.helpers.enrichment import FIXED_NOW, make_entry

if TYPE_CHECKING:
    from pathlib import Path

FIXED_MS = int(FIXED_NOW.timestamp() * 1000)


def test_backup_holds_entry_payloads(tmp_path: Path) -> None:
    writer = RunFileWriter(output_dir=tmp_path / "out", backup_dir=tmp_path / "backups")

    path = writer.write_backup(
        [make_entry(), make_entry(lemma="Haus", pos="N", id=2)], created_at=FIXED_NOW
    )

    assert path == tmp_path / "backups" / f"words-backup-{FIXED_MS}.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["createdAt"] == FIXED_NOW.isoformat()
    assert payload["count"] == 2
    assert [entry["lemma"] for entry in payload["entries"]] == ["abbiegen", "Haus"]


def test_report_uses_timestamped_name(tmp_path: Path) -> None:
    writer = RunFileWriter(output_dir=tmp_path, backup_dir=tmp_path)

    path = writer.write_report({"totals": {"scanned": 0}}, generated_at=FIXED_NOW)

    assert path.name == f"report-{FIXED_MS}.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"totals": {"scanned": 0}}


def test_report_file_name_can_be_fixed(tmp_path: Path) -> None:
    writer = RunFileWriter(output_dir=tmp_path, backup_dir=tmp_path, report_file="latest.json")

    first = writer.write_report({"run": 1}, generated_at=FIXED_NOW)
    second = writer.write_report({"run": 2}, generated_at=FIXED_NOW)

    assert first == second == tmp_path / "latest.json"
    assert json.loads(second.read_text(encoding="utf-8")) == {"run": 2}
