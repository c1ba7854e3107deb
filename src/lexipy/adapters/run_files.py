"""Backup and report files written by an enrichment run."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime
    from pathlib import Path

    from lexipy.domain.model import Entry

log = getLogger(__name__)


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _write_json(path: Path, payload: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


class RunFileWriter:
    """Write ``words-backup-<ms>.json`` and ``report-<ms>.json`` (or a fixed report name)."""

    def __init__(
        self, *, output_dir: Path, backup_dir: Path, report_file: str | None = None
    ) -> None:
        self._output_dir = output_dir
        self._backup_dir = backup_dir
        self._report_file = report_file

    def backup_path(self, created_at: datetime) -> Path:
        return self._backup_dir / f"words-backup-{_epoch_ms(created_at)}.json"

    def report_path(self, generated_at: datetime) -> Path:
        name = self._report_file or f"report-{_epoch_ms(generated_at)}.json"
        return self._output_dir / name

    def write_backup(self, entries: Sequence[Entry], *, created_at: datetime) -> Path:
        path = _write_json(
            self.backup_path(created_at),
            {
                "createdAt": created_at.isoformat(),
                "count": len(entries),
                "entries": [entry.to_payload() for entry in entries],
            },
        )
        log.debug("Backed up %s entries to %s", len(entries), path)
        return path

    def write_report(self, report: Mapping[str, object], *, generated_at: datetime) -> Path:
        path = _write_json(self.report_path(generated_at), dict(report))
        log.debug("Report written to %s", path)
        return path
