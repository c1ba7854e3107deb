"""Per-provider JSON snapshot files laid out as ``<root>/<pos>/<provider>.json``.

Each file holds the latest successful snapshot of every lemma a provider has seen
for one part of speech. Files carry a ``schemaVersion``; older files are upgraded
on load by :func:`upgrade_provider_file`, which only reshapes file-level fields and
never touches stored lemma entries.

Writes replace the whole file atomically but assume a single writer: two runs
updating the same provider file concurrently can drop each other's lemmas.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from lexipy.domain.errors import SnapshotFileError
from lexipy.domain.model import BULK_ENRICHMENT_METHOD, SnapshotTrigger, provider_rank
from lexipy.domain.ports.storage import NullMirror

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from lexipy.domain.model import ProviderSnapshot
    from lexipy.domain.ports.storage import SnapshotMirror

log = getLogger(__name__)

CURRENT_SCHEMA_VERSION: Final[int] = 1
UNKNOWN_POS_SEGMENT: Final[str] = "unknown"

type ProviderFileDocument = dict[str, Any]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _iso(value: datetime) -> str:
    return value.isoformat()


def lemma_key(lemma: str) -> str:
    return lemma.strip().lower()


def provider_file_path(root: Path, provider_id: str, pos: str | None) -> Path:
    segment = pos.strip().lower() if pos and pos.strip() else UNKNOWN_POS_SEGMENT
    return root / segment / f"{provider_id.lower()}.json"


def new_provider_file(
    *, provider_id: str, provider_label: str | None, pos: str, now: datetime
) -> ProviderFileDocument:
    return {
        "schemaVersion": CURRENT_SCHEMA_VERSION,
        "providerId": provider_id,
        "providerLabel": provider_label,
        "pos": pos,
        "updatedAt": _iso(now),
        "entries": {},
        "meta": {"createdAt": _iso(now)},
    }


def _schema_version(document: ProviderFileDocument) -> int:
    version = document.get("schemaVersion")
    if isinstance(version, bool) or not isinstance(version, int):
        return 0
    return version


def _legacy_entries(items: list[object]) -> dict[str, object]:
    entries: dict[str, object] = {}
    for position, item in enumerate(items):
        if isinstance(item, dict) and isinstance(item.get("lemma"), str):
            entries[lemma_key(item["lemma"])] = item
        else:
            log.warning("Dropping legacy provider entry %d without a lemma: %.200r", position, item)
    return entries


def upgrade_provider_file(
    document: ProviderFileDocument, *, current_version: int, now: datetime
) -> ProviderFileDocument:
    """Return ``document`` reshaped for ``current_version``; the input is left untouched.

    Only file-level fields change: a missing version counts as ``0``, ``meta`` and
    ``entries`` of the wrong shape are replaced, and the previous version is recorded
    in ``meta.previousSchemaVersions``. Versions never move backwards.
    """

    version = _schema_version(document)
    meta = dict(document["meta"]) if isinstance(document.get("meta"), dict) else {}

    raw_entries = document.get("entries")
    if isinstance(raw_entries, dict):
        entries: dict[str, object] = dict(raw_entries)
    elif isinstance(raw_entries, list):
        entries = _legacy_entries(raw_entries)
    else:
        entries = {}

    if version < current_version:
        previous = meta.get("previousSchemaVersions")
        history = {
            value
            for value in (previous if isinstance(previous, list) else [])
            if isinstance(value, int) and not isinstance(value, bool)
        }
        history.add(version)
        meta["previousSchemaVersions"] = sorted(history)
        meta["lastUpgradedAt"] = _iso(now)

    return {
        **document,
        "schemaVersion": max(version, current_version),
        "entries": entries,
        "meta": meta,
    }


def provider_file_entry(snapshot: ProviderSnapshot) -> dict[str, object]:
    """Serialise one snapshot as the entry stored under its lemma key."""

    metadata: dict[str, object] = {
        "trigger": snapshot.trigger,
        "mode": snapshot.mode,
        "snapshotId": snapshot.id,
        "entryId": snapshot.entry_id,
        "createdAt": _iso(snapshot.created_at),
    }
    if snapshot.trigger == SnapshotTrigger.APPLY:
        metadata["enrichmentMethod"] = BULK_ENRICHMENT_METHOD
        metadata["appliedAt"] = _iso(snapshot.collected_at)

    return {
        "lemma": snapshot.lemma,
        "pos": snapshot.pos,
        "providerId": snapshot.provider_id,
        "providerLabel": snapshot.provider_label,
        "status": snapshot.status,
        "error": snapshot.error,
        "collectedAt": _iso(snapshot.collected_at),
        **snapshot.candidate_payload(),
        "rawPayload": snapshot.raw_payload,
        "entryId": snapshot.entry_id,
        "metadata": metadata,
    }


def read_provider_file(path: Path) -> ProviderFileDocument | None:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise SnapshotFileError(f"{path} is not valid UTF-8: {exc}") from exc
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotFileError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise SnapshotFileError(f"{path} does not contain a JSON object")
    return document


def _dump(document: ProviderFileDocument) -> bytes:
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def _write_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temporary = path.with_name(f".{path.name}.tmp")
    temporary.write_bytes(data)
    os.replace(temporary, path)


def iter_provider_files(root: Path) -> Iterator[Path]:
    if not root.is_dir():
        return
    yield from sorted(path for path in root.rglob("*.json") if path.is_file())


@dataclass(slots=True, kw_only=True)
class PersistedWordData:
    """Every provider entry stored for one ``(lemma, pos)`` pair."""

    lemma: str
    pos: str
    providers: list[dict[str, Any]] = field(default_factory=list)
    updated_at: str | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "lemma": self.lemma,
            "pos": self.pos,
            "providers": self.providers,
            "updatedAt": self.updated_at,
        }


def _latest(*values: object) -> str | None:
    parsed: list[tuple[datetime, str]] = []
    for value in values:
        if not isinstance(value, str):
            continue
        try:
            moment = datetime.fromisoformat(value)
        except ValueError:
            continue
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        parsed.append((moment, value))
    return max(parsed)[1] if parsed else None


def _provider_sort_key(entry: dict[str, Any]) -> tuple[int, str]:
    provider_id = str(entry.get("providerId") or "").lower()
    label = str(entry.get("providerLabel") or provider_id)
    return provider_rank(provider_id), label


@dataclass(slots=True, frozen=True, kw_only=True)
class MirrorSyncResult:
    total_files: int
    uploaded: int
    failed: tuple[tuple[str, str], ...] = ()


class ProviderFileStore:
    """Read-modify-write store for provider snapshot files."""

    def __init__(
        self,
        root: Path,
        *,
        mirror: SnapshotMirror | None = None,
        current_version: int = CURRENT_SCHEMA_VERSION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._root = root
        self._mirror = mirror or NullMirror()
        self._current_version = current_version
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, provider_id: str, pos: str | None) -> Path:
        return provider_file_path(self._root, provider_id, pos)

    def load(self, path: Path) -> ProviderFileDocument | None:
        document = read_provider_file(path)
        if document is None:
            return None
        return upgrade_provider_file(
            document, current_version=self._current_version, now=self._clock()
        )

    def persist(self, snapshot: ProviderSnapshot) -> Path:
        """Upsert ``snapshot`` under its lemma key and write the file back."""

        now = self._clock()
        path = self.path_for(snapshot.provider_id, snapshot.pos)
        document = self.load(path) or new_provider_file(
            provider_id=snapshot.provider_id,
            provider_label=snapshot.provider_label,
            pos=snapshot.pos,
            now=now,
        )
        document.setdefault("providerId", snapshot.provider_id)
        document.setdefault("pos", snapshot.pos)
        document["meta"].setdefault("createdAt", _iso(now))
        document["entries"][lemma_key(snapshot.lemma)] = provider_file_entry(snapshot)
        document["providerLabel"] = snapshot.provider_label or document.get("providerLabel")
        document["updatedAt"] = _iso(now)

        data = _dump(document)
        try:
            _write_atomic(path, data)
        except OSError as exc:
            raise SnapshotFileError(f"Could not write {path}: {exc}") from exc
        log.debug("Persisted %s snapshot for %r to %s", snapshot.provider_id, snapshot.lemma, path)

        self._mirror_file(path, data)
        return path

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._root).as_posix()

    def _mirror_file(self, path: Path, data: bytes) -> None:
        try:
            self._mirror.upload(self._relative(path), data)
        except Exception as exc:  # noqa: BLE001
            log.warning("Mirror upload failed for %s: %s", path, exc)

    def load_persisted_entries(
        self, *, lemma: str | None = None, pos: str | None = None
    ) -> list[PersistedWordData]:
        """Group every stored provider entry by ``(lemma, pos)``, providers in priority order."""

        wanted_lemma = lemma_key(lemma) if lemma else None
        wanted_pos = pos.lower() if pos else None
        results: dict[str, PersistedWordData] = {}

        for path in iter_provider_files(self._root):
            document = self.load(path)
            if document is None:
                continue
            for key, value in document["entries"].items():
                if not isinstance(value, dict):
                    continue
                entry_lemma = str(value.get("lemma") or key)
                entry_pos = value.get("pos") or document.get("pos")
                if not entry_lemma or not entry_pos:
                    continue
                if wanted_lemma is not None and lemma_key(entry_lemma) != wanted_lemma:
                    continue
                if wanted_pos is not None and str(entry_pos).lower() != wanted_pos:
                    continue

                entry = {
                    **value,
                    "providerId": value.get("providerId") or document.get("providerId"),
                    "providerLabel": value.get("providerLabel") or document.get("providerLabel"),
                    "collectedAt": value.get("collectedAt") or document.get("updatedAt"),
                }
                raw_metadata = value.get("metadata")
                metadata = dict(raw_metadata) if isinstance(raw_metadata, dict) else {}
                metadata.setdefault("schemaVersion", document["schemaVersion"])
                entry["metadata"] = metadata

                group_key = f"{lemma_key(entry_lemma)}::{str(entry_pos).lower()}"
                group = results.get(group_key)
                if group is None:
                    group = results[group_key] = PersistedWordData(
                        lemma=entry_lemma, pos=str(entry_pos)
                    )
                group.providers.append(entry)
                group.updated_at = _latest(
                    group.updated_at, entry.get("collectedAt"), document.get("updatedAt")
                )

        for group in results.values():
            group.providers.sort(key=_provider_sort_key)
        return list(results.values())

    def mirror_directory(self) -> MirrorSyncResult:
        return mirror_directory(self._root, self._mirror)


def mirror_directory(root: Path, mirror: SnapshotMirror) -> MirrorSyncResult:
    """Re-upload every provider file under ``root``; failures are collected, not raised."""

    files = list(iter_provider_files(root))
    uploaded = 0
    failed: list[tuple[str, str]] = []
    for path in files:
        relative = path.relative_to(root).as_posix()
        try:
            mirror.upload(relative, path.read_bytes())
        except Exception as exc:  # noqa: BLE001
            log.warning("Mirror upload failed for %s: %s", relative, exc)
            failed.append((relative, str(exc)))
            continue
        uploaded += 1
    log.info("Mirrored %s of %s provider files", uploaded, len(files))
    return MirrorSyncResult(total_files=len(files), uploaded=uploaded, failed=tuple(failed))
