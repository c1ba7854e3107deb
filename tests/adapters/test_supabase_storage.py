from __future__ import annotations

from dataclasses import dataclass, field

from lexipy.adapters.supabase_storage import SupabaseStorageMirror
from lexipy.config.mirror import SupabaseMirrorConfig


@dataclass
class _FakeBucket:
    name: str
    uploads: list[tuple[str, bytes, dict[str, str]]] = field(default_factory=list)

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads.append((path, file, file_options))


@dataclass
class _FakeStorage:
    buckets: dict[str, _FakeBucket] = field(default_factory=dict)

    def from_(self, bucket: str) -> _FakeBucket:
        return self.buckets.setdefault(bucket, _FakeBucket(bucket))


@dataclass
class _FakeClient:
    storage: _FakeStorage = field(default_factory=_FakeStorage)


def test_upload_writes_under_prefix_with_upsert() -> None:
    client = _FakeClient()
    config = SupabaseMirrorConfig(
        url="https://project.supabase.co",
        key="service-role",
        bucket="enrichment",
        path_prefix="/snapshots/",
    )
    mirror = SupabaseStorageMirror(config, client=client)  # type: ignore[arg-type]

    mirror.upload("v/wiktextract.json", b"{}")

    (upload,) = client.storage.buckets["enrichment"].uploads
    assert upload[0] == "snapshots/v/wiktextract.json"
    assert upload[1] == b"{}"
    assert upload[2] == {"content-type": "application/json", "upsert": "true"}


def test_object_key_without_prefix() -> None:
    config = SupabaseMirrorConfig(url="https://project.supabase.co", key="k", bucket="b")

    assert config.object_key("/n/tatoeba.json") == "n/tatoeba.json"
