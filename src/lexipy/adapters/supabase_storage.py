"""Supabase Storage mirror for provider snapshot files."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from supabase import Client, create_client

if TYPE_CHECKING:
    from lexipy.config.mirror import SupabaseMirrorConfig

log = getLogger(__name__)


class SupabaseStorageMirror:
    """Upload provider files into a Supabase Storage bucket, overwriting older copies."""

    def __init__(self, config: SupabaseMirrorConfig, *, client: Client | None = None) -> None:
        self._config = config
        self._client = client or create_client(config.url, config.key)

    @property
    def config(self) -> SupabaseMirrorConfig:
        return self._config

    def upload(self, relative_path: str, data: bytes) -> None:
        object_key = self._config.object_key(relative_path)
        self._client.storage.from_(self._config.bucket).upload(
            object_key,
            data,
            {"content-type": "application/json", "upsert": "true"},
        )
        log.debug("Mirrored %s to bucket %s", object_key, self._config.bucket)
