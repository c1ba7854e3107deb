"""Remote object-store mirror configuration (Supabase Storage)."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env, require_env_vars


@dataclass(frozen=True, slots=True)
class SupabaseMirrorConfig:
    url: str
    key: str
    bucket: str
    path_prefix: str = ""

    def object_key(self, relative_path: str) -> str:
        prefix = self.path_prefix.strip("/")
        relative = relative_path.lstrip("/")
        return f"{prefix}/{relative}" if prefix else relative


def _resolve_key() -> str | None:
    return optional_env("SUPABASE_SERVICE_ROLE_KEY") or optional_env("SUPABASE_SECRET_KEY")


def get_supabase_mirror_config() -> SupabaseMirrorConfig | None:
    """Return the mirror configuration, or ``None`` when the deployment has none."""

    url = optional_env("SUPABASE_URL")
    key = _resolve_key()
    bucket = optional_env("ENRICHMENT_SUPABASE_BUCKET")
    if not (url and key and bucket):
        return None
    return SupabaseMirrorConfig(
        url=url,
        key=key,
        bucket=bucket,
        path_prefix=optional_env("ENRICHMENT_SUPABASE_PATH_PREFIX") or "",
    )


def require_supabase_mirror_config() -> SupabaseMirrorConfig:
    names = ["SUPABASE_URL", "ENRICHMENT_SUPABASE_BUCKET"]
    key = _resolve_key()
    if key is None:
        names.append("SUPABASE_SERVICE_ROLE_KEY")
    values = require_env_vars(names)
    return SupabaseMirrorConfig(
        url=values["SUPABASE_URL"],
        key=key or "",
        bucket=values["ENRICHMENT_SUPABASE_BUCKET"],
        path_prefix=optional_env("ENRICHMENT_SUPABASE_PATH_PREFIX") or "",
    )
