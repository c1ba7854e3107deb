"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .mirror import (
    SupabaseMirrorConfig,
    get_supabase_mirror_config,
    require_supabase_mirror_config,
)
from .pipeline import PipelineConfig, get_pipeline_config
from .providers import OpenAIConfig, get_openai_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_enrichment_dir,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "OpenAIConfig",
    "PipelineConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SupabaseMirrorConfig",
    "configure_logging",
    "get_database_config",
    "get_enrichment_dir",
    "get_openai_config",
    "get_pipeline_config",
    "get_storage_config",
    "get_supabase_mirror_config",
    "require_env_vars",
    "require_supabase_mirror_config",
]
