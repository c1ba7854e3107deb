"""Run configuration for the enrichment pipeline."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Final

from lexipy.domain.enrichment.text import strip_diacritics
from lexipy.domain.model import (
    PROVIDER_PRIORITY,
    PartOfSpeech,
    ProviderId,
    SelectionMode,
    SnapshotTrigger,
)

from .env import env_bool, env_int, optional_env
from .errors import ConfigurationError
from .providers import DEFAULT_OPENAI_MODEL

DEFAULT_LIMIT: Final[int] = 50
DEFAULT_DELAY_MS: Final[int] = 400
DEFAULT_OUTPUT_DIR: Final[Path] = Path("data/generated/enrichment")
DEFAULT_BACKUP_DIR: Final[Path] = Path("data/generated/backups")
DEFAULT_PROVIDERS: Final[tuple[ProviderId, ...]] = (
    ProviderId.WIKTEXTRACT,
    ProviderId.MYMEMORY,
    ProviderId.TATOEBA,
    ProviderId.OPENTHESAURUS,
)

_LIST_SPLIT_RE = re.compile(r"[\s,;|]+")
_WILDCARDS = frozenset({"all", "*"})
_POS_ALIASES: Final[dict[str, PartOfSpeech]] = {
    **dict.fromkeys(("v", "verb", "verben"), PartOfSpeech.VERB),
    **dict.fromkeys(("n", "noun", "nomen", "substantiv"), PartOfSpeech.NOUN),
    **dict.fromkeys(("adj", "adjective", "adjektiv"), PartOfSpeech.ADJECTIVE),
    **dict.fromkeys(("adv", "adverb"), PartOfSpeech.ADVERB),
    **dict.fromkeys(("pron", "pronoun", "pronomen"), PartOfSpeech.PRONOUN),
    **dict.fromkeys(("det", "determiner", "article", "artikel"), PartOfSpeech.DETERMINER),
    **dict.fromkeys(
        ("prap", "prep", "preposition", "praposition"), PartOfSpeech.PREPOSITION
    ),
    **dict.fromkeys(("konj", "conj", "conjunction", "konjunktion"), PartOfSpeech.CONJUNCTION),
    **dict.fromkeys(("num", "numeral", "zahlwort"), PartOfSpeech.NUMERAL),
    **dict.fromkeys(("part", "particle", "partikel"), PartOfSpeech.PARTICLE),
    **dict.fromkeys(("interj", "interjection", "interjektion"), PartOfSpeech.INTERJECTION),
}


def _split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token for token in _LIST_SPLIT_RE.split(raw.strip()) if token]


def normalize_pos_filter(value: str) -> str | None:
    token = value.strip()
    if not token or token.lower() in _WILDCARDS:
        return None
    alias = _POS_ALIASES.get(strip_diacritics(token).lower())
    if alias is not None:
        return str(alias)
    if len(token) == 1:
        return token.upper()
    if len(token) <= 4:  # noqa: PLR2004
        return token[0].upper() + token[1:].lower()
    return token


def parse_pos_filters(raw: str | list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
    tokens = _split_list(raw) if isinstance(raw, str) or raw is None else list(raw)
    filters: list[str] = []
    for token in tokens:
        normalized = normalize_pos_filter(token)
        if normalized is not None and normalized not in filters:
            filters.append(normalized)
    return tuple(filters)


def parse_providers(raw: str | list[str] | tuple[str, ...] | None) -> tuple[ProviderId, ...]:
    tokens = _split_list(raw) if isinstance(raw, str) or raw is None else list(raw)
    providers: list[ProviderId] = []
    for token in tokens:
        key = token.strip().lower()
        if key in _WILDCARDS:
            return PROVIDER_PRIORITY
        if key == "kaikki":
            key = ProviderId.WIKTEXTRACT
        try:
            provider = ProviderId(key)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown enrichment provider: {token!r}") from exc
        if provider not in providers:
            providers.append(provider)
    return tuple(providers)


def parse_mode(raw: str | None) -> SelectionMode:
    if raw is None:
        return SelectionMode.NON_CANONICAL
    normalized = raw.strip().lower()
    if normalized in {"true", "1", "yes", "canonical"}:
        return SelectionMode.CANONICAL
    if normalized in {"all", "*", "any"}:
        return SelectionMode.ALL
    if normalized in {"false", "0", "no", "non-canonical", "noncanonical", ""}:
        return SelectionMode.NON_CANONICAL
    raise ConfigurationError(f"Unknown selection mode: {raw!r}")


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineConfig:
    limit: int = DEFAULT_LIMIT
    mode: SelectionMode = SelectionMode.NON_CANONICAL
    only_incomplete: bool = True
    apply: bool = False
    dry_run: bool = True
    backup: bool = True
    delay_ms: int = DEFAULT_DELAY_MS
    output_dir: Path = DEFAULT_OUTPUT_DIR
    backup_dir: Path = DEFAULT_BACKUP_DIR
    report_file: str | None = None
    emit_report: bool = True
    enable_ai: bool = False
    openai_model: str = DEFAULT_OPENAI_MODEL
    allow_overwrite: bool = False
    collect_wiktextract: bool = True
    providers: tuple[ProviderId, ...] = DEFAULT_PROVIDERS
    pos_filters: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.apply and self.dry_run:
            object.__setattr__(self, "dry_run", False)
        if self.limit < 0:
            raise ConfigurationError(f"limit must be >= 0, got {self.limit}")
        if self.delay_ms < 0:
            raise ConfigurationError(f"delay_ms must be >= 0, got {self.delay_ms}")

    @property
    def trigger(self) -> SnapshotTrigger:
        return SnapshotTrigger.APPLY if self.apply else SnapshotTrigger.PREVIEW

    def enabled_providers(self) -> tuple[ProviderId, ...]:
        enabled = set(self.providers)
        if not self.collect_wiktextract:
            enabled.discard(ProviderId.WIKTEXTRACT)
        if self.enable_ai:
            enabled.add(ProviderId.OPENAI)
        return tuple(provider for provider in PROVIDER_PRIORITY if provider in enabled)

    def with_overrides(self, **overrides: object) -> PipelineConfig:
        values = {key: value for key, value in overrides.items() if value is not None}
        if values.get("apply") and "dry_run" not in values:
            values["dry_run"] = False
        return replace(self, **values)  # type: ignore[arg-type]

    def to_report(self) -> dict[str, object]:
        return {
            "limit": self.limit,
            "mode": str(self.mode),
            "onlyIncomplete": self.only_incomplete,
            "apply": self.apply,
            "dryRun": self.dry_run,
            "backup": self.backup,
            "delayMs": self.delay_ms,
            "emitReport": self.emit_report,
            "enableAi": self.enable_ai,
            "openAiModel": self.openai_model,
            "allowOverwrite": self.allow_overwrite,
            "providers": [str(provider) for provider in self.enabled_providers()],
            "posFilters": list(self.pos_filters),
        }


def get_pipeline_config(**overrides: object) -> PipelineConfig:
    """Build the run configuration from the environment, then apply non-``None`` overrides."""

    apply = env_bool("APPLY_UPDATES", default=False)
    providers_raw = optional_env("ENRICHMENT_PROVIDERS")
    config = PipelineConfig(
        limit=env_int("LIMIT", default=DEFAULT_LIMIT),
        mode=parse_mode(optional_env("CANONICAL_MODE")),
        only_incomplete=env_bool("ONLY_INCOMPLETE", default=True),
        apply=apply,
        dry_run=False if apply else env_bool("DRY_RUN", default=True),
        backup=env_bool("ENABLE_BACKUP", default=True),
        delay_ms=env_int("DELAY_MS", default=DEFAULT_DELAY_MS),
        output_dir=Path(os.getenv("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
        backup_dir=Path(os.getenv("BACKUP_DIR") or DEFAULT_BACKUP_DIR),
        report_file=optional_env("REPORT_FILE"),
        emit_report=env_bool("EMIT_REPORT", default=True),
        enable_ai=env_bool("ENABLE_AI", default=False),
        openai_model=optional_env("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        allow_overwrite=env_bool("OVERWRITE_EXISTING", default=False),
        collect_wiktextract=env_bool("COLLECT_WIKTEXTRACT", default=True),
        providers=parse_providers(providers_raw) if providers_raw else DEFAULT_PROVIDERS,
        pos_filters=parse_pos_filters(optional_env("POS_FILTERS")),
    )
    return config.with_overrides(**overrides)
