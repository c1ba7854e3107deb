from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from lexipy.app import mirror_provider_files, run_enrichment
from lexipy.config import ConfigurationError, configure_logging, get_pipeline_config
from lexipy.config.pipeline import parse_mode, parse_pos_filters, parse_providers

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from lexipy.config import PipelineConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enrich German lexical entries")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    enrich = subparsers.add_parser("enrich", help="Collect suggestions and patch entries")
    enrich.add_argument("--limit", type=int, help="Maximum number of entries to process")
    enrich.add_argument(
        "--mode",
        type=str,
        help="Entry selection: non-canonical, canonical or all",
    )
    enrich.add_argument(
        "--only-incomplete",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only select entries not yet marked complete",
    )
    enrich.add_argument(
        "--apply",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write patches to the database instead of previewing them",
    )
    enrich.add_argument(
        "--backup",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Back up selected entries before applying patches",
    )
    enrich.add_argument("--delay-ms", type=int, help="Pause between entries in milliseconds")
    enrich.add_argument("--output-dir", type=Path, help="Directory for run reports")
    enrich.add_argument("--backup-dir", type=Path, help="Directory for entry backups")
    enrich.add_argument("--report-file", type=str, help="Fixed report file name")
    enrich.add_argument(
        "--report",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write a run report",
    )
    enrich.add_argument(
        "--ai",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ask OpenAI for translations and examples",
    )
    enrich.add_argument("--openai-model", type=str, help="OpenAI chat model")
    enrich.add_argument(
        "--overwrite",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Allow replacing values that are already set",
    )
    enrich.add_argument(
        "--wiktextract",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Query the Kaikki dictionary",
    )
    enrich.add_argument(
        "--providers",
        type=str,
        help="Comma separated provider ids (wiktextract, mymemory, tatoeba, ...)",
    )
    enrich.add_argument("--pos", type=str, help="Comma separated part-of-speech filter")

    subparsers.add_parser("mirror", help="Re-upload provider files to Supabase Storage")

    return parser.parse_args(list(argv))


def _build_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    return get_pipeline_config(
        limit=args.limit,
        mode=parse_mode(args.mode) if args.mode is not None else None,
        only_incomplete=args.only_incomplete,
        apply=args.apply,
        backup=args.backup,
        delay_ms=args.delay_ms,
        output_dir=args.output_dir,
        backup_dir=args.backup_dir,
        report_file=args.report_file,
        emit_report=args.report,
        enable_ai=args.ai,
        openai_model=args.openai_model,
        allow_overwrite=args.overwrite,
        collect_wiktextract=args.wiktextract,
        providers=parse_providers(args.providers) if args.providers is not None else None,
        pos_filters=parse_pos_filters(args.pos) if args.pos is not None else None,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    config: PipelineConfig | None = None
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        if parsed_args.command == "enrich":
            config = _build_pipeline_config(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "enrich":
            result = run_enrichment(config)
            if result.report_path is not None:
                log.info("Report: %s", result.report_path)
        elif parsed_args.command == "mirror":
            sync = mirror_provider_files()
            for path, error in sync.failed:
                log.error("Failed to mirror %s: %s", path, error)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during enrichment")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load `.env`, install the SIGINT handler and run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
