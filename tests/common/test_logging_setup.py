from __future__ import annotations

import logging

from lexipy.config import configure_logging


def test_http_libraries_are_quiet_by_default() -> None:
    configure_logging(force=True)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("hishel").level == logging.WARNING


def test_debug_level_keeps_http_library_output() -> None:
    configure_logging(level=logging.DEBUG, force=True)

    assert logging.getLogger("httpx").level == logging.DEBUG
