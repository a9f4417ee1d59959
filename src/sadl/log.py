# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structured logging setup shared by the library and the command-line tools."""

import logging
import sys
from typing import Any

import structlog

# ###############
# Public Interface
# ###############


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog to render events on stderr.

    Library modules only emit debug events, so they stay silent unless
    *verbose* is set.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a structured logger bound to *name*."""
    return structlog.get_logger(logger_name=name)
