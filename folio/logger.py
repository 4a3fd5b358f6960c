"""
loguru configuration for folio commands.

Under GitHub Actions, warnings and errors are written as workflow commands so they show
up as annotations on the run.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import Any

from loguru import logger

CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}\n"
WORKFLOW_COMMANDS = {
    "WARNING": "::warning::{message}\n",
    "ERROR": "::error::{message}\n",
    "CRITICAL": "::error::{message}\n",
}
PLAIN_PREFIXES = {
    "WARNING": "Warning: {message}\n",
    "ERROR": "Error: {message}\n",
    "CRITICAL": "Error: {message}\n",
}


def _formatter(in_actions: bool):
    templates = WORKFLOW_COMMANDS if in_actions else PLAIN_PREFIXES

    def format_record(record: Mapping[str, Any]) -> str:
        return templates.get(record["level"].name, CONSOLE_FORMAT)

    return format_record


def setup_logger(*, verbose: bool = False, environ: Mapping[str, str] | None = None) -> None:
    """Replace loguru's default sink with a single stderr sink.

    Args:
        verbose: Emit DEBUG stage progress as well as warnings and errors.
        environ: Environment to inspect for ``GITHUB_ACTIONS`` (defaults to ``os.environ``).
    """
    env = os.environ if environ is None else environ
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=_formatter(bool(env.get("GITHUB_ACTIONS"))),
        colorize=False,
    )
