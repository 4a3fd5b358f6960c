from __future__ import annotations

import sys

import pytest
from loguru import logger

from folio.logger import setup_logger


@pytest.fixture(autouse=True)
def _restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_plain_prefixes_outside_github_actions(capsys) -> None:
    setup_logger(environ={})

    logger.debug("hidden progress")
    logger.warning("Language pack missing")
    logger.error("Validation failed")

    err = capsys.readouterr().err
    assert "hidden progress" not in err
    assert "Warning: Language pack missing\n" in err
    assert "Error: Validation failed\n" in err


def test_workflow_commands_under_github_actions(capsys) -> None:
    setup_logger(environ={"GITHUB_ACTIONS": "true"})

    logger.warning("Skill not found")
    logger.error("Required file missing")

    err = capsys.readouterr().err
    assert "::warning::Skill not found\n" in err
    assert "::error::Required file missing\n" in err


def test_verbose_logs_stage_progress(capsys) -> None:
    setup_logger(verbose=True, environ={})

    logger.debug("Compiling pages")

    assert "Compiling pages" in capsys.readouterr().err
