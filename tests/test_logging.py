"""Tests for loguru sink setup."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

from api_relations.utils.config import LoggingConfig
from api_relations.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_sink_receives_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "relations.log"

    setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))
    logger.info("eager load finished")
    logger.complete()

    assert log_file.exists()
    assert "eager load finished" in log_file.read_text(encoding="utf-8")


def test_level_filters_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "relations.log"

    setup_logging(LoggingConfig(level="WARNING", file=str(log_file)))
    logger.info("hidden")
    logger.warning("shown")
    logger.complete()

    content = log_file.read_text(encoding="utf-8")
    assert "shown" in content
    assert "hidden" not in content
