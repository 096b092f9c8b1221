"""Loguru sink configuration for applications embedding api_relations.

The library itself only emits debug records through ``loguru.logger``; hosts
call :func:`setup_logging` once at startup to decide where they go.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from api_relations.utils.config import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Replace the default loguru sink with the configured stderr/file sinks."""
    config = config or LoggingConfig()

    logger.remove()
    logger.add(sys.stderr, level=config.level)

    if config.file:
        target = Path(config.file)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(target),
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
        )

    logger.debug("Logging configured at level {}", config.level)
