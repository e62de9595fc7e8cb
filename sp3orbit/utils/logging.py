"""
Logging for SP3-Orbit.

structlog on top of stdlib logging. Console output goes to stderr; stdout
belongs to the command output of the CLI.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog


LOG_FILE_NAME = "sp3orbit.log"


def setup_logging(
    level: str = "INFO",
    log_dir: Path | str | None = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
    json_format: bool = False,
) -> None:
    """Configure logging for a conversion run.

    Args:
        level: Log level name, unknown names fall back to INFO
        log_dir: Directory of sp3orbit.log, used with log_to_file
        log_to_file: Also write records to the log file
        log_to_console: Write records to stderr
        json_format: Render records as JSON instead of key=value
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_to_file and log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / LOG_FILE_NAME))
    if not handlers:
        handlers.append(logging.NullHandler())

    # force: the CLI group may configure logging more than once per process
    logging.basicConfig(level=log_level, handlers=handlers, format="%(message)s", force=True)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to a module name."""
    return structlog.get_logger(name)
