# -*- coding: utf-8 -*-
"""
Logging configuration for the Baxoo installer.

Provides the console handler that acts as the installer's interactive
terminal handle, plus an optional JSON-structured file log. Handlers are
installed for the duration of one command and released on every exit path.
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import IO, Iterator, List, Optional

from installer.config_models import AppSettings

INSTALLER_LOGGER_NAME = "baxoo_installer"


class JSONFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON documents.

    Each entry carries timestamp, level, service, logger, message, module,
    function and line, plus the formatted exception when present.
    """

    def __init__(self, service_name: str = "baxoo-installer"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def resolve_log_level(verbose: bool = False) -> int:
    """
    Determine the effective log level.

    `verbose` forces DEBUG. Otherwise the LOGLEVEL environment variable is
    honoured, falling back to INFO for missing or invalid values.
    """
    if verbose:
        return logging.DEBUG
    level_str = os.environ.get("LOGLEVEL", "INFO").upper()
    level = getattr(logging, level_str, None)
    if not isinstance(level, int):
        print(
            f"Warning: Invalid LOGLEVEL string '{level_str}'. Defaulting to INFO.",
            file=sys.stderr,
        )
        return logging.INFO
    return level


def setup_logging(
    app_settings: AppSettings,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> List[logging.Handler]:
    """
    Attach the installer's console (and optional JSON file) handlers to the
    root logger.

    Args:
        app_settings: Settings providing the log prefix and log file path.
        verbose: Log at DEBUG level and include logger names on the console.
        stream: Stream for the console handler. Defaults to sys.stdout as it
            is at call time.

    Returns:
        The handlers that were added, to be passed to teardown_logging().
    """
    level = resolve_log_level(verbose)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if verbose:
        console_format = f"{app_settings.log_prefix} %(asctime)s - [%(levelname)s] - %(name)s - %(message)s"
    else:
        console_format = f"{app_settings.log_prefix} %(message)s"

    console_handler = logging.StreamHandler(
        stream if stream is not None else sys.stdout
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(console_format, datefmt="%Y-%m-%d %H:%M:%S")
    )
    handlers: List[logging.Handler] = [console_handler]

    if app_settings.log_file:
        app_settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(app_settings.log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger(INSTALLER_LOGGER_NAME).debug(
        f"Logging initialized (level={logging.getLevelName(level)}, "
        f"file={app_settings.log_file or 'disabled'})"
    )
    return handlers


def teardown_logging(handlers: List[logging.Handler]) -> None:
    """Detach and close handlers previously returned by setup_logging()."""
    root_logger = logging.getLogger()
    for handler in handlers:
        root_logger.removeHandler(handler)
        handler.flush()
        handler.close()


@contextmanager
def installer_console(
    app_settings: AppSettings,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> Iterator[logging.Logger]:
    """
    Open the installer's terminal handle for the duration of a command.

    Yields the installer logger. The handlers are closed however the block
    exits, including via SystemExit.
    """
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    try:
        handlers = setup_logging(app_settings, verbose=verbose, stream=stream)
    except OSError:
        root_logger.setLevel(previous_level)
        raise
    try:
        yield logging.getLogger(INSTALLER_LOGGER_NAME)
    finally:
        teardown_logging(handlers)
        root_logger.setLevel(previous_level)
