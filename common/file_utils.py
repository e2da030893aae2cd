# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: directory inspection, template copies and
directory creation.
"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional

from installer.config_models import AppSettings

from .command_utils import get_symbols, log_installer

module_logger = logging.getLogger(__name__)


class DirectoryState(str, Enum):
    """Possible states of a directory that something will be created in."""

    ABSENT = "absent"
    EMPTY_EXISTING = "empty_existing"
    NON_EMPTY_EXISTING = "non_empty_existing"


def inspect_directory(directory_path: Path) -> DirectoryState:
    """
    Classify a directory as absent, existing-and-empty, or non-empty.

    Any entry at all (file, subdirectory, dotfile) makes the directory
    non-empty. A path that exists but is not a directory can never be used as
    a directory and is reported as NON_EMPTY_EXISTING.
    """
    if not directory_path.exists() and not directory_path.is_symlink():
        return DirectoryState.ABSENT
    if not directory_path.is_dir():
        return DirectoryState.NON_EMPTY_EXISTING
    if any(directory_path.iterdir()):
        return DirectoryState.NON_EMPTY_EXISTING
    return DirectoryState.EMPTY_EXISTING


def copy_file_overwrite(
    source: Path,
    destination: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Copy `source` to `destination`, replacing any existing destination file.

    Raises:
        FileNotFoundError: If `source` does not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not source.is_file():
        raise FileNotFoundError(f"Source file not found: {source}")

    if destination.exists():
        log_installer(
            f"{symbols.get('warning', '⚠️')} Overwriting existing {destination}",
            "warning",
            logger_to_use,
            app_settings,
        )
    shutil.copyfile(source, destination)
    log_installer(
        f"Copied {source} to {destination}",
        "debug",
        logger_to_use,
        app_settings,
    )


def ensure_directory(
    directory_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Create `directory_path` (and its parents) if it does not exist yet.

    Returns:
        bool: True if the directory was created, False if it already existed.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if directory_path.is_dir():
        return False
    directory_path.mkdir(parents=True, exist_ok=True)
    log_installer(
        f"Created directory {directory_path}",
        "debug",
        logger_to_use,
        app_settings,
    )
    return True
