# installer/preconditions.py
# -*- coding: utf-8 -*-
"""
Checks that must pass before provisioning performs any mutation.
"""

import logging
import shlex
from pathlib import Path
from typing import List, Optional

from common.command_utils import command_exists, get_symbols, log_installer
from common.file_utils import DirectoryState, inspect_directory
from installer.config_models import AppSettings
from installer.errors import AlreadyInstalledError, DirtyTargetError, MissingToolError
from installer.paths import WorkspacePaths
from installer.state_manager import is_already_installed

module_logger = logging.getLogger(__name__)

# The target directory of a clone is classified the same way as any
# directory something is created in.
TargetDirState = DirectoryState


def is_target_dir_usable(target_dir: Path) -> TargetDirState:
    """Return ABSENT, EMPTY_EXISTING (both safe to clone into) or NON_EMPTY_EXISTING."""
    return inspect_directory(target_dir)


def _executable_of(command: str) -> str:
    parts = shlex.split(command)
    return parts[0] if parts else ""


def required_tools(app_settings: AppSettings) -> List[str]:
    """Executables the pipeline invokes, in invocation order, without duplicates."""
    tools: List[str] = []
    for command in (
        app_settings.vcs_clone_command,
        app_settings.js_install_command,
        app_settings.php_install_command,
    ):
        executable = _executable_of(command)
        if executable and executable not in tools:
            tools.append(executable)
    return tools


def check_not_installed(
    paths: WorkspacePaths,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Raise AlreadyInstalledError if the workspace marker says installed."""
    if is_already_installed(paths, app_settings, current_logger):
        raise AlreadyInstalledError(
            "The project is already installed. Aborting installation."
        )


def check_required_tools(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Raise MissingToolError if any invoked executable is not on PATH."""
    logger_to_use = current_logger if current_logger else module_logger

    tools = required_tools(app_settings)
    missing = [tool for tool in tools if not command_exists(tool)]
    if missing:
        raise MissingToolError(
            f"Required tool(s) not found in PATH: {', '.join(missing)}."
        )
    log_installer(
        f"Found required tools: {', '.join(tools)}",
        "debug",
        logger_to_use,
        app_settings,
    )


def check_target_directory(
    paths: WorkspacePaths,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> TargetDirState:
    """
    Ensure the workspace directory can be cloned into.

    Returns the directory state when it is usable, and raises
    DirtyTargetError when it already holds anything.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    target = paths.workspace_dir

    state = is_target_dir_usable(target)
    if state == TargetDirState.NON_EMPTY_EXISTING:
        raise DirtyTargetError(
            f"The directory '{target}' is not empty. Please ensure it's empty before cloning."
        )
    if state == TargetDirState.EMPTY_EXISTING:
        log_installer(
            f"{symbols.get('warning', '⚠️')} The directory '{target}' already exists but is empty, proceeding with clone...",
            "info",
            logger_to_use,
            app_settings,
        )
    else:
        log_installer(
            f"{symbols.get('search', '🔄')} Directory '{target}' does not exist, proceeding with clone...",
            "info",
            logger_to_use,
            app_settings,
        )
    return state
