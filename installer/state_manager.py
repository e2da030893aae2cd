# installer/state_manager.py
# -*- coding: utf-8 -*-
"""
Manages the workspace state marker recording installation status.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from common.command_utils import get_symbols, log_installer
from common.file_utils import ensure_directory
from common.json_utils import JsonFileType, check_json_file, read_json_object, write_json_object
from installer.config_models import AppSettings, InstallStatus, WorkspaceState
from installer.paths import WorkspacePaths

module_logger = logging.getLogger(__name__)


def read_workspace_state(
    paths: WorkspacePaths,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> WorkspaceState:
    """
    Read the state marker of the workspace.

    A missing marker means the workspace is uninstalled. A marker that cannot
    be read, is not a JSON object or carries an unknown status is reported
    and also treated as uninstalled; this function does not raise for bad
    marker content.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    state_file = paths.state_file

    file_type = check_json_file(state_file)
    if file_type == JsonFileType.MISSING:
        log_installer(
            f"No state marker at {state_file}; workspace is not installed.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return WorkspaceState(status=InstallStatus.UNINSTALLED)
    if file_type != JsonFileType.VALID_JSON:
        log_installer(
            f"{symbols.get('warning', '⚠️')} State marker {state_file} is not valid JSON ({file_type.value}); treating workspace as not installed.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return WorkspaceState(status=InstallStatus.UNINSTALLED)

    try:
        data = read_json_object(state_file)
    except (OSError, ValueError) as e:
        log_installer(
            f"{symbols.get('warning', '⚠️')} Could not read state marker {state_file}: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return WorkspaceState(status=InstallStatus.UNINSTALLED)

    if data is None:
        log_installer(
            f"{symbols.get('warning', '⚠️')} State marker {state_file} is not a JSON object; treating workspace as not installed.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return WorkspaceState(status=InstallStatus.UNINSTALLED)

    try:
        return WorkspaceState.model_validate(data)
    except ValidationError as e:
        log_installer(
            f"{symbols.get('warning', '⚠️')} State marker {state_file} has an invalid status: {e.errors()[0]['msg']}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return WorkspaceState(status=InstallStatus.UNINSTALLED)


def is_already_installed(
    paths: WorkspacePaths,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    state = read_workspace_state(paths, app_settings, current_logger)
    return state.status == InstallStatus.INSTALLED


def mark_installed(
    paths: WorkspacePaths,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> WorkspaceState:
    """Create the state directory if needed and record the workspace as installed."""
    logger_to_use = current_logger if current_logger else module_logger

    ensure_directory(paths.state_dir, app_settings, logger_to_use)
    state = WorkspaceState(status=InstallStatus.INSTALLED)
    write_json_object(paths.state_file, state.model_dump(mode="json"))
    log_installer(
        f"Wrote state marker {paths.state_file} (status={state.status.value}).",
        "debug",
        logger_to_use,
        app_settings,
    )
    return state
