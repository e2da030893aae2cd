# installer/steps.py
# -*- coding: utf-8 -*-
"""
Individual provisioning steps.

Each step takes the settings, the resolved workspace paths and a logger,
performs one side-effecting action against an explicit absolute path, and
raises a ProvisioningError subclass when the action fails.
"""

import logging
import re
import shlex
from pathlib import Path
from typing import Optional

from common.command_utils import OutputMode, get_symbols, log_installer, run_command
from common.file_utils import copy_file_overwrite
from installer.config_models import AppSettings
from installer.errors import (
    CloneFailedError,
    ClonePermissionDeniedError,
    ConfigTemplateMissingError,
    DependencyInstallError,
    StaticAssetsPathMissingError,
)
from installer.paths import WorkspacePaths
from installer.state_manager import mark_installed

module_logger = logging.getLogger(__name__)

# stderr fragments git emits when the remote refuses access.
_ACCESS_DENIED_PATTERN = re.compile(
    r"permission denied"
    r"|authentication failed"
    r"|could not read (username|password)"
    r"|repository not found"
    r"|access denied"
    r"|returned error: 40[13]\b",
    re.IGNORECASE,
)


def is_access_denied(stderr: str) -> bool:
    return bool(_ACCESS_DENIED_PATTERN.search(stderr or ""))


def clone_repository(
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_installer(
        f"{symbols.get('download', '📥')} Cloning the repository...",
        "info",
        logger_to_use,
        app_settings,
    )
    command = (
        f"{app_settings.vcs_clone_command} "
        f"{shlex.quote(app_settings.repo_url)} {shlex.quote(str(paths.workspace_dir))}"
    )
    result = run_command(
        command,
        app_settings,
        output_mode=OutputMode.INHERIT,
        cwd=paths.base_dir,
        current_logger=logger_to_use,
    )
    if not result.success:
        if is_access_denied(result.stderr):
            raise ClonePermissionDeniedError(
                f"You do not have permission to clone the repository {app_settings.repo_url}."
            )
        raise CloneFailedError(
            f"Cloning {app_settings.repo_url} failed (exit code {result.returncode})."
        )
    log_installer(
        f"{symbols.get('success', '✅')} Repo '{app_settings.workspace_name}' cloned successfully.",
        "info",
        logger_to_use,
        app_settings,
    )


def install_sub_project_dependencies(
    project_dir: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Run the JavaScript install and then the PHP install inside `project_dir`."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not project_dir.is_dir():
        raise DependencyInstallError(
            f"Sub-project directory {project_dir} does not exist."
        )

    log_installer(
        f"{symbols.get('package', '📦')} Installing dependencies for '{project_dir.name}'...",
        "info",
        logger_to_use,
        app_settings,
    )
    for manager, command in (
        ("JavaScript", app_settings.js_install_command),
        ("PHP", app_settings.php_install_command),
    ):
        result = run_command(
            command,
            app_settings,
            output_mode=OutputMode.SILENT,
            cwd=project_dir,
            current_logger=logger_to_use,
        )
        if not result.success:
            raise DependencyInstallError(
                f"{manager} dependency install (`{command}`) failed for '{project_dir.name}' (exit code {result.returncode})."
            )


def install_sub_project_step(
    index: int,
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    install_sub_project_dependencies(
        paths.sub_project_dirs[index], app_settings, current_logger
    )


def write_env_config(
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Copy the environment template to the active file, overwriting it if present."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Configuring the application...",
        "info",
        logger_to_use,
        app_settings,
    )
    if not paths.env_template.is_file():
        raise ConfigTemplateMissingError(
            f"Configuration template {paths.env_template} does not exist."
        )
    copy_file_overwrite(
        paths.env_template, paths.env_file, app_settings, logger_to_use
    )


def install_static_dependencies(
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_installer(
        f"{symbols.get('package', '📦')} Installing static project dependencies...",
        "info",
        logger_to_use,
        app_settings,
    )
    static_dir = paths.static_assets_dir
    if not static_dir.is_dir():
        raise StaticAssetsPathMissingError(
            f"Directory {static_dir} does not exist."
        )
    result = run_command(
        app_settings.js_install_command,
        app_settings,
        output_mode=OutputMode.SILENT,
        cwd=static_dir,
        current_logger=logger_to_use,
    )
    if not result.success:
        raise DependencyInstallError(
            f"JavaScript dependency install (`{app_settings.js_install_command}`) failed for the static project (exit code {result.returncode})."
        )


def mark_installation_complete(
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    mark_installed(paths, app_settings, current_logger)
