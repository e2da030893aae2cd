# installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for installer configuration and the workspace state marker.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions. It utilizes Pydantic for data
validation and settings management.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
REPO_URL_DEFAULT: str = "https://github.com/leo-lb29/baxoo-app.git"
WORKSPACE_NAME_DEFAULT: str = "baxoo-app"
SUB_PROJECTS_DEFAULT: List[str] = ["dash", "app_desktop"]
CONFIG_SUBDIR_DEFAULT: str = "allcode/config"
ENV_TEMPLATE_NAME_DEFAULT: str = ".env.example"
ENV_FILE_NAME_DEFAULT: str = ".env"
STATIC_ASSETS_SUBDIR_DEFAULT: str = "static/v1/dash"
STATE_DIR_NAME_DEFAULT: str = ".baxoo"
STATE_FILE_NAME_DEFAULT: str = "config.json"

VCS_CLONE_COMMAND_DEFAULT: str = "git clone --progress"
JS_INSTALL_COMMAND_DEFAULT: str = "npm install"
PHP_INSTALL_COMMAND_DEFAULT: str = "composer install"

LOG_PREFIX_DEFAULT: str = "[BAXOO]"

# Root of the installer distribution, i.e. the directory holding the
# 'installer' package. The workspace is anchored here unless overridden.
INSTALLER_ROOT: Path = Path(__file__).resolve().parent.parent

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "download": "📥",
    "search": "🔄",
    "party": "🎉",
    "critical": "🔥",
    "debug": "🐛",
}


class InstallStatus(str, Enum):
    """Installation status recorded in the workspace state marker."""

    UNINSTALLED = "uninstalled"
    INSTALLED = "installed"


class WorkspaceState(BaseModel):
    """The persisted workspace marker, e.g. {"status": "installed"}."""

    status: InstallStatus = Field(
        default=InstallStatus.UNINSTALLED,
        description="Installation status of the workspace.",
    )


class AppSettings(BaseSettings):
    """Main installer settings."""

    model_config = SettingsConfigDict(env_prefix="BAXOO_", extra="ignore")

    repo_url: str = Field(
        default=REPO_URL_DEFAULT,
        description="Upstream repository cloned into the workspace.",
    )
    workspace_name: str = Field(
        default=WORKSPACE_NAME_DEFAULT,
        description="Directory name of the workspace, relative to base_dir.",
    )
    base_dir: Path = Field(
        default=INSTALLER_ROOT,
        description="Directory the workspace is created in. Resolved to an absolute path.",
    )
    sub_projects: List[str] = Field(
        default_factory=lambda: list(SUB_PROJECTS_DEFAULT),
        description="The two sub-project directories (in install order) that need JS and PHP dependencies.",
    )
    config_subdir: str = Field(
        default=CONFIG_SUBDIR_DEFAULT,
        description="Workspace-relative directory holding the environment template.",
    )
    env_template_name: str = Field(
        default=ENV_TEMPLATE_NAME_DEFAULT,
        description="File name of the environment template.",
    )
    env_file_name: str = Field(
        default=ENV_FILE_NAME_DEFAULT,
        description="File name of the active environment file.",
    )
    static_assets_subdir: str = Field(
        default=STATIC_ASSETS_SUBDIR_DEFAULT,
        description="Workspace-relative directory of the static-assets project.",
    )
    state_dir_name: str = Field(
        default=STATE_DIR_NAME_DEFAULT,
        description="Hidden directory (inside the workspace) holding the state marker.",
    )
    state_file_name: str = Field(
        default=STATE_FILE_NAME_DEFAULT,
        description="File name of the state marker.",
    )

    vcs_clone_command: str = Field(
        default=VCS_CLONE_COMMAND_DEFAULT,
        description="Shell command prefix used to clone the repository.",
    )
    js_install_command: str = Field(
        default=JS_INSTALL_COMMAND_DEFAULT,
        description="Shell command installing JavaScript dependencies.",
    )
    php_install_command: str = Field(
        default=PHP_INSTALL_COMMAND_DEFAULT,
        description="Shell command installing PHP dependencies.",
    )
    preflight_tools: bool = Field(
        default=True,
        description="Verify git, npm and composer are on PATH before cloning.",
    )

    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT,
        description="Prefix for log messages written to the console.",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional path of a JSON-structured log file.",
    )

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )

    @field_validator("base_dir")
    @classmethod
    def _resolve_base_dir(cls, value: Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("sub_projects")
    @classmethod
    def _require_two_sub_projects(cls, value: List[str]) -> List[str]:
        # The pipeline has exactly two dependency-install stages.
        if len(value) != 2:
            raise ValueError(
                f"exactly two sub-projects are required, got {len(value)}"
            )
        return value
