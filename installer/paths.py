# installer/paths.py
# -*- coding: utf-8 -*-
"""
Absolute paths used by the provisioning pipeline.

All paths are derived once from the resolved base directory so that no
step depends on the process working directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from installer.config_models import AppSettings


@dataclass(frozen=True)
class WorkspacePaths:
    base_dir: Path
    workspace_dir: Path
    sub_project_dirs: Tuple[Path, ...]
    config_dir: Path
    env_template: Path
    env_file: Path
    static_assets_dir: Path
    state_dir: Path
    state_file: Path

    @classmethod
    def from_settings(cls, app_settings: AppSettings) -> "WorkspacePaths":
        base_dir = Path(app_settings.base_dir).resolve()
        workspace_dir = base_dir / app_settings.workspace_name
        config_dir = workspace_dir / app_settings.config_subdir
        state_dir = workspace_dir / app_settings.state_dir_name
        return cls(
            base_dir=base_dir,
            workspace_dir=workspace_dir,
            sub_project_dirs=tuple(
                workspace_dir / name for name in app_settings.sub_projects
            ),
            config_dir=config_dir,
            env_template=config_dir / app_settings.env_template_name,
            env_file=config_dir / app_settings.env_file_name,
            static_assets_dir=workspace_dir / app_settings.static_assets_subdir,
            state_dir=state_dir,
            state_file=state_dir / app_settings.state_file_name,
        )
