# tests/conftest.py
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from common.command_utils import CommandResult, OutputMode
from installer.config_models import AppSettings
from installer.paths import WorkspacePaths


def build_workspace_layout(paths: WorkspacePaths) -> None:
    """Create what a successful clone of the application repository contains."""
    for project_dir in paths.sub_project_dirs:
        project_dir.mkdir(parents=True, exist_ok=True)
        (project_dir / "package.json").write_text("{}", encoding="utf-8")
    paths.config_dir.mkdir(parents=True, exist_ok=True)
    paths.env_template.write_text("APP_ENV=local\n", encoding="utf-8")
    paths.static_assets_dir.mkdir(parents=True, exist_ok=True)


class FakeCommandRunner:
    """
    Stand-in for run_command that records every invocation.

    `failures` maps a call index to the (returncode, stderr) that call
    returns. A successful clone creates the repository layout.
    """

    def __init__(self, create_layout: bool = True):
        self.create_layout = create_layout
        self.failures: Dict[int, Tuple[int, str]] = {}
        self.calls: List[Tuple[str, Optional[Path], OutputMode]] = []
        self.env_file_present: List[bool] = []
        self.state_file_present: List[bool] = []

    def __call__(
        self,
        command,
        app_settings,
        output_mode=OutputMode.SILENT,
        cwd=None,
        current_logger=None,
    ):
        paths = WorkspacePaths.from_settings(app_settings)
        index = len(self.calls)
        self.calls.append((command, Path(cwd) if cwd else None, output_mode))
        self.env_file_present.append(paths.env_file.exists())
        self.state_file_present.append(paths.state_file.exists())

        if index in self.failures:
            returncode, stderr = self.failures[index]
            return CommandResult(command=command, returncode=returncode, stderr=stderr)
        if command.startswith(app_settings.vcs_clone_command) and self.create_layout:
            build_workspace_layout(paths)
        return CommandResult(command=command, returncode=0)

    @property
    def commands(self) -> List[str]:
        return [command for command, _, _ in self.calls]


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    """Settings anchored in a temporary directory, tool preflight disabled."""
    return AppSettings(base_dir=tmp_path, preflight_tools=False)


@pytest.fixture
def workspace_paths(app_settings) -> WorkspacePaths:
    return WorkspacePaths.from_settings(app_settings)


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def fake_runner(mocker) -> FakeCommandRunner:
    runner = FakeCommandRunner()
    mocker.patch("installer.steps.run_command", side_effect=runner)
    return runner


@pytest.fixture
def workspace_layout():
    return build_workspace_layout
