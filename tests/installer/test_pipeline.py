# -*- coding: utf-8 -*-
"""
Tests for the provisioning pipeline: ordering, fail-fast gating and the
idempotency guard. External commands go through FakeCommandRunner.
"""

import json

import pytest

from common.command_utils import OutputMode
from installer.errors import ErrorKind
from installer.pipeline import ProvisioningState, build_steps, run_provisioning
from installer.state_manager import mark_installed

FULL_SEQUENCE = [
    ProvisioningState.START,
    ProvisioningState.PRECONDITION_CHECK,
    ProvisioningState.CLONE,
    ProvisioningState.INSTALL_DEPS_A,
    ProvisioningState.INSTALL_DEPS_B,
    ProvisioningState.WRITE_CONFIG,
    ProvisioningState.INSTALL_STATIC_DEPS,
    ProvisioningState.MARK_INSTALLED,
    ProvisioningState.DONE,
]


def test_build_steps_order(app_settings):
    assert [step.state for step in build_steps(app_settings)] == FULL_SEQUENCE[1:-1]


def test_successful_provisioning(app_settings, workspace_paths, fake_runner):
    """Empty target, every command succeeds: DONE, exit 0, marker written."""
    workspace_paths.workspace_dir.mkdir()

    result = run_provisioning(app_settings)

    assert result.success is True
    assert result.exit_code == 0
    assert result.final_state == ProvisioningState.DONE
    assert result.visited_states == FULL_SEQUENCE
    assert result.error_kind is None
    assert json.loads(workspace_paths.state_file.read_text(encoding="utf-8")) == {
        "status": "installed"
    }
    assert workspace_paths.env_file.read_text(encoding="utf-8") == "APP_ENV=local\n"


def test_commands_run_in_order_against_explicit_directories(
    app_settings, workspace_paths, fake_runner
):
    run_provisioning(app_settings)

    workspace = workspace_paths.workspace_dir
    assert fake_runner.calls == [
        (
            f"git clone --progress {app_settings.repo_url} {workspace}",
            workspace_paths.base_dir,
            OutputMode.INHERIT,
        ),
        ("npm install", workspace / "dash", OutputMode.SILENT),
        ("composer install", workspace / "dash", OutputMode.SILENT),
        ("npm install", workspace / "app_desktop", OutputMode.SILENT),
        ("composer install", workspace / "app_desktop", OutputMode.SILENT),
        ("npm install", workspace / "static" / "v1" / "dash", OutputMode.SILENT),
    ]


def test_config_written_after_dependencies_and_marker_last(
    app_settings, fake_runner
):
    run_provisioning(app_settings)

    # The env file appears only after both sub-projects are installed.
    assert fake_runner.env_file_present == [False, False, False, False, False, True]
    # The marker is never present while any command runs.
    assert not any(fake_runner.state_file_present)


def test_already_installed_performs_no_actions(app_settings, workspace_paths, fake_runner):
    mark_installed(workspace_paths, app_settings)
    entries_before = sorted(workspace_paths.workspace_dir.rglob("*"))

    result = run_provisioning(app_settings)

    assert result.exit_code == 1
    assert result.error_kind == ErrorKind.ALREADY_INSTALLED
    assert result.visited_states == [
        ProvisioningState.START,
        ProvisioningState.PRECONDITION_CHECK,
        ProvisioningState.ABORTED,
    ]
    assert fake_runner.calls == []
    assert sorted(workspace_paths.workspace_dir.rglob("*")) == entries_before


@pytest.mark.parametrize("entry", ["README.md", ".env"])
def test_dirty_target_never_invokes_clone(app_settings, workspace_paths, fake_runner, entry):
    workspace_paths.workspace_dir.mkdir()
    (workspace_paths.workspace_dir / entry).write_text("x", encoding="utf-8")

    result = run_provisioning(app_settings)

    assert result.exit_code == 1
    assert result.error_kind == ErrorKind.DIRTY_TARGET
    assert result.failed_step == "PRECONDITION_CHECK"
    assert fake_runner.calls == []
    assert not workspace_paths.state_file.exists()


def test_missing_tools_abort_before_clone(mocker, app_settings, fake_runner):
    app_settings.preflight_tools = True
    mocker.patch("installer.preconditions.command_exists", return_value=False)

    result = run_provisioning(app_settings)

    assert result.error_kind == ErrorKind.MISSING_TOOL
    assert fake_runner.calls == []


def test_first_install_failure(app_settings, workspace_paths, fake_runner):
    """Clone succeeds, the first package-manager call fails."""
    fake_runner.failures[1] = (1, "npm ERR! code E404")

    result = run_provisioning(app_settings)

    assert result.exit_code == 1
    assert result.error_kind == ErrorKind.DEPENDENCY_INSTALL_FAILED
    assert result.failed_step == "INSTALL_DEPS_A"
    assert result.completed_steps == ["PRECONDITION_CHECK", "CLONE_REPOSITORY"]
    assert len(fake_runner.calls) == 2
    assert not workspace_paths.state_file.exists()
    assert not workspace_paths.env_file.exists()


@pytest.mark.parametrize(
    "failing_call, failed_step, error_kind",
    [
        (0, "CLONE_REPOSITORY", ErrorKind.CLONE_FAILED),
        (1, "INSTALL_DEPS_A", ErrorKind.DEPENDENCY_INSTALL_FAILED),
        (2, "INSTALL_DEPS_A", ErrorKind.DEPENDENCY_INSTALL_FAILED),
        (3, "INSTALL_DEPS_B", ErrorKind.DEPENDENCY_INSTALL_FAILED),
        (4, "INSTALL_DEPS_B", ErrorKind.DEPENDENCY_INSTALL_FAILED),
        (5, "INSTALL_STATIC_DEPS", ErrorKind.DEPENDENCY_INSTALL_FAILED),
    ],
)
def test_fail_fast(app_settings, workspace_paths, fake_runner, failing_call, failed_step, error_kind):
    fake_runner.failures[failing_call] = (1, "")

    result = run_provisioning(app_settings)

    assert result.final_state == ProvisioningState.ABORTED
    assert result.visited_states[-1] == ProvisioningState.ABORTED
    assert result.failed_step == failed_step
    assert result.error_kind == error_kind
    assert len(fake_runner.calls) == failing_call + 1
    assert not workspace_paths.state_file.exists()


def test_clone_permission_denied(app_settings, fake_runner):
    fake_runner.failures[0] = (128, "remote: Permission to leo-lb29/baxoo-app.git denied.\nfatal: unable to access: The requested URL returned error: 403")

    result = run_provisioning(app_settings)

    assert result.error_kind == ErrorKind.CLONE_PERMISSION_DENIED
    assert len(fake_runner.calls) == 1


def test_missing_static_assets_directory(app_settings, workspace_paths, fake_runner, mocker):
    def write_config_and_drop_static_dir(settings, paths, current_logger=None):
        paths.env_file.write_text("", encoding="utf-8")
        paths.static_assets_dir.rmdir()

    mocker.patch(
        "installer.pipeline.write_env_config",
        side_effect=write_config_and_drop_static_dir,
    )

    result = run_provisioning(app_settings)

    assert result.error_kind == ErrorKind.STATIC_ASSETS_PATH_MISSING
    assert result.failed_step == "INSTALL_STATIC_DEPS"
    assert len(fake_runner.calls) == 5
    assert not workspace_paths.state_file.exists()


def test_missing_config_template(app_settings, workspace_paths, fake_runner, mocker):
    fake_runner.create_layout = False

    def clone_without_template(*args, **kwargs):
        for project_dir in workspace_paths.sub_project_dirs:
            project_dir.mkdir(parents=True)

    mocker.patch("installer.pipeline.clone_repository", side_effect=clone_without_template)

    result = run_provisioning(app_settings)

    assert result.error_kind == ErrorKind.CONFIG_TEMPLATE_MISSING
    assert result.failed_step == "WRITE_CONFIG"
    assert fake_runner.commands == [
        "npm install",
        "composer install",
        "npm install",
        "composer install",
    ]


def test_unexpected_error_aborts(app_settings, workspace_paths, fake_runner, mocker):
    mocker.patch(
        "installer.steps.mark_installed", side_effect=PermissionError("read-only")
    )

    result = run_provisioning(app_settings)

    assert result.exit_code == 1
    assert result.error_kind == ErrorKind.UNEXPECTED
    assert result.failed_step == "MARK_INSTALLED"
