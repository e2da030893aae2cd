# installer/pipeline.py
# -*- coding: utf-8 -*-
"""
The workspace provisioning pipeline.

Runs a fixed, linear sequence of steps:

    START -> PRECONDITION_CHECK -> CLONE -> INSTALL_DEPS_A -> INSTALL_DEPS_B
          -> WRITE_CONFIG -> INSTALL_STATIC_DEPS -> MARK_INSTALLED -> DONE

Each step runs only if every previous step succeeded. The first failure moves
the pipeline to ABORTED; nothing is retried and nothing is rolled back.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import List, Optional

from common.command_utils import get_symbols, log_installer
from installer.config_models import AppSettings
from installer.errors import ErrorKind
from installer.paths import WorkspacePaths
from installer.preconditions import (
    check_not_installed,
    check_required_tools,
    check_target_directory,
)
from installer.step_executor import StepFunction, execute_step
from installer.steps import (
    clone_repository,
    install_static_dependencies,
    install_sub_project_step,
    mark_installation_complete,
    write_env_config,
)

module_logger = logging.getLogger(__name__)


class ProvisioningState(str, Enum):
    START = "start"
    PRECONDITION_CHECK = "precondition_check"
    CLONE = "clone"
    INSTALL_DEPS_A = "install_deps_a"
    INSTALL_DEPS_B = "install_deps_b"
    WRITE_CONFIG = "write_config"
    INSTALL_STATIC_DEPS = "install_static_deps"
    MARK_INSTALLED = "mark_installed"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PipelineStep:
    tag: str
    description: str
    state: ProvisioningState
    function: StepFunction


@dataclass
class PipelineResult:
    final_state: ProvisioningState = ProvisioningState.START
    visited_states: List[ProvisioningState] = field(default_factory=list)
    completed_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.final_state == ProvisioningState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def check_preconditions(
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Abort before any mutation if the workspace is installed, tools are missing, or the target is dirty."""
    check_not_installed(paths, app_settings, current_logger)
    if app_settings.preflight_tools:
        check_required_tools(app_settings, current_logger)
    check_target_directory(paths, app_settings, current_logger)


def build_steps(app_settings: AppSettings) -> List[PipelineStep]:
    """The ordered pipeline, precondition check first."""
    first_project, second_project = app_settings.sub_projects
    return [
        PipelineStep(
            "PRECONDITION_CHECK",
            "Check installation state and target directory",
            ProvisioningState.PRECONDITION_CHECK,
            check_preconditions,
        ),
        PipelineStep(
            "CLONE_REPOSITORY",
            "Clone the application repository",
            ProvisioningState.CLONE,
            clone_repository,
        ),
        PipelineStep(
            "INSTALL_DEPS_A",
            f"Install dependencies for '{first_project}'",
            ProvisioningState.INSTALL_DEPS_A,
            partial(install_sub_project_step, 0),
        ),
        PipelineStep(
            "INSTALL_DEPS_B",
            f"Install dependencies for '{second_project}'",
            ProvisioningState.INSTALL_DEPS_B,
            partial(install_sub_project_step, 1),
        ),
        PipelineStep(
            "WRITE_CONFIG",
            "Write the environment configuration",
            ProvisioningState.WRITE_CONFIG,
            write_env_config,
        ),
        PipelineStep(
            "INSTALL_STATIC_DEPS",
            "Install static project dependencies",
            ProvisioningState.INSTALL_STATIC_DEPS,
            install_static_dependencies,
        ),
        PipelineStep(
            "MARK_INSTALLED",
            "Record the installation as complete",
            ProvisioningState.MARK_INSTALLED,
            mark_installation_complete,
        ),
    ]


def run_provisioning(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    paths: Optional[WorkspacePaths] = None,
) -> PipelineResult:
    """
    Provision the workspace described by `app_settings`.

    Returns a PipelineResult whose final_state is DONE on success or ABORTED
    on the first failed step. Step failures never propagate as exceptions.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    workspace_paths = paths if paths else WorkspacePaths.from_settings(app_settings)

    result = PipelineResult(visited_states=[ProvisioningState.START])
    for step in build_steps(app_settings):
        result.visited_states.append(step.state)
        outcome = execute_step(
            step.tag,
            step.description,
            step.function,
            app_settings,
            workspace_paths,
            logger_to_use,
        )
        if not outcome.success:
            result.failed_step = step.tag
            result.error_kind = outcome.error_kind
            result.final_state = ProvisioningState.ABORTED
            result.visited_states.append(ProvisioningState.ABORTED)
            return result
        result.completed_steps.append(step.tag)

    result.final_state = ProvisioningState.DONE
    result.visited_states.append(ProvisioningState.DONE)
    log_installer(
        f"{symbols.get('party', '🎉')} Installation completed!",
        "info",
        logger_to_use,
        app_settings,
    )
    return result
