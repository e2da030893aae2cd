# installer/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual provisioning steps.

A step either completes or fails; failures are turned into a StepOutcome
with a logged diagnostic instead of propagating, so the pipeline can stop
at the first failed step.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from common.command_utils import get_symbols, log_installer
from installer.config_models import AppSettings
from installer.errors import ErrorKind, ProvisioningError
from installer.paths import WorkspacePaths

module_logger = logging.getLogger(__name__)

StepFunction = Callable[[AppSettings, WorkspacePaths, Optional[logging.Logger]], None]


@dataclass(frozen=True)
class StepOutcome:
    step_tag: str
    success: bool
    error_kind: Optional[ErrorKind] = None
    message: str = ""


def report_failure(
    error: BaseException,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> ErrorKind:
    """
    Log the diagnostic for `error` and return its kind.

    Anticipated errors get a one-line message with their symbol. Anything
    else is logged as unexpected, with the traceback.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if isinstance(error, ProvisioningError):
        log_installer(
            f"{symbols.get(error.symbol, '❌')} {error}",
            "warning" if error.symbol == "warning" else "error",
            logger_to_use,
            app_settings,
        )
        return error.kind

    log_installer(
        f"{symbols.get('error', '❌')} An error occurred during installation: {error}",
        "critical",
        logger_to_use,
        app_settings,
        exc_info=True,
    )
    return ErrorKind.UNEXPECTED


def execute_step(
    step_tag: str,
    step_description: str,
    step_function: StepFunction,
    app_settings: AppSettings,
    paths: WorkspacePaths,
    current_logger_instance: Optional[logging.Logger] = None,
) -> StepOutcome:
    """
    Execute a single provisioning step.

    Args:
        step_tag: A unique string identifier for the step.
        step_description: A human-readable description of the step.
        step_function: The function to call to execute the step. Expected
            signature: (app_settings, paths, current_logger) -> None. Raising
            a ProvisioningError marks an anticipated failure; any other
            exception is reported as unexpected.
        app_settings: The application settings object.
        paths: The resolved workspace paths.
        current_logger_instance: The logger instance to use.

    Returns:
        StepOutcome describing success, or the kind of failure.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = get_symbols(app_settings)

    log_installer(
        f"--- {symbols.get('step', '➡️')} Executing: {step_description} ({step_tag}) ---",
        "debug",
        logger_to_use,
        app_settings,
    )
    try:
        step_function(app_settings, paths, logger_to_use)
    except Exception as e:
        kind = report_failure(e, app_settings, logger_to_use)
        log_installer(
            f"FAILED: {step_description} ({step_tag})",
            "debug",
            logger_to_use,
            app_settings,
        )
        return StepOutcome(
            step_tag=step_tag, success=False, error_kind=kind, message=str(e)
        )

    log_installer(
        f"--- {symbols.get('success', '✅')} Successfully completed: {step_description} ({step_tag}) ---",
        "debug",
        logger_to_use,
        app_settings,
    )
    return StepOutcome(step_tag=step_tag, success=True)
