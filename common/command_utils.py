# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import codecs
import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

# Return code reported when the shell itself could not be launched.
LAUNCH_FAILURE_RETURNCODE = 127


class OutputMode(str, Enum):
    """Where a command's standard output goes."""

    INHERIT = "inherit"
    SILENT = "silent"


@dataclass(frozen=True)
class CommandResult:
    command: str
    returncode: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs an installer message at the requested level.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info".
            "success" is logged at info level. Other options are "debug",
            "warning", "error" and "critical".
        current_logger (Optional[logging.Logger]): A logger instance to use for
            logging. If not provided, the module-level logger is used.
        app_settings (Optional[AppSettings]): Application settings; accepted so
            every call site can pass its context through.
        exc_info (bool): Whether to include exception details in the record.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> dict:
    """Return the symbol table from the settings, or the defaults."""
    if app_settings and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def _tee_stderr(process: subprocess.Popen) -> str:
    """Copy a running process's stderr to ours chunk by chunk and return it."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    captured = []
    # read1 returns partial data, so carriage-return progress lines show live.
    for chunk in iter(lambda: process.stderr.read1(4096), b""):
        text = decoder.decode(chunk)
        sys.stderr.write(text)
        sys.stderr.flush()
        captured.append(text)
    captured.append(decoder.decode(b"", final=True))
    process.stderr.close()
    return "".join(captured)


def run_command(
    command: str,
    app_settings: Optional[AppSettings],
    output_mode: OutputMode = OutputMode.SILENT,
    cwd: Optional[Union[str, Path]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> CommandResult:
    """
    Runs a shell command synchronously and reports whether it succeeded.

    In INHERIT mode both output streams reach the terminal; standard error
    is copied there as it arrives while also being captured. In SILENT mode
    standard output is discarded and standard error is only captured. The
    captured text is relayed to the log and returned to the caller. No
    timeout is applied; the call blocks until the process exits.

    Args:
        command (str): The shell command line to execute.
        app_settings (Optional[AppSettings]): Settings providing log symbols.
        output_mode (OutputMode): Visibility of the command's standard output.
        cwd (Optional[Union[str, Path]]): Directory the command runs in. When
            omitted, the current working directory of the process is used.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        CommandResult: The command, its return code and captured stderr. A
            command that could not be launched at all is reported with
            return code 127 rather than raised.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command} {f'(in {cwd})' if cwd else ''}".rstrip(),
        "debug",
        effective_logger,
        app_settings,
    )
    cwd_arg = str(cwd) if cwd is not None else None

    try:
        if output_mode == OutputMode.INHERIT:
            process = subprocess.Popen(
                command,
                shell=True,
                stdout=None,
                stderr=subprocess.PIPE,
                cwd=cwd_arg,
            )
            stderr_raw = _tee_stderr(process)
            returncode = process.wait()
        else:
            completed = subprocess.run(
                command,
                shell=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                cwd=cwd_arg,
            )
            stderr_raw = completed.stderr or ""
            returncode = completed.returncode
    except OSError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Could not launch `{command}`: {e}",
            "error",
            effective_logger,
            app_settings,
        )
        return CommandResult(
            command=command,
            returncode=LAUNCH_FAILURE_RETURNCODE,
            stderr=str(e),
        )

    stderr_text = stderr_raw.strip()
    result = CommandResult(
        command=command, returncode=returncode, stderr=stderr_text
    )

    if result.success:
        if stderr_text:
            log_installer(
                f"   stderr: {stderr_text}",
                "debug",
                effective_logger,
                app_settings,
            )
    else:
        log_installer(
            f"{symbols.get('error', '❌')} Command `{command}` failed (rc {returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if stderr_text:
            log_installer(
                f"   stderr: {stderr_text}",
                "error",
                effective_logger,
                app_settings,
            )
    return result


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
