# installer/cli.py
# -*- coding: utf-8 -*-
"""
Command-line interface of the Baxoo installer.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from common.command_utils import get_symbols
from common.logging_config import installer_console
from installer.config_loader import load_app_settings
from installer.pipeline import run_provisioning
from installer.step_executor import report_failure

module_logger = logging.getLogger(__name__)


def provision_workspace(
    config_file: Optional[Path] = None, verbose: bool = False
) -> int:
    """
    Load settings, open the console and run the provisioning pipeline.

    Returns the process exit code: 0 when the workspace was provisioned, 1
    on any abort, including errors nobody anticipated. Invalid settings
    raise SystemExit with a configuration error message.
    """
    app_settings = load_app_settings(config_file_path=config_file)

    try:
        with installer_console(app_settings, verbose=verbose) as console_logger:
            try:
                result = run_provisioning(app_settings, console_logger)
            except Exception as e:
                report_failure(e, app_settings, console_logger)
                return 1
            return result.exit_code
    except OSError as e:
        # No handler is attached yet, so the diagnostic goes straight to stderr.
        symbols = get_symbols(app_settings)
        print(
            f"{app_settings.log_prefix} {symbols.get('critical', '🔥')} Could not set up installer logging: {e}",
            file=sys.stderr,
        )
        return 1


@click.group()
@click.option(
    "-v", "--verbose", is_flag=True, help="Enable verbose output."
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file (defaults to ./baxoo.yaml).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Optional[Path]):
    """Bootstrap a Baxoo application workspace."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_file"] = config_file


@cli.command(name="new")
@click.pass_context
def new_command(ctx: click.Context):
    """Install dependencies and configure the project."""
    exit_code = provision_workspace(
        config_file=ctx.obj.get("config_file"),
        verbose=ctx.obj.get("verbose", False),
    )
    sys.exit(exit_code)


def main() -> None:
    cli(prog_name="baxoo")
