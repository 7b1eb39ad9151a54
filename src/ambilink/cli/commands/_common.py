"""Helpers shared by CLI commands."""

import logging
import sys
from pathlib import Path

import click

from ambilink.exceptions import AmbilinkError, format_error_for_display
from ambilink.models import AppConfig, TargetId
from ambilink.orchestration import Orchestrator
from ambilink.targets import TargetRegistry

logger = logging.getLogger(__name__)


def fail(error: Exception, log_path: Path | None = None) -> None:
    """Print a clean error message and exit with status 1."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    if log_path is not None:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)

    sys.exit(1)


def load_config(ctx: click.Context) -> AppConfig:
    """Load the config selected on the command line, exiting on errors."""
    try:
        return AppConfig.load_or_default(ctx.obj.get("config_path"))
    except AmbilinkError as e:
        logger.error(f"Error loading configuration: {e.technical_message}")
        fail(e)


def open_targets(
    ctx: click.Context, app_config: AppConfig, target: str | None, timeout: float
) -> Orchestrator:
    """
    Connect to one target, or to every enabled target.

    Targets that fail to connect are reported but kept, so callers can
    still shut the orchestrator down cleanly.
    """
    from ambilink.cli.main import setup_logging

    setup_logging(*ctx.obj["logging"])

    registry = TargetRegistry(app_config)
    if target is not None:
        handlers = [registry.create(TargetId(target))]
    else:
        handlers = registry.create_enabled()

    if not handlers:
        click.echo("No targets enabled. Enable one in the config or pass --target.")
        sys.exit(1)

    orchestrator = Orchestrator(app_config, handlers)
    orchestrator.initialise()
    for name, connected in orchestrator.wait_until_connected(timeout).items():
        if not connected:
            click.echo(f"Could not connect to {name.value}", err=True)
    return orchestrator


def flush_targets(orchestrator: Orchestrator, timeout: float) -> None:
    for handler in orchestrator.handlers:
        if not handler.supervisor.flush(timeout):
            logger.warning(f"{handler.name.value} - Commands still pending after {timeout}s")
