"""Configuration commands."""

from pathlib import Path

import click

from ambilink.models import AppConfig
from ambilink.models.config import DEFAULT_CONFIG_PATH

from ._common import load_config


def _config_path(ctx: click.Context) -> Path:
    return ctx.obj.get("config_path") or DEFAULT_CONFIG_PATH


@click.group(name="config")
def config():
    """Show or reset the configuration."""
    pass


@config.command(name="show")
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    app_config = load_config(ctx)
    click.echo(app_config.model_dump_json(indent=2))


@config.command(name="path")
@click.pass_context
def config_path(ctx):
    """Print the config file location."""
    click.echo(str(_config_path(ctx)))


@config.command(name="reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_config(ctx, yes: bool):
    """Overwrite the config file with defaults."""
    path = _config_path(ctx)
    if not yes:
        click.confirm(f"Reset {path} to defaults?", abort=True)

    AppConfig().save(path)
    click.echo(f"Configuration reset: {path}")
