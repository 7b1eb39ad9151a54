"""Target listing."""

import click

from ambilink.models import TargetId
from ambilink.targets import TargetRegistry

from ._common import load_config


@click.command(name="targets")
@click.option("--all", "show_all", is_flag=True, help="Include disabled targets")
@click.pass_context
def targets(ctx, show_all: bool):
    """List configured targets with their transport and effects."""
    app_config = load_config(ctx)
    registry = TargetRegistry(app_config)

    shown = 0
    for target in TargetId:
        enabled = app_config.target_config(target).enabled
        if not enabled and not show_all:
            continue

        info = registry.describe(target)
        effects = ", ".join(sorted(e.value for e in info.supported_effects))
        state = "enabled" if enabled else "disabled"
        click.echo(f"{target.value} ({state})")
        click.echo(f"  transport: {info.transport_kind.value}")
        click.echo(f"  effects:   {effects}")
        shown += 1

    if shown == 0:
        click.echo("No targets enabled. Use --all to list every target.")
