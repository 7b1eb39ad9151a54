"""Commands that send to targets: color and effect."""

import click

from ambilink.models import PRIORITY_STATIC, Color, ColorCommand, ContentEffect, TargetId

from ._common import flush_targets, load_config, open_targets

_TARGET_OPTION = click.option(
    "--target",
    "-t",
    type=click.Choice([t.value for t in TargetId], case_sensitive=False),
    default=None,
    help="Only this target, enabled or not (default: all enabled targets)",
)
_TIMEOUT_OPTION = click.option(
    "--timeout",
    type=float,
    default=10.0,
    show_default=True,
    help="Seconds to wait for connecting and sending",
)


@click.command(name="color")
@click.argument("red", type=click.IntRange(0, 255))
@click.argument("green", type=click.IntRange(0, 255))
@click.argument("blue", type=click.IntRange(0, 255))
@click.option(
    "--priority",
    type=click.IntRange(0, None),
    default=PRIORITY_STATIC,
    show_default=True,
    help="Command priority understood by the bridge",
)
@click.option("--brightness", type=click.IntRange(0, 255), default=0, show_default=True)
@_TARGET_OPTION
@_TIMEOUT_OPTION
@click.pass_context
def color(ctx, red: int, green: int, blue: int, priority: int, brightness: int, target, timeout):
    """Send one color to the targets."""
    app_config = load_config(ctx)
    command = ColorCommand(
        color=Color(r=red, g=green, b=blue), priority=priority, brightness=brightness
    )

    with open_targets(ctx, app_config, target, timeout) as orchestrator:
        for handler in orchestrator.handlers:
            sent = handler.change_color(command)
            click.echo(f"{handler.name.value}: {'sent' if sent else 'not connected'} {command.color.to_hex()}")
        flush_targets(orchestrator, timeout)


@click.command(name="effect")
@click.argument("name", type=click.Choice([e.value for e in ContentEffect], case_sensitive=False))
@click.option("--save", is_flag=True, help="Store the effect as the startup effect")
@_TARGET_OPTION
@_TIMEOUT_OPTION
@click.pass_context
def effect(ctx, name: str, save: bool, target, timeout):
    """Switch the targets to an effect."""
    app_config = load_config(ctx)
    content_effect = ContentEffect(name.lower())

    with open_targets(ctx, app_config, target, timeout) as orchestrator:
        results = orchestrator.change_effect(content_effect)
        for name_, applied in results.items():
            click.echo(f"{name_.value}: {'applied' if applied else 'not connected'} {content_effect.value}")
        flush_targets(orchestrator, timeout)

    if save:
        app_config.current_effect = content_effect
        app_config.save(ctx.obj.get("config_path"))
        click.echo(f"Startup effect saved: {content_effect.value}")
