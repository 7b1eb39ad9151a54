"""Bridge helper group listing."""

import click

from ambilink.system import HelperSettingsStore

from ._common import load_config


@click.command(name="groups")
@click.option("--statics", is_flag=True, help="List static colors instead of light groups")
@click.pass_context
def groups(ctx, statics: bool):
    """List light groups (or static colors) from the bridge helper settings."""
    app_config = load_config(ctx)
    settings_path = app_config.bridge.settings_path
    if settings_path is None:
        click.echo("No helper path configured (bridge.helper_path).")
        return

    store = HelperSettingsStore(settings_path)
    names = store.load_static_colors() if statics else store.load_groups()
    what = "static colors" if statics else "groups"

    if not names:
        click.echo(f"No {what} found in {settings_path}")
        return

    click.echo(f"Bridge {what}:\n")
    for name in names:
        click.echo(f"  - {name}")
