"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path

import click

from ambilink import __version__
from ambilink.models.config import DEFAULT_CONFIG_DIR

from .commands import color, config, effect, groups, targets

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    return DEFAULT_CONFIG_DIR / "logs" / "ambilink.log"


def setup_logging(verbose: int, debug: bool, log_file: Path | None, log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log everything to ./ambilink-debug.log
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Explicit log level wins for custom log files
    if log_file:
        level = getattr(logging, log_level.upper())

    if debug and not log_file:
        log_path = Path.cwd() / "ambilink-debug.log"
    elif log_file:
        log_path = log_file
    else:
        log_path = default_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Keeps last 5 files, max 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="ambilink")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.ambilink/config.json)",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode (DEBUG level, logs to ./ambilink-debug.log)",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom log file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(
    ctx,
    config_path: Path | None,
    verbose: int,
    debug: bool,
    log_file: Path | None,
    log_level: str,
):
    """
    Ambilink - drive ambient lighting targets from captured screen colors.

    \b
    Examples:
      # Show the configuration
      ambilink config show

      # List enabled targets
      ambilink targets

      # Set the bridge to red
      ambilink color 255 0 0 --target bridge

      # Switch every enabled target to the static color effect
      ambilink effect static_color

      # List light groups known to the bridge helper
      ambilink groups
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["logging"] = (verbose, debug, log_file, log_level)


cli.add_command(config)
cli.add_command(targets)
cli.add_command(color)
cli.add_command(effect)
cli.add_command(groups)

if __name__ == "__main__":
    cli()
