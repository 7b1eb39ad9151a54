"""CLI commands for ambilink."""

from .config import config
from .control import color, effect
from .groups import groups
from .targets import targets

__all__ = ["color", "config", "effect", "groups", "targets"]
