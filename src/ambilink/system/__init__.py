"""Thin OS glue: helper processes, USB device toggling, helper settings."""

from .devices import DeviceToggler
from .process import ProcessManager
from .settings_store import HelperSettingsStore

__all__ = ["DeviceToggler", "HelperSettingsStore", "ProcessManager"]
