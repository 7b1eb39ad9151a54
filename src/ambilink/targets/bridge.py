"""Network light bridge reached through the AtmoHue helper process."""

import logging

from ambilink.core import ConnectionSupervisor
from ambilink.models import (
    AppConfig,
    BridgeTargetConfig,
    CommandType,
    ContentEffect,
    TargetId,
    TargetInfo,
    TransportKind,
)
from ambilink.system import HelperSettingsStore

from . import protocol
from .base import TargetHandler

logger = logging.getLogger(__name__)

BRIDGE_EFFECTS = frozenset({
    ContentEffect.GIF_READER,
    ContentEffect.LEDS_DISABLED,
    ContentEffect.LIVE_MODE,
    ContentEffect.STATIC_COLOR,
    ContentEffect.VU_METER,
    ContentEffect.VU_METER_RAINBOW,
})


class BridgeTargetHandler(TargetHandler):
    """
    Handler for the light bridge.

    Besides colors and power, the bridge understands group and room
    selection. Group and static-color names come from the helper's
    ``settings.xml``.
    """

    def __init__(
        self,
        app_config: AppConfig,
        target_config: BridgeTargetConfig,
        supervisor: ConnectionSupervisor,
        settings_store: HelperSettingsStore | None = None,
    ):
        self._info = self.describe(target_config)
        self._settings = settings_store or HelperSettingsStore(target_config.settings_path)
        super().__init__(app_config, target_config, supervisor)

    @classmethod
    def describe(cls, target_config: BridgeTargetConfig) -> TargetInfo:
        """Capabilities of a bridge configured as ``target_config``."""
        kind = TransportKind.NETWORK if target_config.is_remote_machine else TransportKind.LOCAL_PROCESS
        return TargetInfo(
            target=TargetId.BRIDGE,
            transport_kind=kind,
            supported_effects=BRIDGE_EFFECTS,
            allow_delay=False,
        )

    @property
    def info(self) -> TargetInfo:
        return self._info

    # ================================================================
    # GROUPS AND ROOMS
    # ================================================================

    def set_active_group(self, group: str) -> bool:
        """Only drive the lights of ``group``."""
        payload = protocol.encode_command(CommandType.GROUP, "OnlyActivate", group)
        return self._supervisor.send(payload)

    def set_group_static_color(self, group: str, color: str) -> bool:
        """Set ``group`` to one of the helper's named static colors."""
        payload = protocol.encode_command(CommandType.GROUP, "SetStaticColor", group, color)
        return self._supervisor.send(payload)

    def set_room(self, room: str) -> bool:
        payload = protocol.encode_command(CommandType.ROOM, room)
        return self._supervisor.send(payload)

    def load_groups(self) -> list[str]:
        return self._settings.load_groups()

    def load_static_colors(self) -> list[str]:
        return self._settings.load_static_colors()
