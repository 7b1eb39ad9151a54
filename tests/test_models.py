"""Tests for data models and configuration."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ambilink.exceptions import ConfigFileInvalidError, ConfigValidationError
from ambilink.models import (
    AppConfig,
    BridgeTargetConfig,
    Color,
    ColorCommand,
    CommandType,
    ContentEffect,
    TargetId,
)
from ambilink.targets.protocol import encode_color, encode_command, encode_power


@pytest.mark.unit
class TestColor:
    """Color and ColorCommand."""

    def test_channels_validated(self):
        with pytest.raises(ValidationError):
            Color(r=256, g=0, b=0)

    def test_max_channel_delta(self):
        assert Color(r=10, g=50, b=0).max_channel_delta(Color(r=0, g=45, b=3)) == 10

    def test_hex(self):
        assert Color(r=255, g=16, b=0).to_hex() == "#FF1000"

    def test_off_command(self):
        assert ColorCommand.off().as_fields() == (0, 0, 0, 1, 0)


@pytest.mark.unit
class TestEffects:
    """Effect classification."""

    @pytest.mark.parametrize(
        "effect",
        [ContentEffect.LIVE_MODE, ContentEffect.GIF_READER, ContentEffect.VU_METER, ContentEffect.VU_METER_RAINBOW],
    )
    def test_frame_driven(self, effect):
        assert effect.is_frame_driven

    @pytest.mark.parametrize(
        "effect", [ContentEffect.STATIC_COLOR, ContentEffect.LEDS_DISABLED, ContentEffect.UNDEFINED]
    )
    def test_not_frame_driven(self, effect):
        assert not effect.is_frame_driven

    def test_only_vu_effects_use_edges(self):
        edge = {e for e in ContentEffect if e.uses_edge_sampling}
        assert edge == {ContentEffect.VU_METER, ContentEffect.VU_METER_RAINBOW}


@pytest.mark.unit
class TestProtocol:
    """Bridge line encoding."""

    def test_color_line(self):
        command = ColorCommand(color=Color(r=10, g=20, b=30), priority=10, brightness=0)
        assert encode_color(command) == b"ATMOLIGHT,Color,10,20,30,10,0"

    def test_power_lines(self):
        assert encode_power(True) == b"ATMOLIGHT,Power,ON"
        assert encode_power(False, terminator=b"\n") == b"ATMOLIGHT,Power,OFF\n"

    def test_generic_command(self):
        assert encode_command(CommandType.ROOM, "Office") == b"ATMOLIGHT,Room,Office"


@pytest.mark.unit
class TestAppConfig:
    """Defaults, persistence and validation."""

    def test_defaults(self):
        config = AppConfig()
        assert config.reinit_on_error
        assert config.current_effect is ContentEffect.LIVE_MODE
        assert config.bridge.port == 20123
        assert config.bridge.reconnect_attempts == 5
        assert config.serial.baudrate == 115200
        assert config.serial.min_diversion == 15
        assert not config.bridge.enabled

    def test_settings_path_next_to_helper(self):
        bridge = BridgeTargetConfig(helper_path=Path("/opt/atmohue/atmohue.exe"))
        assert bridge.settings_path == Path("/opt/atmohue/settings.xml")
        assert BridgeTargetConfig().settings_path is None

    def test_target_config_lookup(self):
        config = AppConfig()
        assert config.target_config(TargetId.BRIDGE) is config.bridge
        assert config.target_config(TargetId.SERIAL) is config.serial

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        config = AppConfig(
            current_effect=ContentEffect.STATIC_COLOR,
            static_color=Color(r=1, g=2, b=3),
            bridge=BridgeTargetConfig(enabled=True, helper_path=Path("/opt/h/atmohue.exe")),
        )
        config.save(path)

        loaded = AppConfig.load_or_default(path)
        assert loaded == config
        assert json.loads(path.read_text())["bridge"]["helper_path"] == str(Path("/opt/h/atmohue.exe"))

    def test_missing_file_gives_defaults(self, tmp_path):
        assert AppConfig.load_or_default(tmp_path / "nope.json") == AppConfig()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"reinit_on_error": true,}')
        with pytest.raises(ConfigFileInvalidError):
            AppConfig.load_or_default(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("  ")
        with pytest.raises(ConfigFileInvalidError):
            AppConfig.load_or_default(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"bridge": {"port": 70000}}))
        with pytest.raises(ConfigValidationError) as exc_info:
            AppConfig.load_or_default(path)
        assert exc_info.value.field == "bridge.port"

    def test_save_keeps_backup(self, tmp_path):
        path = tmp_path / "config.json"
        AppConfig().save(path)
        AppConfig(reinit_on_error=False).save(path)

        backup = AppConfig.load_or_default(path.with_suffix(".json.bak"))
        assert backup.reinit_on_error
