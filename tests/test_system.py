"""Tests for process management, device toggling and helper settings."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, call, patch

import pytest

from ambilink.exceptions import ExecutableNotFoundError, ProcessStartError
from ambilink.system import DeviceToggler, HelperSettingsStore, ProcessManager


def fake_process(name):
    proc = Mock()
    proc.info = {"name": name}
    return proc


@pytest.mark.unit
class TestProcessManager:
    """psutil and subprocess are mocked."""

    def test_process_lookup_is_case_insensitive(self):
        procs = [fake_process("explorer.exe"), fake_process("AtmoHue.exe")]
        with patch("ambilink.system.process.psutil.process_iter", return_value=procs):
            assert ProcessManager().is_process_running("atmohue.exe")

    def test_process_not_running(self):
        procs = [fake_process("explorer.exe"), fake_process(None)]
        with patch("ambilink.system.process.psutil.process_iter", return_value=procs):
            assert not ProcessManager().is_process_running("atmohue.exe")

    def test_missing_executable(self, tmp_path):
        with pytest.raises(ExecutableNotFoundError):
            ProcessManager().start_process(tmp_path / "missing.exe")

    def test_start_uses_executable_directory(self, tmp_path):
        exe = tmp_path / "helper.exe"
        exe.write_bytes(b"")

        with patch("ambilink.system.process.subprocess.Popen") as popen:
            ProcessManager().start_process(exe, ["/flag"])

        popen.assert_called_once_with([str(exe), "/flag"], cwd=str(tmp_path))
        popen.return_value.wait.assert_not_called()

    def test_wait_for_exit_times_out_quietly(self, tmp_path):
        exe = tmp_path / "helper.exe"
        exe.write_bytes(b"")

        with patch("ambilink.system.process.subprocess.Popen") as popen:
            popen.return_value.wait.side_effect = subprocess.TimeoutExpired(str(exe), 1.0)
            proc = ProcessManager().start_process(exe, wait_for_exit=True, timeout=1.0)

        assert proc is popen.return_value

    def test_os_error_becomes_process_start_error(self, tmp_path):
        exe = tmp_path / "helper.exe"
        exe.write_bytes(b"")

        with patch("ambilink.system.process.subprocess.Popen", side_effect=PermissionError("denied")):
            with pytest.raises(ProcessStartError) as exc_info:
                ProcessManager().start_process(exe)

        assert "denied" in exc_info.value.technical_message


@pytest.mark.unit
class TestDeviceToggler:
    """Disable / enable sequence."""

    def test_reconnect_port_sequence(self):
        processes = Mock(spec=ProcessManager)
        sleep = Mock()
        tool = Path("/tools/toggler.exe")
        toggler = DeviceToggler(tool, processes, settle_delay=1.5, sleep=sleep)

        assert toggler.reconnect_port("COM3")

        assert processes.start_process.call_args_list == [
            call(tool, ["/disable_by_drive", "COM3"], wait_for_exit=True),
            call(tool, ["/enable_by_drive", "COM3"], wait_for_exit=True),
        ]
        assert sleep.call_args_list == [call(1.5), call(1.5)]

    def test_missing_tool_reports_failure(self):
        toggler = DeviceToggler(None, Mock(spec=ProcessManager), sleep=Mock())
        assert not toggler.reconnect_port("COM3")

    def test_direct_call_without_tool_raises(self):
        toggler = DeviceToggler(None, Mock(spec=ProcessManager))
        with pytest.raises(ExecutableNotFoundError):
            toggler.disable_device_by_port("COM3")


SETTINGS_XML = """<?xml version="1.0" encoding="utf-8"?>
<Settings>
  <LedLocation><Location>Living room</Location></LedLocation>
  <LedLocation><Location>Kitchen</Location></LedLocation>
  <LedStaticColor><Name>Warm white</Name></LedStaticColor>
</Settings>
"""


@pytest.mark.integration
class TestHelperSettingsStore:
    """Reading the helper's settings.xml."""

    def test_loads_groups_and_static_colors(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text(SETTINGS_XML, encoding="utf-8")
        store = HelperSettingsStore(path)

        assert store.load_groups() == ["Living room", "Kitchen"]
        assert store.load_static_colors() == ["Warm white"]

    def test_missing_file_returns_empty(self, tmp_path):
        store = HelperSettingsStore(tmp_path / "settings.xml")
        assert store.load_groups() == []

    def test_no_path_returns_empty(self):
        assert HelperSettingsStore(None).load_static_colors() == []

    def test_invalid_xml_returns_empty(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text("<Settings><LedLocation>", encoding="utf-8")
        assert HelperSettingsStore(path).load_groups() == []
