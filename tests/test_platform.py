"""Tests for the platform adapter layer."""
from pathlib import Path

from volumetray.config import ConfigStore
from volumetray.platform import get_platform_adapter
from volumetray.platform.factory import GenericPlatformAdapter
from volumetray.platform.linux import LinuxPlatformAdapter
from volumetray.platform.windows import WindowsPlatformAdapter


def test_linux_adapter(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    adapter = get_platform_adapter("linux")

    assert isinstance(adapter, LinuxPlatformAdapter)
    assert adapter.config_dir == tmp_path
    assert list(adapter.volume_control_commands) == [
        "pavucontrol",
        "gnome-alsamixer",
        "xfce4-mixer",
        "alsamixergui",
    ]


def test_linux_adapter_without_xdg(monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

    assert get_platform_adapter("linux").config_dir == Path.home() / ".config"


def test_windows_adapter(monkeypatch, tmp_path):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    adapter = get_platform_adapter("win32")

    assert isinstance(adapter, WindowsPlatformAdapter)
    assert adapter.config_dir == tmp_path


def test_unknown_platform_probes_nothing():
    adapter = get_platform_adapter("darwin")

    assert isinstance(adapter, GenericPlatformAdapter)
    assert adapter.volume_control_commands == ()


def test_adapter_is_cached():
    assert get_platform_adapter("linux") is get_platform_adapter("linux")


def test_store_uses_platform_config_dir():
    store = ConfigStore()

    assert store.config_path.name == "config.yaml"
    assert store.config_path.parent.name == "volumetray"
