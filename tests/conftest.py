"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from volumetray.config import ConfigStore
from volumetray.core.accelerator import AcceleratorCodec
from volumetray.core.hotkey_capture import HotkeyCapture
from tests.fakes import FakeBindingSink, FakeCaptureSurface, FakeKeyboardGrab, FakeKeymap


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    return tmp_path / "volumetray" / "config.yaml"


@pytest.fixture
def store(temp_config_path: Path) -> ConfigStore:
    """A store loaded from the embedded default document."""
    store = ConfigStore(temp_config_path, volume_commands=())
    store.load()
    return store


@pytest.fixture
def keymap() -> FakeKeymap:
    return FakeKeymap()


@pytest.fixture
def codec(keymap: FakeKeymap) -> AcceleratorCodec:
    return AcceleratorCodec(keymap)


@pytest.fixture
def grab() -> FakeKeyboardGrab:
    return FakeKeyboardGrab()


@pytest.fixture
def surface() -> FakeCaptureSurface:
    return FakeCaptureSurface()


@pytest.fixture
def sink() -> FakeBindingSink:
    return FakeBindingSink()


@pytest.fixture
def capture(codec, grab, surface) -> HotkeyCapture:
    return HotkeyCapture(codec, grab, surface)
