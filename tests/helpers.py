"""Test helpers and utilities."""
from pathlib import Path
from typing import Optional

from volumetray.app import VolumeTrayCore
from volumetray.config import ConfigStore
from volumetray.core.accelerator import AcceleratorCodec
from volumetray.core.hotkey_capture import HotkeyCapture
from tests.fakes import (
    FakeAudioBackend,
    FakeCaptureSurface,
    FakeHotkeyRegistrar,
    FakeKeyboardGrab,
    FakeKeymap,
    FakeNotificationSink,
    FakeViewNotifier,
)


class CoreTestContext:
    """VolumeTrayCore wired to fake collaborators."""

    def __init__(self, config_path: Path):
        """
        Initialize test context.

        Args:
            config_path: Location of the config file under test
        """
        self.config_path = config_path
        self.errors = []

        self.keymap = FakeKeymap()
        self.codec = AcceleratorCodec(self.keymap)
        self.audio = FakeAudioBackend()
        self.registrar = FakeHotkeyRegistrar()
        self.view = FakeViewNotifier()
        self.notifications = FakeNotificationSink()
        self.grab = FakeKeyboardGrab()
        self.surface = FakeCaptureSurface()

        self.store = ConfigStore(config_path, volume_commands=())
        self.core = VolumeTrayCore(
            self.store,
            self.codec,
            audio=self.audio,
            registrar=self.registrar,
            view=self.view,
            notifications=self.notifications,
            report_error=self.errors.append,
        )
        self.capture: HotkeyCapture = self.core.create_capture(self.grab, self.surface)

    def given_config_file(self, text: str) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(text, encoding="utf-8")

    def when_key_is_typed(self, keycode: int, state: int = 0) -> None:
        self.capture.key_pressed(keycode, state)
        self.capture.key_released()

    def reload(self) -> ConfigStore:
        """A fresh store reading the same file."""
        store = ConfigStore(self.config_path, volume_commands=())
        store.load()
        return store

    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None
