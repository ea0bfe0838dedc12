"""Fake subsystems notified by the preference applier."""
from typing import List, Optional, Tuple

from volumetray.config.types import HotkeyBindings, NotificationOptions, ViewOptions


class FakeAudioBackend:
    """Audio backend that records reinitialisations."""

    def __init__(self):
        self.reinits: List[Tuple[str, Optional[str]]] = []
        self.should_fail = False

    def reinit(self, device: str, channel: Optional[str]) -> None:
        if self.should_fail:
            raise RuntimeError("audio backend failed")
        self.reinits.append((device, channel))


class FakeHotkeyRegistrar:
    """Hotkey registrar that records arm and disarm calls."""

    def __init__(self):
        self.armed: List[HotkeyBindings] = []
        self.disarm_count = 0

    @property
    def current(self) -> Optional[HotkeyBindings]:
        return self.armed[-1] if self.armed else None

    def arm(self, bindings: HotkeyBindings) -> None:
        self.armed.append(bindings)

    def disarm(self) -> None:
        self.disarm_count += 1


class FakeViewNotifier:
    """View notifier that records refreshed options."""

    def __init__(self):
        self.refreshes: List[ViewOptions] = []

    def refresh(self, options: ViewOptions) -> None:
        self.refreshes.append(options)


class FakeNotificationSink:
    """Notification sink that records configured options."""

    def __init__(self):
        self.configured: List[NotificationOptions] = []

    def configure(self, options: NotificationOptions) -> None:
        self.configured.append(options)
