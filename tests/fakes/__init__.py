"""Fake collaborators for testing."""
from tests.fakes.fake_capture import FakeBindingSink, FakeCaptureSurface, FakeKeyboardGrab
from tests.fakes.fake_collaborators import (
    FakeAudioBackend,
    FakeHotkeyRegistrar,
    FakeNotificationSink,
    FakeViewNotifier,
)
from tests.fakes.fake_keymap import FakeKeymap

__all__ = [
    "FakeAudioBackend",
    "FakeBindingSink",
    "FakeCaptureSurface",
    "FakeHotkeyRegistrar",
    "FakeKeyboardGrab",
    "FakeKeymap",
    "FakeNotificationSink",
    "FakeViewNotifier",
]
