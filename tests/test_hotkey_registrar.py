"""Tests for the pynput global hotkey registrar."""
import pytest

pytest.importorskip("pynput.keyboard")

from volumetray.config import HotkeyAction, HotkeyBindings
from volumetray.platform import hotkeys
from volumetray.platform.hotkeys import PynputHotkeyRegistrar


class FakeGlobalHotKeys:
    """Stand-in for pynput's listener thread."""

    instances = []

    def __init__(self, hotkeys):
        self.hotkeys = hotkeys
        self.started = False
        self.stopped = False
        FakeGlobalHotKeys.instances.append(self)

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True


@pytest.fixture(autouse=True)
def fake_listener(monkeypatch):
    FakeGlobalHotKeys.instances = []
    monkeypatch.setattr(hotkeys.keyboard, "GlobalHotKeys", FakeGlobalHotKeys)
    return FakeGlobalHotKeys


@pytest.fixture
def pressed():
    return []


@pytest.fixture
def registrar(codec, pressed):
    return PynputHotkeyRegistrar(codec, lambda action, step: pressed.append((action, step)))


def bindings(**accelerators):
    return HotkeyBindings(
        enabled=True,
        step=2,
        accelerators={HotkeyAction.from_name(name): text for name, text in accelerators.items()},
    )


def test_arm_registers_bound_hotkeys(registrar, fake_listener, pressed):
    registrar.arm(bindings(mute="<ctrl>+m", up="<ctrl>+<f2>", down="(None)"))

    listener = fake_listener.instances[-1]
    assert listener.started
    assert set(listener.hotkeys) == {"<ctrl>+m", "<ctrl>+<f2>"}

    listener.hotkeys["<ctrl>+<f2>"]()
    assert pressed == [(HotkeyAction.VOLUME_UP, 2)]


def test_unresolvable_and_malformed_bindings_are_skipped(registrar, fake_listener):
    registrar.arm(bindings(mute="<ctrl>+<f13>", up="<hyper>+u", down="<alt>+d"))

    assert set(fake_listener.instances[-1].hotkeys) == {"<alt>+d"}


def test_nothing_bound_starts_no_listener(registrar, fake_listener):
    registrar.arm(bindings(mute="(None)"))

    assert fake_listener.instances == []
    assert not registrar.is_armed


def test_rearm_stops_previous_listener(registrar, fake_listener):
    registrar.arm(bindings(mute="<ctrl>+m"))
    registrar.arm(bindings(mute="<ctrl>+n"))

    first, second = fake_listener.instances
    assert first.stopped
    assert not second.stopped


def test_disarm(registrar, fake_listener):
    registrar.arm(bindings(mute="<ctrl>+m"))

    registrar.disarm()
    registrar.disarm()

    assert fake_listener.instances[-1].stopped
    assert not registrar.is_armed


def test_disabled_bindings_only_disarm(registrar, fake_listener):
    registrar.arm(bindings(mute="<ctrl>+m"))

    registrar.arm(HotkeyBindings(enabled=False))

    assert len(fake_listener.instances) == 1
    assert not registrar.is_armed
