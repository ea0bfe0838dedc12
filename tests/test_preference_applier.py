"""Tests for the preference applier."""

import pytest

from volumetray.config import ChangeDomain, HotkeyAction, ValueKind
from volumetray.core.preference_applier import PreferenceApplier
from volumetray.core.preferences import ChangeSet
from tests.fakes import (
    FakeAudioBackend,
    FakeHotkeyRegistrar,
    FakeNotificationSink,
    FakeViewNotifier,
)


@pytest.fixture
def audio():
    return FakeAudioBackend()


@pytest.fixture
def registrar():
    return FakeHotkeyRegistrar()


@pytest.fixture
def view():
    return FakeViewNotifier()


@pytest.fixture
def notifications():
    return FakeNotificationSink()


@pytest.fixture
def applier(store, audio, registrar, view, notifications):
    return PreferenceApplier(
        store,
        audio=audio,
        registrar=registrar,
        view=view,
        notifications=notifications,
    )


def changes(*domains):
    return ChangeSet(frozenset(domains))


def test_only_named_domains_are_applied(applier, audio, registrar, view, notifications):
    applier.apply(changes(ChangeDomain.VIEW_REFRESH))

    assert len(view.refreshes) == 1
    assert audio.reinits == []
    assert registrar.armed == []
    assert registrar.disarm_count == 0
    assert notifications.configured == []


def test_empty_change_set_touches_nothing(applier, audio, registrar, view, notifications):
    failed = applier.apply(ChangeSet())

    assert failed == []
    assert audio.reinits == [] and view.refreshes == [] and notifications.configured == []


def test_audio_reinit_uses_device_channel(applier, store, audio):
    store.set(ValueKind.STRING, "AudioDevice", "hw:1")
    store.set_channel("hw:1", "Headphone")

    applier.apply(changes(ChangeDomain.AUDIO_REINIT))

    assert audio.reinits == [("hw:1", "Headphone")]


def test_enabled_hotkeys_are_armed(applier, store, registrar):
    store.set(ValueKind.BOOLEAN, "EnableHotKeys", True)
    store.set(ValueKind.INTEGER, "HotkeyVolumeStep", 3)
    store.set(ValueKind.STRING, "VolUpKey", "<ctrl>+<f2>")

    applier.apply(changes(ChangeDomain.HOTKEY_REBIND))

    bindings = registrar.current
    assert bindings.enabled
    assert bindings.step == 3
    assert bindings.bound() == {HotkeyAction.VOLUME_UP: "<ctrl>+<f2>"}


def test_disabled_hotkeys_are_disarmed(applier, registrar):
    applier.apply(changes(ChangeDomain.HOTKEY_REBIND))

    assert registrar.armed == []
    assert registrar.disarm_count == 1


def test_view_options_reflect_store(applier, store, view):
    store.set_vol_meter_color([0.0, 0.5, 1.0])
    store.set(ValueKind.STRING, "SliderOrientation", "sideways")

    applier.apply(changes(ChangeDomain.VIEW_REFRESH))

    options = view.refreshes[-1]
    assert options.vol_meter_color == (0.0, 0.5, 1.0)
    assert options.slider_orientation == "vertical"
    assert options.scroll_step == 5.0


def test_notification_options_use_defaults(applier, notifications):
    applier.apply(changes(ChangeDomain.NOTIFICATION_REFRESH))

    options = notifications.configured[-1]
    assert options.enabled is False
    assert options.hotkey is True
    assert options.timeout_ms == 1500


def test_failing_collaborator_does_not_stop_others(applier, audio, view):
    audio.should_fail = True

    failed = applier.apply(changes(ChangeDomain.AUDIO_REINIT, ChangeDomain.VIEW_REFRESH))

    assert failed == [ChangeDomain.AUDIO_REINIT]
    assert len(view.refreshes) == 1


def test_apply_all(applier, audio, registrar, view, notifications):
    failed = applier.apply_all()

    assert failed == []
    assert audio.reinits == [("default", None)]
    assert registrar.disarm_count == 1
    assert len(view.refreshes) == 1
    assert len(notifications.configured) == 1


def test_missing_collaborators_are_skipped(store):
    applier = PreferenceApplier(store)

    assert applier.apply_all() == []
