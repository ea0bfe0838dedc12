"""Tests for the hotkey capture state machine and its controller."""

import pytest

from volumetray.config.types import HotkeyAction
from volumetray.core.hotkey_capture import (
    IDLE_SESSION,
    AcquireGrab,
    Activate,
    Aborted,
    CaptureSession,
    CaptureState,
    Dismissed,
    DismissSurface,
    GrabAcquired,
    GrabDenied,
    HotkeyCapture,
    KeyPressed,
    KeyReleased,
    PresentSurface,
    ReleaseGrab,
    ReportError,
    ShowCandidate,
    StageBinding,
    transition,
)
from volumetray.errors import CaptureInProgress, GrabUnavailable, InvalidWidgetTarget
from volumetray.platform.base import ModifierMask
from tests.fakes import FakeKeyboardGrab
from tests.fakes.fake_keymap import KEY_BROKEN, KEY_F2

CTRL = int(ModifierMask.CONTROL)
LISTENING_UP = CaptureSession(CaptureState.LISTENING, HotkeyAction.VOLUME_UP, grab_acquired=True)


class TestTransition:

    def test_double_click_starts_grabbing(self, codec):
        session, effects = transition(IDLE_SESSION, Activate("up"), codec)

        assert session.state is CaptureState.GRABBING
        assert session.target is HotkeyAction.VOLUME_UP
        assert effects == [AcquireGrab()]

    @pytest.mark.parametrize("button, clicks", [(1, 1), (3, 2), (2, 2)])
    def test_other_gestures_are_ignored(self, codec, button, clicks):
        session, effects = transition(IDLE_SESSION, Activate("mute", button, clicks), codec)

        assert session is IDLE_SESSION
        assert effects == []

    def test_unknown_target_is_rejected_before_grabbing(self, codec):
        with pytest.raises(InvalidWidgetTarget):
            transition(IDLE_SESSION, Activate("balance"), codec)

    def test_activation_while_active_is_rejected(self, codec):
        with pytest.raises(CaptureInProgress):
            transition(LISTENING_UP, Activate("mute"), codec)

    def test_grab_acquired_presents_surface(self, codec):
        grabbing = CaptureSession(CaptureState.GRABBING, HotkeyAction.MUTE)

        session, effects = transition(grabbing, GrabAcquired(), codec)

        assert session.state is CaptureState.LISTENING
        assert session.grab_acquired
        assert effects == [PresentSurface(HotkeyAction.MUTE)]

    def test_grab_denied_returns_to_idle(self, codec):
        grabbing = CaptureSession(CaptureState.GRABBING, HotkeyAction.MUTE)

        session, effects = transition(grabbing, GrabDenied(), codec)

        assert session is IDLE_SESSION
        assert effects == [ReportError("Could not grab the keyboard.")]

    def test_key_press_updates_candidate(self, codec):
        session, effects = transition(LISTENING_UP, KeyPressed(KEY_F2, CTRL), codec)

        assert session.candidate == "<ctrl>+<f2>"
        assert session.key_pressed
        assert effects == [ShowCandidate("<ctrl>+<f2>")]

    def test_ctrl_c_clears_the_binding(self, codec):
        session, effects = transition(LISTENING_UP, KeyPressed(ord("C"), CTRL), codec)

        assert session.candidate == "(None)"
        assert effects == [ShowCandidate("(None)")]

    def test_release_commits_with_release_grab_first(self, codec):
        pressed, _ = transition(LISTENING_UP, KeyPressed(ord("A"), 0), codec)

        session, effects = transition(pressed, KeyReleased(), codec)

        assert session.state is CaptureState.COMMITTED
        assert not session.grab_acquired
        assert effects == [
            ReleaseGrab(),
            StageBinding(HotkeyAction.VOLUME_UP, "a"),
            DismissSurface(),
        ]

    def test_release_without_press_is_ignored(self, codec):
        session, effects = transition(LISTENING_UP, KeyReleased(), codec)

        assert session is LISTENING_UP
        assert effects == []

    def test_dismiss_while_listening(self, codec):
        session, effects = transition(LISTENING_UP, Dismissed(), codec)

        assert session.state is CaptureState.CANCELLED
        assert effects == [ReleaseGrab(), DismissSurface()]

    def test_abort_reports_reason(self, codec):
        session, effects = transition(LISTENING_UP, Aborted("keymap failed"), codec)

        assert session.state is CaptureState.CANCELLED
        assert effects == [ReleaseGrab(), DismissSurface(), ReportError("keymap failed")]

    def test_events_outside_listening_are_ignored(self, codec):
        for event in (KeyPressed(ord("A"), 0), KeyReleased(), Dismissed(), GrabAcquired()):
            session, effects = transition(IDLE_SESSION, event, codec)
            assert session is IDLE_SESSION
            assert effects == []


class TestHotkeyCapture:

    def test_full_capture(self, capture, grab, surface, sink):
        started = capture.activate("down", sink)
        capture.key_pressed(ord("D"), CTRL)
        capture.key_released()

        assert started is True
        assert capture.state is CaptureState.COMMITTED
        assert surface.presented == [HotkeyAction.VOLUME_DOWN]
        assert surface.candidates == ["<ctrl>+d"]
        assert surface.dismiss_count == 1
        assert sink.staged == [(HotkeyAction.VOLUME_DOWN, "<ctrl>+d")]
        assert grab.acquire_count == 1
        assert grab.release_count == 1

    def test_last_press_wins(self, capture, sink):
        capture.activate("mute", sink)
        capture.key_pressed(ord("A"), 0)
        capture.key_pressed(ord("B"), CTRL)
        capture.key_released()

        assert sink.staged == [(HotkeyAction.MUTE, "<ctrl>+b")]

    def test_ignored_gesture_does_not_grab(self, capture, grab, sink):
        started = capture.activate("mute", sink, button=1, click_count=1)

        assert started is False
        assert capture.state is CaptureState.IDLE
        assert grab.acquire_count == 0

    def test_second_capture_leaves_grab_untouched(self, capture, grab, sink):
        capture.activate("mute", sink)

        with pytest.raises(CaptureInProgress):
            capture.activate("up", sink)

        assert capture.state is CaptureState.LISTENING
        assert capture.session.target is HotkeyAction.MUTE
        assert grab.acquire_count == 1
        assert grab.held

    def test_denied_grab(self, codec, surface, sink):
        grab = FakeKeyboardGrab(deny=True)
        capture = HotkeyCapture(codec, grab, surface)

        with pytest.raises(GrabUnavailable):
            capture.activate("up", sink)

        assert capture.state is CaptureState.IDLE
        assert surface.presented == []
        assert surface.errors == ["Could not grab the keyboard."]
        assert grab.release_count == 0

    def test_grab_backend_error_counts_as_denied(self, capture, grab, sink):
        grab.should_raise = True

        with pytest.raises(GrabUnavailable):
            capture.activate("up", sink)

        assert capture.state is CaptureState.IDLE
        assert grab.release_count == 0

    def test_denied_grab_is_reported_even_if_error_display_fails(self, codec, surface, sink):
        grab = FakeKeyboardGrab(deny=True)
        surface.should_fail_report = True
        capture = HotkeyCapture(codec, grab, surface)

        with pytest.raises(GrabUnavailable) as exc_info:
            capture.activate("up", sink)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert capture.state is CaptureState.IDLE
        assert grab.release_count == 0

    def test_dismiss_releases_without_staging(self, capture, grab, surface, sink):
        capture.activate("mute", sink)
        capture.key_pressed(ord("M"), CTRL)

        capture.dismiss()

        assert capture.state is CaptureState.CANCELLED
        assert sink.staged == []
        assert grab.release_count == 1
        assert surface.dismiss_count == 1

    def test_abort_reports_and_releases(self, capture, grab, surface, sink):
        capture.activate("mute", sink)

        capture.abort("focus lost")

        assert capture.state is CaptureState.CANCELLED
        assert surface.errors == ["focus lost"]
        assert grab.release_count == 1

    def test_staging_failure_still_releases_exactly_once(self, capture, grab, surface, sink):
        sink.should_fail = True
        capture.activate("up", sink)
        capture.key_pressed(ord("A"), 0)

        with pytest.raises(RuntimeError):
            capture.key_released()

        assert capture.state is CaptureState.COMMITTED
        assert grab.release_count == 1
        # remaining effects still ran
        assert surface.dismiss_count == 1

    def test_keymap_failure_aborts_capture(self, capture, grab, surface, sink):
        capture.activate("up", sink)

        with pytest.raises(RuntimeError):
            capture.key_pressed(KEY_BROKEN, 0)

        assert capture.state is CaptureState.CANCELLED
        assert grab.release_count == 1
        assert surface.errors == ["keymap unavailable"]
        assert sink.staged == []

    def test_surface_failure_releases_grab(self, capture, grab, surface, sink):
        surface.should_fail_present = True

        with pytest.raises(RuntimeError):
            capture.activate("up", sink)

        assert capture.state is CaptureState.CANCELLED
        assert grab.acquire_count == 1
        assert grab.release_count == 1

    def test_new_capture_after_commit(self, capture, grab, sink):
        capture.activate("mute", sink)
        capture.key_pressed(ord("M"), CTRL)
        capture.key_released()

        capture.activate("up", sink)
        capture.key_pressed(ord("U"), CTRL)
        capture.key_released()

        assert sink.staged == [
            (HotkeyAction.MUTE, "<ctrl>+m"),
            (HotkeyAction.VOLUME_UP, "<ctrl>+u"),
        ]
        assert grab.acquire_count == 2
        assert grab.release_count == 2
