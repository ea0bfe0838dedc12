"""Core logic: accelerators, hotkey capture and preference transactions."""

from .accelerator import NO_BINDING, Accelerator, AcceleratorCodec, decode, decode_or_unbound, encode
from .hotkey_capture import CaptureSession, CaptureState, HotkeyCapture, transition
from .preference_applier import PreferenceApplier
from .preferences import ChangeSet, PreferenceCoordinator, PreferenceTransaction

__all__ = [
    "Accelerator",
    "AcceleratorCodec",
    "NO_BINDING",
    "encode",
    "decode",
    "decode_or_unbound",
    "CaptureSession",
    "CaptureState",
    "HotkeyCapture",
    "transition",
    "ChangeSet",
    "PreferenceCoordinator",
    "PreferenceTransaction",
    "PreferenceApplier",
]
