"""Error types raised by the VolumeTray core.

Every error is recoverable from the core's point of view. The message is
meant to be shown to the user as-is.
"""


class VolumeTrayError(Exception):
    """Base class for all core errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigLoadError(VolumeTrayError):
    """The config file or the default document could not be parsed."""


class ConfigSaveError(VolumeTrayError):
    """The config file could not be written."""


class InvalidAccelerator(VolumeTrayError):
    """Accelerator text could not be parsed or encoded."""


class InvalidWidgetTarget(VolumeTrayError):
    """A capture was requested for an unknown action."""


class GrabUnavailable(VolumeTrayError):
    """Exclusive keyboard ownership could not be acquired."""


class CaptureInProgress(VolumeTrayError):
    """Another hotkey capture is already running."""


class TransactionClosed(VolumeTrayError):
    """The preference transaction was already committed or discarded."""
