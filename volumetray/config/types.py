"""Type definitions for the VolumeTray configuration."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidWidgetTarget
from .constants import (
    CHANNEL_KEY,
    DEFAULT_VOL_METER_COLOR,
    GLOBAL_SECTION,
    NO_BINDING_TEXT,
)


class ValueKind(str, Enum):
    """Closed set of value kinds a setting can hold."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    DOUBLE_LIST = "double_list"

    def coerce(self, value: Any) -> Any:
        """
        Return value converted to this kind.

        Raises:
            ValueError: value is not representable as this kind
        """
        if self is ValueKind.BOOLEAN:
            if isinstance(value, bool):
                return value
        elif self is ValueKind.INTEGER:
            if isinstance(value, bool):
                pass
            elif isinstance(value, int):
                return value
            elif isinstance(value, float) and value.is_integer():
                return int(value)
        elif self is ValueKind.DOUBLE:
            if _is_number(value):
                return float(value)
        elif self is ValueKind.STRING:
            if isinstance(value, str):
                return value
        elif self is ValueKind.DOUBLE_LIST:
            if isinstance(value, (list, tuple)) and all(_is_number(v) for v in value):
                return [float(v) for v in value]
        raise ValueError(f"{value!r} is not a valid {self.value} value")

    @classmethod
    def of(cls, value: Any) -> "ValueKind":
        """Infer the kind of a Python value."""
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, (list, tuple)):
            return cls.DOUBLE_LIST
        raise ValueError(f"Unsupported setting value: {value!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SliderOrientation(str, Enum):
    """Orientation of the popup volume slider."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class ChangeDomain(str, Enum):
    """Subsystems that must react to a committed preference change."""
    AUDIO_REINIT = "AudioReinit"
    HOTKEY_REBIND = "HotkeyRebind"
    VIEW_REFRESH = "ViewRefresh"
    NOTIFICATION_REFRESH = "NotificationRefresh"


class HotkeyAction(str, Enum):
    """Actions that can be bound to a global hotkey."""
    MUTE = "mute"
    VOLUME_UP = "up"
    VOLUME_DOWN = "down"

    @property
    def config_key(self) -> str:
        """Setting key holding this action's accelerator."""
        return _ACTION_KEYS[self]

    @property
    def label(self) -> str:
        """Human-readable action name."""
        return _ACTION_LABELS[self]

    @classmethod
    def from_name(cls, name: str) -> "HotkeyAction":
        """
        Resolve an action from its name.

        Raises:
            InvalidWidgetTarget: name does not denote a hotkey action
        """
        normalized = (name or "").strip().lower()
        normalized = _ACTION_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidWidgetTarget(f"Invalid hotkey target: {name}") from None


_ACTION_KEYS = {
    HotkeyAction.MUTE: "VolMuteKey",
    HotkeyAction.VOLUME_UP: "VolUpKey",
    HotkeyAction.VOLUME_DOWN: "VolDownKey",
}

_ACTION_LABELS = {
    HotkeyAction.MUTE: "Mute/Unmute",
    HotkeyAction.VOLUME_UP: "Volume Up",
    HotkeyAction.VOLUME_DOWN: "Volume Down",
}

_ACTION_ALIASES = {
    "volume_up": "up",
    "volume-up": "up",
    "volume_down": "down",
    "volume-down": "down",
}


@dataclass(frozen=True)
class HotkeyBindings:
    """Global hotkey configuration."""
    enabled: bool = False
    step: int = 1
    accelerators: Dict[HotkeyAction, str] = field(default_factory=dict)

    def bound(self) -> Dict[HotkeyAction, str]:
        """Actions that carry a real binding."""
        return {
            action: text
            for action, text in self.accelerators.items()
            if text and text != NO_BINDING_TEXT
        }

    @classmethod
    def from_store(cls, store) -> "HotkeyBindings":
        return cls(
            enabled=store.get(ValueKind.BOOLEAN, "EnableHotKeys", False),
            step=store.get(ValueKind.INTEGER, "HotkeyVolumeStep", 1),
            accelerators={
                action: store.get(ValueKind.STRING, action.config_key, NO_BINDING_TEXT)
                for action in HotkeyAction
            },
        )


@dataclass(frozen=True)
class NotificationOptions:
    """Desktop notification settings."""
    enabled: bool = False
    hotkey: bool = True
    mouse: bool = True
    popup: bool = False
    external: bool = False
    timeout_ms: int = 1500

    @classmethod
    def from_store(cls, store) -> "NotificationOptions":
        return cls(
            enabled=store.get(ValueKind.BOOLEAN, "EnableNotifications", False),
            hotkey=store.get(ValueKind.BOOLEAN, "HotkeyNotifications", True),
            mouse=store.get(ValueKind.BOOLEAN, "MouseNotifications", True),
            popup=store.get(ValueKind.BOOLEAN, "PopupNotifications", False),
            external=store.get(ValueKind.BOOLEAN, "ExternalNotifications", False),
            timeout_ms=store.get(ValueKind.INTEGER, "NotificationTimeout", 1500),
        )


@dataclass(frozen=True)
class ViewOptions:
    """Settings read by the tray icon and the volume popup."""
    slider_orientation: str = SliderOrientation.VERTICAL.value
    display_text_volume: bool = True
    text_volume_position: int = 0
    draw_vol_meter: bool = False
    vol_meter_pos: int = 0
    vol_meter_color: Tuple[float, float, float] = DEFAULT_VOL_METER_COLOR
    system_theme: bool = False
    scroll_step: float = 5.0
    fine_scroll_step: float = 1.0

    @classmethod
    def from_store(cls, store) -> "ViewOptions":
        orientation = store.get(
            ValueKind.STRING, "SliderOrientation", SliderOrientation.VERTICAL.value
        )
        if orientation not in _ORIENTATIONS:
            orientation = SliderOrientation.VERTICAL.value
        return cls(
            slider_orientation=orientation,
            display_text_volume=store.get(ValueKind.BOOLEAN, "DisplayTextVolume", True),
            text_volume_position=store.get(ValueKind.INTEGER, "TextVolumePosition", 0),
            draw_vol_meter=store.get(ValueKind.BOOLEAN, "DrawVolMeter", False),
            vol_meter_pos=store.get(ValueKind.INTEGER, "VolMeterPos", 0),
            vol_meter_color=store.get_vol_meter_color(),
            system_theme=store.get(ValueKind.BOOLEAN, "SystemTheme", False),
            scroll_step=store.get(ValueKind.DOUBLE, "ScrollStep", 5.0),
            fine_scroll_step=store.get(ValueKind.DOUBLE, "FineScrollStep", 1.0),
        )


_ORIENTATIONS: List[str] = [o.value for o in SliderOrientation]


# Setting keys per change domain. Every key of a device section other than
# the global one is an audio channel and belongs to AUDIO_REINIT.
DOMAIN_KEYS: Dict[ChangeDomain, Tuple[str, ...]] = {
    ChangeDomain.AUDIO_REINIT: ("AudioDevice",),
    ChangeDomain.HOTKEY_REBIND: (
        "VolMuteKey",
        "VolUpKey",
        "VolDownKey",
        "EnableHotKeys",
        "HotkeyVolumeStep",
    ),
    ChangeDomain.VIEW_REFRESH: (
        "VolMeterColor",
        "VolMeterPos",
        "DrawVolMeter",
        "DisplayTextVolume",
        "TextVolumePosition",
        "SliderOrientation",
        "SystemTheme",
        "ScrollStep",
        "FineScrollStep",
    ),
    ChangeDomain.NOTIFICATION_REFRESH: (
        "EnableNotifications",
        "HotkeyNotifications",
        "MouseNotifications",
        "PopupNotifications",
        "ExternalNotifications",
        "NotificationTimeout",
    ),
}


@dataclass(frozen=True)
class SettingSpec:
    """Kind and effective default of a setting."""
    kind: ValueKind
    default: Any


# Editable global settings. A key the file does not hold is shown with its
# default, so the default is also its pre-edit value.
SETTINGS: Dict[str, SettingSpec] = {
    "SliderOrientation": SettingSpec(ValueKind.STRING, SliderOrientation.VERTICAL.value),
    "DisplayTextVolume": SettingSpec(ValueKind.BOOLEAN, True),
    "TextVolumePosition": SettingSpec(ValueKind.INTEGER, 0),
    "DrawVolMeter": SettingSpec(ValueKind.BOOLEAN, False),
    "VolMeterPos": SettingSpec(ValueKind.INTEGER, 0),
    "VolMeterColor": SettingSpec(ValueKind.DOUBLE_LIST, list(DEFAULT_VOL_METER_COLOR)),
    "SystemTheme": SettingSpec(ValueKind.BOOLEAN, False),
    "ScrollStep": SettingSpec(ValueKind.DOUBLE, 5.0),
    "FineScrollStep": SettingSpec(ValueKind.DOUBLE, 1.0),
    "MiddleClickAction": SettingSpec(ValueKind.INTEGER, 0),
    "CustomCommand": SettingSpec(ValueKind.STRING, ""),
    "VolumeControlCommand": SettingSpec(ValueKind.STRING, ""),
    "NormalizeVolume": SettingSpec(ValueKind.BOOLEAN, False),
    "AudioDevice": SettingSpec(ValueKind.STRING, "default"),
    "EnableHotKeys": SettingSpec(ValueKind.BOOLEAN, False),
    "HotkeyVolumeStep": SettingSpec(ValueKind.INTEGER, 1),
    "VolMuteKey": SettingSpec(ValueKind.STRING, NO_BINDING_TEXT),
    "VolUpKey": SettingSpec(ValueKind.STRING, NO_BINDING_TEXT),
    "VolDownKey": SettingSpec(ValueKind.STRING, NO_BINDING_TEXT),
    "EnableNotifications": SettingSpec(ValueKind.BOOLEAN, False),
    "HotkeyNotifications": SettingSpec(ValueKind.BOOLEAN, True),
    "MouseNotifications": SettingSpec(ValueKind.BOOLEAN, True),
    "PopupNotifications": SettingSpec(ValueKind.BOOLEAN, False),
    "ExternalNotifications": SettingSpec(ValueKind.BOOLEAN, False),
    "NotificationTimeout": SettingSpec(ValueKind.INTEGER, 1500),
}

CHANNEL_SETTING = SettingSpec(ValueKind.STRING, None)


def setting_spec(section: str, key: str) -> Optional[SettingSpec]:
    """Return the kind and default of a known setting, or None for keys outside the table."""
    if section != GLOBAL_SECTION:
        return CHANNEL_SETTING if key == CHANNEL_KEY else None
    return SETTINGS.get(key)


def domain_for(section: str, key: str):
    """Return the change domain of a setting, or None if it has none."""
    if section != GLOBAL_SECTION:
        return ChangeDomain.AUDIO_REINIT
    for domain, keys in DOMAIN_KEYS.items():
        if key in keys:
            return domain
    return None
