"""
Qtキーコードを使ったキーマップ変換。

キーコードにはQtのキー値（QKeyEvent.key()）、修飾状態には
Qt.KeyboardModifierのビット値を用いる。キー名はpynputのキー名に合わせる。
"""

from typing import Dict, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence

from ...utils.logger import get_logger
from ..base import KeymapService, ModifierMask

logger = get_logger(__name__)


_SPECIAL_KEY_NAMES = {
    # ファンクションキー
    Qt.Key.Key_F1: "f1",
    Qt.Key.Key_F2: "f2",
    Qt.Key.Key_F3: "f3",
    Qt.Key.Key_F4: "f4",
    Qt.Key.Key_F5: "f5",
    Qt.Key.Key_F6: "f6",
    Qt.Key.Key_F7: "f7",
    Qt.Key.Key_F8: "f8",
    Qt.Key.Key_F9: "f9",
    Qt.Key.Key_F10: "f10",
    Qt.Key.Key_F11: "f11",
    Qt.Key.Key_F12: "f12",
    Qt.Key.Key_F13: "f13",
    Qt.Key.Key_F14: "f14",
    Qt.Key.Key_F15: "f15",
    Qt.Key.Key_F16: "f16",
    Qt.Key.Key_F17: "f17",
    Qt.Key.Key_F18: "f18",
    Qt.Key.Key_F19: "f19",
    Qt.Key.Key_F20: "f20",
    # 特殊キー
    Qt.Key.Key_Space: "space",
    Qt.Key.Key_Tab: "tab",
    Qt.Key.Key_Return: "enter",
    Qt.Key.Key_Backspace: "backspace",
    Qt.Key.Key_Delete: "delete",
    Qt.Key.Key_Escape: "esc",
    Qt.Key.Key_CapsLock: "caps_lock",
    Qt.Key.Key_NumLock: "num_lock",
    Qt.Key.Key_ScrollLock: "scroll_lock",
    Qt.Key.Key_Pause: "pause",
    Qt.Key.Key_Print: "print_screen",
    Qt.Key.Key_Menu: "menu",
    # ナビゲーション
    Qt.Key.Key_Home: "home",
    Qt.Key.Key_End: "end",
    Qt.Key.Key_PageUp: "page_up",
    Qt.Key.Key_PageDown: "page_down",
    Qt.Key.Key_Up: "up",
    Qt.Key.Key_Down: "down",
    Qt.Key.Key_Left: "left",
    Qt.Key.Key_Right: "right",
    Qt.Key.Key_Insert: "insert",
    # 記号（区切り文字と衝突するもの）
    Qt.Key.Key_Plus: "plus",
    Qt.Key.Key_Less: "less",
    Qt.Key.Key_Greater: "greater",
    # メディアキー
    Qt.Key.Key_MediaPlay: "media_play_pause",
    Qt.Key.Key_MediaStop: "media_stop",
    Qt.Key.Key_MediaPrevious: "media_previous",
    Qt.Key.Key_MediaNext: "media_next",
    Qt.Key.Key_VolumeUp: "media_volume_up",
    Qt.Key.Key_VolumeDown: "media_volume_down",
    Qt.Key.Key_VolumeMute: "media_volume_mute",
    # 修飾キー単体
    Qt.Key.Key_Control: "ctrl",
    Qt.Key.Key_Shift: "shift",
    Qt.Key.Key_Alt: "alt",
    Qt.Key.Key_Meta: "cmd",
}

_MODIFIER_FLAGS = (
    (Qt.KeyboardModifier.ShiftModifier, ModifierMask.SHIFT),
    (Qt.KeyboardModifier.ControlModifier, ModifierMask.CONTROL),
    (Qt.KeyboardModifier.AltModifier, ModifierMask.ALT),
    (Qt.KeyboardModifier.MetaModifier, ModifierMask.SUPER),
)

# 修飾キー単体が押された時に自身として消費する修飾
_SELF_MODIFIERS = {
    Qt.Key.Key_Shift: ModifierMask.SHIFT,
    Qt.Key.Key_Control: ModifierMask.CONTROL,
    Qt.Key.Key_Alt: ModifierMask.ALT,
    Qt.Key.Key_Meta: ModifierMask.SUPER,
}


def _value(enum_member) -> int:
    return int(enum_member.value)


class QtKeymap(KeymapService):
    """Qtのキー値とpynput形式キー名の相互変換。"""

    def __init__(self) -> None:
        self._names: Dict[int, str] = {
            _value(key): name for key, name in _SPECIAL_KEY_NAMES.items()
        }
        self._codes: Dict[str, int] = {name: code for code, name in self._names.items()}
        self._self_modifiers: Dict[int, ModifierMask] = {
            _value(key): mask for key, mask in _SELF_MODIFIERS.items()
        }

    def modifiers_from_state(self, state: int) -> ModifierMask:
        """Qt修飾状態をModifierMaskに変換する。"""
        mask = ModifierMask.NONE
        for flag, modifier in _MODIFIER_FLAGS:
            if state & _value(flag):
                mask |= modifier
        return mask

    def translate_keyboard_state(
        self,
        keycode: int,
        state: int,
        group: int = 0,
    ) -> Tuple[Optional[str], ModifierMask, ModifierMask]:
        modifiers = self.modifiers_from_state(state)
        consumed = self._self_modifiers.get(keycode, ModifierMask.NONE)

        if keycode in self._names:
            return self._names[keycode], modifiers, consumed

        if 0x21 <= keycode <= 0x7E:
            char = chr(keycode)
            if char.isalnum():
                return char.lower(), modifiers, consumed
            # Shiftで入力される記号はShiftを消費したものとみなす
            return char, modifiers, consumed | ModifierMask.SHIFT

        return self._fallback_name(keycode), modifiers, consumed

    @staticmethod
    def _fallback_name(keycode: int) -> Optional[str]:
        """QKeySequenceによるキー名変換。"""
        text = QKeySequence(keycode).toString().lower().replace(" ", "_")
        if not text or "+" in text:
            return None
        return text

    def keycode_for_name(self, key_name: str) -> Optional[int]:
        if key_name in self._codes:
            return self._codes[key_name]
        if len(key_name) == 1 and 0x21 <= ord(key_name.upper()) <= 0x7E:
            return ord(key_name.upper())

        sequence = QKeySequence.fromString(key_name.replace("_", " "))
        if sequence.isEmpty():
            logger.debug(f"キー名を解決できません: {key_name}")
            return None
        return _value(sequence[0].key())
