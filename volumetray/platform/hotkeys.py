"""
グローバルホットキー登録モジュール

正規テキストのアクセラレータをpynputのGlobalHotKeysに登録する。
"""

from functools import partial
from typing import Callable, Dict, Optional

from pynput import keyboard

from ..config.types import HotkeyAction, HotkeyBindings
from ..core.accelerator import AcceleratorCodec
from ..errors import InvalidAccelerator
from ..utils.logger import get_logger

logger = get_logger(__name__)

ActionCallback = Callable[[HotkeyAction, int], None]


class PynputHotkeyRegistrar:
    """
    pynputによるグローバルホットキーの登録と解除。

    Args:
        codec: キーの解決に使うコーデック
        on_action: ホットキーが押された時に (アクション, 音量ステップ) で呼ばれる
    """

    def __init__(self, codec: AcceleratorCodec, on_action: ActionCallback) -> None:
        self._codec = codec
        self._on_action = on_action
        self._listener: Optional[keyboard.GlobalHotKeys] = None

    @property
    def is_armed(self) -> bool:
        return self._listener is not None

    def arm(self, bindings: HotkeyBindings) -> None:
        """既存の登録を解除し、割り当て済みのホットキーを登録し直す。"""
        self.disarm()
        if not bindings.enabled:
            return

        hotkey_map: Dict[str, Callable[[], None]] = {}
        for action, text in bindings.bound().items():
            try:
                keycode, _ = self._codec.canonical_to_hardware(text)
            except InvalidAccelerator as e:
                logger.warning(f"{action.label}のホットキーが不正です: {e.message}")
                continue
            if keycode < 0:
                logger.warning(f"{action.label}のホットキー {text} を登録できません")
                continue
            try:
                keyboard.HotKey.parse(text)
            except ValueError as e:
                logger.warning(f"pynputが解釈できないホットキー: {text} ({e})")
                continue
            hotkey_map[text] = partial(self._on_action, action, bindings.step)

        if not hotkey_map:
            logger.info("登録するホットキーがありません")
            return

        self._listener = keyboard.GlobalHotKeys(hotkey_map)
        self._listener.start()
        logger.info(f"ホットキーを登録しました: {', '.join(hotkey_map)}")

    def disarm(self) -> None:
        """登録済みのホットキーを解除する。"""
        if self._listener is None:
            return
        self._listener.stop()
        self._listener = None
        logger.info("ホットキーを解除しました")
