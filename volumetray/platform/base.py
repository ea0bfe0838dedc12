"""
プラットフォーム抽象レイヤー。

OS差分（キーマップ変換・設定ディレクトリ・外部ミキサー候補）を
共通インターフェースとして定義する。
"""

import enum
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple


class ModifierMask(enum.IntFlag):
    """キーボード配置に依存しない修飾キーのビットマスク。"""

    NONE = 0
    SHIFT = 1 << 0
    CONTROL = 1 << 2
    ALT = 1 << 3
    SUPER = 1 << 26


# アクセラレータとして意味を持つ修飾キー（CapsLock等は含めない）
DEFAULT_MOD_MASK = ModifierMask.SHIFT | ModifierMask.CONTROL | ModifierMask.ALT | ModifierMask.SUPER


class KeymapService(ABC):
    """ネイティブなキーイベントとシンボリックなキー名の相互変換。"""

    @abstractmethod
    def translate_keyboard_state(
        self,
        keycode: int,
        state: int,
        group: int = 0,
    ) -> Tuple[Optional[str], ModifierMask, ModifierMask]:
        """
        キーコードと修飾状態をキー名に変換する。

        Args:
            keycode: ネイティブキーコード
            state: ネイティブ修飾状態
            group: キーボードレイアウトのグループ

        Returns:
            (キー名 または None, 押されている修飾キー, キー名の生成に消費された修飾キー)
        """
        raise NotImplementedError

    @abstractmethod
    def keycode_for_name(self, key_name: str) -> Optional[int]:
        """キー名からネイティブキーコードを返す。解決できない場合None。"""
        raise NotImplementedError

    def name_for_keycode(self, keycode: int) -> Optional[str]:
        """修飾なしでキーコードをキー名に変換する。"""
        key_name, _, _ = self.translate_keyboard_state(keycode, 0, 0)
        return key_name


class PlatformAdapter(ABC):
    """OS別機能を提供する抽象インターフェース。"""

    name: str = "unknown"

    @property
    @abstractmethod
    def config_dir(self) -> Path:
        """ユーザー設定ディレクトリを返す。"""
        raise NotImplementedError

    @property
    def volume_control_commands(self) -> Sequence[str]:
        """既定の外部ミキサーコマンド候補（優先順）を返す。"""
        return ()

    @property
    @abstractmethod
    def keymap(self) -> KeymapService:
        """キーマップ変換サービスを返す。"""
        raise NotImplementedError
