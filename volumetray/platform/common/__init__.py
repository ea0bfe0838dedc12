"""OS共通のキーマップ実装。"""

from .keymap import QtKeymap

__all__ = ["QtKeymap"]
