"""
UIモジュール

システムトレイ、ホットキー設定画面、ホットキー取得ダイアログを提供する。
"""

from .capture_dialog import HotkeyCaptureDialog, HotkeyField, QtKeyboardGrab
from .hotkey_preferences import HotkeyPreferencesDialog
from .system_tray import SystemTray

__all__ = [
    "HotkeyCaptureDialog",      # ホットキー取得ダイアログ
    "HotkeyField",              # ホットキー表示欄
    "HotkeyPreferencesDialog",  # ホットキー設定画面
    "QtKeyboardGrab",           # Qtによるキーボード占有
    "SystemTray",               # システムトレイアイコン
]
