"""
設定モジュール

設定ストア、定数、型定義を提供する。
ConfigStoreを通じて設定の読み込み・保存が可能。
"""

from .config_store import ConfigStore
from .constants import APP_NAME, DEFAULT_DOCUMENT, GLOBAL_SECTION, NO_BINDING_TEXT
from .types import (
    ChangeDomain,
    HotkeyAction,
    HotkeyBindings,
    NotificationOptions,
    SettingSpec,
    SliderOrientation,
    ValueKind,
    ViewOptions,
    setting_spec,
)

__all__ = [
    "ValueKind",            # 設定値の種類
    "SliderOrientation",    # スライダー向き列挙型
    "ChangeDomain",         # 変更通知ドメイン
    "HotkeyAction",         # ホットキー対象アクション
    "HotkeyBindings",       # ホットキー設定
    "NotificationOptions",  # 通知設定
    "ViewOptions",          # 表示設定
    "SettingSpec",          # 設定キーの種類と既定値
    "setting_spec",         # 設定キーの仕様を引く
    "DEFAULT_DOCUMENT",     # 組み込みデフォルト文書
    "GLOBAL_SECTION",       # グローバルセクション名
    "NO_BINDING_TEXT",      # 未割り当てテキスト
    "APP_NAME",             # アプリケーション名
    "ConfigStore",          # 設定ストア
]
