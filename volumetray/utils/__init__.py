"""
ユーティリティモジュール

ロギングなど、パッケージ全体で共有される汎用機能を提供する。
"""

from .logger import get_logger, setup_logger

__all__ = [
    "setup_logger",  # ロガー設定関数
    "get_logger",    # ロガー取得関数
]
