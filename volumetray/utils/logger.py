"""
ロギングモジュール

VolumeTray全体で共有するロガーの設定と取得を提供する。
コンソール出力と任意のログファイル出力に対応。
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

# ログフォーマット
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# 名前ごとのロガーキャッシュ
_loggers: Dict[str, logging.Logger] = {}
_is_configured: bool = False


def setup_logger(
    log_file: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    format_string: str = LOG_FORMAT
) -> None:
    """
    ルートロガーにハンドラーを設定する。

    二回目以降の呼び出しは無視される。

    Args:
        log_file: ログファイルパス。Noneの場合はコンソールのみ
        level: ログレベル（デフォルト: INFO）
        format_string: ログメッセージフォーマット
    """
    global _is_configured

    if _is_configured:
        return

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=handlers
    )

    _is_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    名前付きロガーを取得する（キャッシュ付き）。

    Args:
        name: ロガー名（通常は__name__）

    Returns:
        ロガーインスタンス
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]
