"""
プラットフォーム実装ファクトリ。
"""

import sys
from functools import lru_cache
from typing import Optional, Sequence

from .base import PlatformAdapter
from .linux import LinuxPlatformAdapter
from .windows import WindowsPlatformAdapter


class GenericPlatformAdapter(LinuxPlatformAdapter):
    """
    非対応OS向けフォールバック。

    設定ディレクトリはLinuxと同じ規則を使い、外部ミキサーは探索しない。
    """

    name = "generic"

    @property
    def volume_control_commands(self) -> Sequence[str]:
        return ()


@lru_cache(maxsize=None)
def get_platform_adapter(platform_name: Optional[str] = None) -> PlatformAdapter:
    """
    実行OSに応じたプラットフォーム実装を返す。
    """
    current = (platform_name or sys.platform).lower()
    if current.startswith("linux"):
        return LinuxPlatformAdapter()
    if current.startswith("win"):
        return WindowsPlatformAdapter()
    return GenericPlatformAdapter()
