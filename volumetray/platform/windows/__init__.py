"""Windows向け実装。"""

from .adapter import WindowsPlatformAdapter

__all__ = ["WindowsPlatformAdapter"]
