"""Linux向け実装。"""

from .adapter import LinuxPlatformAdapter

__all__ = ["LinuxPlatformAdapter"]
