"""OS別実装レイヤー。"""

from .base import DEFAULT_MOD_MASK, KeymapService, ModifierMask, PlatformAdapter
from .factory import get_platform_adapter

__all__ = [
    "DEFAULT_MOD_MASK",
    "KeymapService",
    "ModifierMask",
    "PlatformAdapter",
    "get_platform_adapter",
]
