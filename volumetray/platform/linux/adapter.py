"""
Linux向けプラットフォーム実装。
"""

import os
from pathlib import Path
from typing import Optional, Sequence

from ..base import KeymapService, PlatformAdapter


class LinuxPlatformAdapter(PlatformAdapter):
    """Linux（X11/Wayland）差分実装。"""

    name = "linux"

    # 優先順に探索する外部ミキサー
    _VOLUME_CONTROL_COMMANDS = (
        "pavucontrol",
        "gnome-alsamixer",
        "xfce4-mixer",
        "alsamixergui",
    )

    def __init__(self) -> None:
        self._keymap: Optional[KeymapService] = None

    @property
    def config_dir(self) -> Path:
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config)
        return Path.home() / ".config"

    @property
    def volume_control_commands(self) -> Sequence[str]:
        return self._VOLUME_CONTROL_COMMANDS

    @property
    def keymap(self) -> KeymapService:
        if self._keymap is None:
            # Qtはキーマップが必要になるまで読み込まない
            from ..common import QtKeymap
            self._keymap = QtKeymap()
        return self._keymap
