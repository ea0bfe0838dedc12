"""
Windows向けプラットフォーム実装。
"""

import os
from pathlib import Path
from typing import Optional, Sequence

from ..base import KeymapService, PlatformAdapter


class WindowsPlatformAdapter(PlatformAdapter):
    """Windows差分実装。"""

    name = "windows"

    _VOLUME_CONTROL_COMMANDS = ("sndvol",)

    def __init__(self) -> None:
        self._keymap: Optional[KeymapService] = None

    @property
    def config_dir(self) -> Path:
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"

    @property
    def volume_control_commands(self) -> Sequence[str]:
        return self._VOLUME_CONTROL_COMMANDS

    @property
    def keymap(self) -> KeymapService:
        if self._keymap is None:
            from ..common import QtKeymap
            self._keymap = QtKeymap()
        return self._keymap
