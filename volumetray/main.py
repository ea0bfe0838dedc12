"""
アプリケーションエントリーポイントモジュール

ロギング設定、Qtアプリケーションの初期化、コアの起動を行う。
"""

import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from .app import VolumeTrayCore
from .config import APP_NAME, ConfigStore, HotkeyAction
from .core.accelerator import AcceleratorCodec
from .platform import get_platform_adapter
from .platform.hotkeys import PynputHotkeyRegistrar
from .ui import HotkeyPreferencesDialog, SystemTray
from .utils.logger import get_logger, setup_logger

setup_logger()
logger = get_logger(__name__)


def _on_hotkey(action: HotkeyAction, step: int) -> None:
    # pynputのリスナースレッドから呼ばれる
    logger.info(f"ホットキー: {action.label} (ステップ {step})")


def _show_error(message: str) -> None:
    QMessageBox.warning(None, APP_NAME, message)


def main() -> int:
    """
    アプリケーションのメインエントリーポイント。

    Returns:
        終了コード（0: 成功、非0: 失敗）
    """
    try:
        app = QApplication(sys.argv)
        app.setQuitOnLastWindowClosed(False)  # システムトレイ動作のため

        platform = get_platform_adapter()
        logger.info(f"プラットフォーム: {platform.name}")
        codec = AcceleratorCodec(platform.keymap)

        tray = SystemTray()
        core = VolumeTrayCore(
            ConfigStore(),
            codec,
            registrar=PynputHotkeyRegistrar(codec, _on_hotkey),
            view=tray,
            report_error=_show_error,
        )
        core.start()

        preferences = HotkeyPreferencesDialog(core)
        tray.open_preferences.connect(preferences.show_preferences)
        tray.quit_app.connect(app.quit)
        app.aboutToQuit.connect(core.shutdown)

        return app.exec()

    except Exception as e:
        logger.critical(f"致命的エラー: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
