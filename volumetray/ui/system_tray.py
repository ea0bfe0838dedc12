"""
システムトレイモジュール

タスクバー通知領域にアイコンを表示し、
ホットキー設定と終了へのコンテキストメニューを提供する。
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QIcon, QPainter, QPixmap
from PySide6.QtWidgets import QMenu, QSystemTrayIcon

from ..config.constants import APP_NAME, DEFAULT_VOL_METER_COLOR
from ..config.types import ViewOptions


class SystemTray(QSystemTrayIcon):
    """
    音量メーター色で描かれるシステムトレイアイコン。

    ViewNotifierとして表示設定の変更を受け取り、アイコンを描き直す。

    Signals:
        open_preferences: ホットキー設定を開く要求
        quit_app: アプリケーション終了要求
    """

    open_preferences = Signal()
    quit_app = Signal()

    # アイコンサイズ（ピクセル）
    ICON_SIZE = 64

    def __init__(self, parent=None) -> None:
        super().__init__(parent)

        self._set_icon_color(DEFAULT_VOL_METER_COLOR)
        self.setToolTip(APP_NAME)
        self._setup_menu()
        self.activated.connect(self._on_activated)

        self.show()

    def _setup_menu(self) -> None:
        self._menu = QMenu()

        preferences_action = self._menu.addAction("Hotkeys...")
        preferences_action.triggered.connect(self.open_preferences.emit)

        self._menu.addSeparator()

        quit_action = self._menu.addAction("Quit")
        quit_action.triggered.connect(self.quit_app.emit)

        self.setContextMenu(self._menu)

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self.open_preferences.emit()

    def refresh(self, options: ViewOptions) -> None:
        """表示設定を反映する。"""
        self._set_icon_color(options.vol_meter_color)

    def _set_icon_color(self, rgb) -> None:
        """指定色の円形アイコンを生成・設定する。"""
        size = self.ICON_SIZE
        pixmap = QPixmap(size, size)
        pixmap.fill(QColor(0, 0, 0, 0))  # 透明背景

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setBrush(QColor.fromRgbF(*rgb))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.drawEllipse(4, 4, size - 8, size - 8)
        painter.end()

        self.setIcon(QIcon(pixmap))
