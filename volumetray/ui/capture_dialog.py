"""
ホットキー取得ダイアログモジュール

設定画面のホットキー欄と、キーの組み合わせを待ち受けるモーダルダイアログを提供する。
状態遷移はHotkeyCaptureが担い、ここではQtのイベントを中継するだけにする。
"""

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent, QWindow
from PySide6.QtWidgets import QDialog, QLabel, QLineEdit, QMessageBox, QVBoxLayout, QWidget

from ..config.constants import APP_NAME, NO_BINDING_TEXT
from ..config.types import HotkeyAction
from ..core.hotkey_capture import HotkeyCapture
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _mouse_button_number(button: Qt.MouseButton) -> int:
    """Qtのマウスボタンを1始まりのボタン番号に変換する。"""
    if button == Qt.MouseButton.LeftButton:
        return 1
    if button == Qt.MouseButton.MiddleButton:
        return 2
    if button == Qt.MouseButton.RightButton:
        return 3
    return 0


class HotkeyField(QLineEdit):
    """
    アクションのホットキーを表示する欄。

    ダブルクリックでactivatedシグナル（アクション名, ボタン番号, クリック回数）を送出する。
    """

    activated = Signal(str, int, int)

    def __init__(self, action: HotkeyAction, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._action = action
        self.setReadOnly(True)
        self.setPlaceholderText("Double-click to set hotkey...")
        self.set_binding(NO_BINDING_TEXT)

    @property
    def action(self) -> HotkeyAction:
        return self._action

    def set_binding(self, text: str) -> None:
        self.setText(text or NO_BINDING_TEXT)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        self.activated.emit(self._action.value, _mouse_button_number(event.button()), 2)
        event.accept()


class QtKeyboardGrab:
    """
    キーボード占有。

    表示中のウィンドウ（anchor）でネイティブにキーボードを占有し、
    アプリ内のキーイベントはreceiverに集める。
    ウィンドウ側の占有が拒否された場合は失敗として扱う。
    """

    def __init__(self, receiver: QWidget, anchor: Optional[QWidget] = None) -> None:
        self._receiver = receiver
        self._anchor = anchor if anchor is not None else receiver

    def _window_handle(self) -> Optional[QWindow]:
        window = self._anchor.window()
        window.winId()  # ネイティブウィンドウを作成する
        return window.windowHandle()

    def acquire(self) -> bool:
        handle = self._window_handle()
        if handle is None or not handle.setKeyboardGrabEnabled(True):
            return False
        self._receiver.grabKeyboard()
        return True

    def release(self) -> None:
        self._receiver.releaseKeyboard()
        handle = self._window_handle()
        if handle is not None:
            handle.setKeyboardGrabEnabled(False)


class HotkeyCaptureDialog(QDialog):
    """
    ホットキー取得中に表示するダイアログ。

    押されたキーを候補として表示し、キーが離された時点で確定する。
    Ctrl+Cで割り当てを解除できる。

    Signals:
        closed: 取得が確定・中止されてダイアログが閉じた
    """

    closed = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._capture: Optional[HotkeyCapture] = None
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setWindowTitle("Set Hotkey")
        self.setModal(True)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Press new hotkey for:"))

        self._action_label = QLabel("")
        self._action_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._action_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self._action_label)

        self._key_label = QLabel("")
        self._key_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._key_label)

        hint = QLabel("Press Ctrl+C to remove the hotkey.")
        hint.setStyleSheet("color: gray;")
        layout.addWidget(hint)

    def attach(self, capture: HotkeyCapture) -> None:
        """キーイベントの中継先を設定する。"""
        self._capture = capture

    def _capturing(self) -> bool:
        return self._capture is not None and self._capture.is_active

    # -------------------------------------------------------------------------
    # CaptureSurface
    # -------------------------------------------------------------------------

    def present(self, target: HotkeyAction) -> None:
        self._action_label.setText(target.label)
        self._key_label.setText("")
        self.open()
        self.raise_()
        self.activateWindow()

    def show_candidate(self, text: str) -> None:
        self._key_label.setText(text)

    def dismiss(self) -> None:
        self.hide()
        self.closed.emit()

    def report_error(self, message: str) -> None:
        QMessageBox.warning(self.parentWidget(), APP_NAME, message)

    # -------------------------------------------------------------------------
    # Qtイベント
    # -------------------------------------------------------------------------

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if not self._capturing():
            super().keyPressEvent(event)
            return
        try:
            self._capture.key_pressed(event.key(), int(event.modifiers().value))
        except Exception as e:
            logger.error(f"ホットキー取得を中止しました: {e}")
        event.accept()

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        if not self._capturing():
            super().keyReleaseEvent(event)
            return
        if event.isAutoRepeat():
            event.accept()
            return
        try:
            self._capture.key_released()
        except Exception as e:
            logger.error(f"ホットキーの確定に失敗: {e}")
            self.report_error(str(e))
        event.accept()

    def reject(self) -> None:
        # 閉じるボタン等でダイアログが閉じられた
        if self._capturing():
            self._capture.dismiss()
        super().reject()
