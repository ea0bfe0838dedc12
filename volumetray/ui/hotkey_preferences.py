"""
ホットキー設定画面モジュール

グローバルホットキーの有効化・音量ステップ・各アクションのキーを編集する。
編集は設定トランザクションに溜め、OKで確定、Cancelで破棄する。
"""

from typing import Dict, Optional

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QMessageBox,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from ..app import VolumeTrayCore
from ..config.constants import APP_NAME, NO_BINDING_TEXT
from ..config.types import HotkeyAction
from ..core.preferences import PreferenceTransaction
from ..errors import VolumeTrayError
from ..utils.logger import get_logger
from .capture_dialog import HotkeyCaptureDialog, HotkeyField, QtKeyboardGrab

logger = get_logger(__name__)


class HotkeyPreferencesDialog(QDialog):
    """
    ホットキー設定ダイアログ。

    ホットキー欄のダブルクリックでHotkeyCaptureDialogによる取得を開始し、
    取得結果は開いているトランザクションにステージされる。
    """

    def __init__(self, core: VolumeTrayCore, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._core = core
        self._transaction: Optional[PreferenceTransaction] = None
        self._fields: Dict[HotkeyAction, HotkeyField] = {}

        self._setup_ui()

        self._capture_dialog = HotkeyCaptureDialog(self)
        self._capture = core.create_capture(
            QtKeyboardGrab(self._capture_dialog, anchor=self),
            self._capture_dialog,
        )
        self._capture_dialog.attach(self._capture)
        self._capture_dialog.closed.connect(self._refresh_fields)

    @property
    def fields(self) -> Dict[HotkeyAction, HotkeyField]:
        return dict(self._fields)

    def _setup_ui(self) -> None:
        self.setWindowTitle(f"{APP_NAME} - Hotkeys")

        layout = QVBoxLayout(self)

        self._enable_check = QCheckBox("Enable global hotkeys")
        layout.addWidget(self._enable_check)

        form = QFormLayout()
        for action in HotkeyAction:
            field = HotkeyField(action)
            field.activated.connect(self._on_field_activated)
            self._fields[action] = field
            form.addRow(f"{action.label}:", field)

        self._step_spin = QSpinBox()
        self._step_spin.setRange(1, 100)
        form.addRow("Volume step:", self._step_spin)
        layout.addLayout(form)

        hint = QLabel("Double-click a field, then press the new hotkey.")
        hint.setStyleSheet("color: gray;")
        layout.addWidget(hint)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def show_preferences(self) -> None:
        """トランザクションを開いて現在の値を表示する。"""
        self._transaction = self._core.open_preferences()
        self._enable_check.setChecked(bool(self._transaction.value("EnableHotKeys", False)))
        self._step_spin.setValue(int(self._transaction.value("HotkeyVolumeStep", 1)))
        self._refresh_fields()

        self.show()
        self.raise_()
        self.activateWindow()

    def _refresh_fields(self) -> None:
        if self._transaction is None:
            return
        for action, field in self._fields.items():
            field.set_binding(self._transaction.value(action.config_key, NO_BINDING_TEXT))

    def _on_field_activated(self, target: str, button: int, click_count: int) -> None:
        try:
            self._core.capture_hotkey(self._capture, target, button, click_count)
        except VolumeTrayError as e:
            logger.warning(f"ホットキー取得を開始できません: {e.message}")
            QMessageBox.warning(self, APP_NAME, e.message)

    def accept(self) -> None:
        if self._transaction is not None and self._transaction.is_open:
            self._transaction.stage("EnableHotKeys", self._enable_check.isChecked())
            self._transaction.stage("HotkeyVolumeStep", self._step_spin.value())
            self._core.commit_preferences()
        self._transaction = None
        super().accept()

    def reject(self) -> None:
        if self._transaction is not None and self._transaction.is_open:
            self._core.discard_preferences()
        self._transaction = None
        super().reject()
