"""
コア統合モジュール

設定ストア、アクセラレータ変換、設定トランザクション、設定反映を
まとめて管理するコントローラー。トレイアイコンやオーディオ処理は
協調オブジェクトとして外から渡される。
"""

from typing import Callable, Optional

from .config import ConfigStore
from .core.accelerator import AcceleratorCodec
from .core.hotkey_capture import (
    DOUBLE_CLICK,
    PRIMARY_BUTTON,
    CaptureSurface,
    HotkeyCapture,
    KeyboardGrab,
)
from .core.preference_applier import (
    AudioBackend,
    HotkeyRegistrar,
    NotificationSink,
    PreferenceApplier,
    ViewNotifier,
)
from .core.preferences import ChangeSet, PreferenceCoordinator, PreferenceTransaction
from .errors import CaptureInProgress, ConfigLoadError, GrabUnavailable
from .utils.logger import get_logger

logger = get_logger(__name__)

ErrorReporter = Callable[[str], None]


class VolumeTrayCore:
    """
    VolumeTrayのコアコントローラー。

    起動時に設定を読み込んで全サブシステムに反映し、
    設定画面の編集とホットキー取得を仲介する。
    """

    def __init__(
        self,
        store: ConfigStore,
        codec: AcceleratorCodec,
        audio: Optional[AudioBackend] = None,
        registrar: Optional[HotkeyRegistrar] = None,
        view: Optional[ViewNotifier] = None,
        notifications: Optional[NotificationSink] = None,
        report_error: Optional[ErrorReporter] = None,
    ) -> None:
        self._store = store
        self._codec = codec
        self._registrar = registrar
        self._report_error = report_error or self._log_error
        self._coordinator = PreferenceCoordinator(store)
        self._capture: Optional[HotkeyCapture] = None
        self._applier = PreferenceApplier(
            store,
            audio=audio,
            registrar=registrar,
            view=view,
            notifications=notifications,
        )

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def codec(self) -> AcceleratorCodec:
        return self._codec

    @property
    def coordinator(self) -> PreferenceCoordinator:
        return self._coordinator

    @staticmethod
    def _log_error(message: str) -> None:
        logger.error(message)

    # -------------------------------------------------------------------------
    # ライフサイクル
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        設定を読み込み、全ドメインを反映する。

        読み込みに失敗した場合はエラーを通知し、デフォルト値で動作を続ける。
        """
        logger.info("VolumeTrayを初期化中...")
        try:
            self._store.load()
        except ConfigLoadError as e:
            self._report_error(e.message)

        failed = self._applier.apply_all()
        if failed:
            logger.warning(f"反映できなかったドメイン: {', '.join(d.value for d in failed)}")
        logger.info("準備完了。")

    def shutdown(self) -> None:
        """グローバルホットキーを解除する。"""
        if self._registrar is not None:
            self._registrar.disarm()
        logger.info("VolumeTrayを終了します")

    # -------------------------------------------------------------------------
    # 設定画面
    # -------------------------------------------------------------------------

    def open_preferences(self) -> PreferenceTransaction:
        return self._coordinator.open()

    def commit_preferences(self) -> ChangeSet:
        """
        編集内容を確定し、変更のあったサブシステムに反映する。

        Returns:
            確定結果
        """
        changes = self._coordinator.commit()
        if changes.save_error is not None:
            self._report_error(changes.save_error.message)
        self._applier.apply(changes)
        return changes

    def discard_preferences(self) -> None:
        self._coordinator.discard()

    # -------------------------------------------------------------------------
    # ホットキー取得
    # -------------------------------------------------------------------------

    def create_capture(self, grab: KeyboardGrab, surface: CaptureSurface) -> HotkeyCapture:
        return HotkeyCapture(self._codec, grab, surface)

    def capture_hotkey(
        self,
        capture: HotkeyCapture,
        target: str,
        button: int = PRIMARY_BUTTON,
        click_count: int = DOUBLE_CLICK,
    ) -> bool:
        """
        開いている設定トランザクションに向けてホットキー取得を開始する。

        キーボードの占有はプロセス全体で一つのため、別のコントローラーが
        取得中の間は開始しない。

        Returns:
            取得を開始した場合True

        Raises:
            CaptureInProgress: 既に取得中の場合
            InvalidWidgetTarget: 対象アクション名が不正な場合
        """
        active = self._capture
        if active is not None and active is not capture and active.is_active:
            raise CaptureInProgress("A hotkey capture is already in progress.")

        transaction = self._coordinator.open()
        try:
            started = capture.activate(target, transaction, button, click_count)
        except GrabUnavailable as e:
            # 取得画面には通知済み
            logger.warning(e.message)
            return False
        if started:
            self._capture = capture
        return started
