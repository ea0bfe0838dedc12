"""
ホットキー取得モジュール

ユーザーが押したキーの組み合わせを、ミュート・音量アップ・音量ダウンの
いずれかのアクションに割り当てるための状態機械を提供する。

状態遷移はイベント配送の仕組みに依存しない純粋関数transition()で表し、
キーボードの占有・解放や設定値の書き込みといった副作用は
エフェクトのリストとして返す。HotkeyCaptureはそのエフェクトを実行し、
LISTENING状態からのすべての出口でキーボードの占有を必ず解放する。

    IDLE -> GRABBING -> LISTENING -> COMMITTED | CANCELLED
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Protocol, Tuple, Union

from ..config.constants import NO_BINDING_TEXT
from ..config.types import HotkeyAction
from ..errors import CaptureInProgress, GrabUnavailable
from ..utils.logger import get_logger
from .accelerator import AcceleratorCodec

logger = get_logger(__name__)

# 割り当て解除として扱う予約キー（Ctrl+C）
ABORT_ACCELERATOR: str = "<ctrl>+c"

# 取得開始のジェスチャー（主ボタンのダブルクリック）
PRIMARY_BUTTON: int = 1
DOUBLE_CLICK: int = 2

GRAB_FAILED_MESSAGE: str = "Could not grab the keyboard."


class CaptureState(str, Enum):
    """Hotkey capture states."""
    IDLE = "idle"
    GRABBING = "grabbing"
    LISTENING = "listening"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


# =============================================================================
# イベント
# =============================================================================

@dataclass(frozen=True)
class Activate:
    """A capture target was activated by the user."""
    target: str
    button: int = PRIMARY_BUTTON
    click_count: int = DOUBLE_CLICK


@dataclass(frozen=True)
class GrabAcquired:
    pass


@dataclass(frozen=True)
class GrabDenied:
    reason: str = ""


@dataclass(frozen=True)
class KeyPressed:
    keycode: int
    state: int
    group: int = 0


@dataclass(frozen=True)
class KeyReleased:
    pass


@dataclass(frozen=True)
class Dismissed:
    pass


@dataclass(frozen=True)
class Aborted:
    reason: str


CaptureEvent = Union[Activate, GrabAcquired, GrabDenied, KeyPressed, KeyReleased, Dismissed, Aborted]


# =============================================================================
# エフェクト
# =============================================================================

@dataclass(frozen=True)
class AcquireGrab:
    pass


@dataclass(frozen=True)
class ReleaseGrab:
    pass


@dataclass(frozen=True)
class PresentSurface:
    target: HotkeyAction


@dataclass(frozen=True)
class ShowCandidate:
    text: str


@dataclass(frozen=True)
class StageBinding:
    target: HotkeyAction
    text: str


@dataclass(frozen=True)
class DismissSurface:
    pass


@dataclass(frozen=True)
class ReportError:
    message: str


CaptureEffect = Union[
    AcquireGrab, ReleaseGrab, PresentSurface, ShowCandidate, StageBinding, DismissSurface, ReportError
]


# =============================================================================
# セッションと状態遷移
# =============================================================================

@dataclass(frozen=True)
class CaptureSession:
    """
    進行中のホットキー取得の状態。

    Attributes:
        state: 現在の状態
        target: 割り当て先のアクション
        candidate: 現時点での候補（正規テキスト）
        grab_acquired: キーボードを占有しているか
        key_pressed: キー押下を一度でも受け取ったか
    """
    state: CaptureState = CaptureState.IDLE
    target: Optional[HotkeyAction] = None
    candidate: Optional[str] = None
    grab_acquired: bool = False
    key_pressed: bool = False

    @property
    def is_active(self) -> bool:
        return self.state in (CaptureState.GRABBING, CaptureState.LISTENING)


IDLE_SESSION = CaptureSession()


def transition(
    session: CaptureSession,
    event: CaptureEvent,
    codec: AcceleratorCodec,
) -> Tuple[CaptureSession, List[CaptureEffect]]:
    """
    イベントを適用した新しいセッションと、実行すべきエフェクトを返す。

    現在の状態で意味を持たないイベントは無視される（セッションはそのまま）。

    Args:
        session: 現在のセッション
        event: 発生したイベント
        codec: キーイベントの変換に使うコーデック

    Returns:
        (新しいセッション, エフェクトのリスト)

    Raises:
        CaptureInProgress: 取得中に新しい取得が要求された場合
        InvalidWidgetTarget: 対象アクション名が不正な場合
    """
    state = session.state

    if isinstance(event, Activate):
        if session.is_active:
            raise CaptureInProgress("A hotkey capture is already in progress.")
        if event.button != PRIMARY_BUTTON or event.click_count != DOUBLE_CLICK:
            return session, []
        target = HotkeyAction.from_name(event.target)
        return CaptureSession(CaptureState.GRABBING, target), [AcquireGrab()]

    if isinstance(event, GrabAcquired) and state is CaptureState.GRABBING:
        listening = replace(session, state=CaptureState.LISTENING, grab_acquired=True)
        return listening, [PresentSurface(session.target)]

    if isinstance(event, GrabDenied) and state is CaptureState.GRABBING:
        message = GRAB_FAILED_MESSAGE
        if event.reason:
            message = f"{message} ({event.reason})"
        return IDLE_SESSION, [ReportError(message)]

    if isinstance(event, KeyPressed) and state is CaptureState.LISTENING:
        text = codec.raw_to_canonical(event.keycode, event.state, event.group)
        if text == ABORT_ACCELERATOR:
            text = NO_BINDING_TEXT
        return replace(session, candidate=text, key_pressed=True), [ShowCandidate(text)]

    if isinstance(event, KeyReleased) and state is CaptureState.LISTENING:
        if not session.key_pressed:
            return session, []
        committed = replace(session, state=CaptureState.COMMITTED, grab_acquired=False)
        # 占有の解放は必ず最初に行う
        return committed, [
            ReleaseGrab(),
            StageBinding(session.target, session.candidate),
            DismissSurface(),
        ]

    if isinstance(event, (Dismissed, Aborted)) and session.is_active:
        cancelled = replace(
            session,
            state=CaptureState.CANCELLED,
            candidate=None,
            grab_acquired=False,
        )
        effects: List[CaptureEffect] = []
        if session.grab_acquired:
            effects.append(ReleaseGrab())
        if state is CaptureState.LISTENING:
            effects.append(DismissSurface())
        if isinstance(event, Aborted):
            effects.append(ReportError(event.reason))
        return cancelled, effects

    logger.debug(f"{state.value}状態ではイベント{type(event).__name__}を無視します")
    return session, []


# =============================================================================
# 協調オブジェクト
# =============================================================================

class KeyboardGrab(Protocol):
    """ホスト全体のキーボード占有。"""

    def acquire(self) -> bool:
        """占有を試み、成功した場合Trueを返す。"""
        ...

    def release(self) -> None:
        ...


class CaptureSurface(Protocol):
    """取得中に表示するモーダル画面。"""

    def present(self, target: HotkeyAction) -> None:
        ...

    def show_candidate(self, text: str) -> None:
        ...

    def dismiss(self) -> None:
        ...

    def report_error(self, message: str) -> None:
        ...


class BindingSink(Protocol):
    """取得結果の書き込み先（通常は開いている設定トランザクション）。"""

    def stage_binding(self, action: HotkeyAction, text: str) -> None:
        ...


class HotkeyCapture:
    """
    ホットキー取得の実行コントローラー。

    transition()が返すエフェクトをキーボード占有・取得画面・
    書き込み先に対して実行する。同時に実行できる取得は一つだけ。
    """

    def __init__(
        self,
        codec: AcceleratorCodec,
        grab: KeyboardGrab,
        surface: CaptureSurface,
    ) -> None:
        self._codec = codec
        self._grab = grab
        self._surface = surface
        self._session = IDLE_SESSION
        self._sink: Optional[BindingSink] = None
        self._grab_held = False

    @property
    def session(self) -> CaptureSession:
        return self._session

    @property
    def state(self) -> CaptureState:
        return self._session.state

    @property
    def is_active(self) -> bool:
        return self._session.is_active

    def activate(
        self,
        target: str,
        sink: BindingSink,
        button: int = PRIMARY_BUTTON,
        click_count: int = DOUBLE_CLICK,
    ) -> bool:
        """
        対象アクションのホットキー取得を開始する。

        Args:
            target: アクション名（"mute", "up", "down"）
            sink: 取得結果の書き込み先
            button: 押されたマウスボタン
            click_count: クリック回数

        Returns:
            取得を開始した場合True、ジェスチャーが対象外の場合False

        Raises:
            CaptureInProgress: 既に取得中の場合
            InvalidWidgetTarget: 対象アクション名が不正な場合
            GrabUnavailable: キーボードを占有できなかった場合
        """
        session, effects = transition(
            self._session, Activate(target, button, click_count), self._codec
        )
        if session is self._session:
            return False

        logger.info(f"ホットキー取得開始: {session.target.label}")
        self._session = session
        self._sink = sink
        try:
            self._run(effects)
        except Exception as e:
            if self._session.state is CaptureState.IDLE:
                # 占有できずに戻った。通知の失敗より占有失敗を優先する
                self._sink = None
                raise GrabUnavailable(GRAB_FAILED_MESSAGE) from e
            self._cancel_after_failure("Capture surface could not be shown.")
            raise

        if self._session.state is CaptureState.IDLE:
            self._sink = None
            raise GrabUnavailable(GRAB_FAILED_MESSAGE)
        return True

    def key_pressed(self, keycode: int, state: int, group: int = 0) -> None:
        """キー押下を処理する。変換に失敗した場合は取得を中止する。"""
        try:
            self._dispatch(KeyPressed(keycode, state, group))
        except Exception as e:
            logger.error(f"キーイベントの処理に失敗: {e}")
            self._cancel_after_failure(str(e))
            raise

    def key_released(self) -> None:
        """キー解放を処理する。押下済みであれば取得を確定する。"""
        self._dispatch(KeyReleased())

    def dismiss(self) -> None:
        """取得画面が閉じられた場合の処理。"""
        self._dispatch(Dismissed())

    def abort(self, reason: str) -> None:
        """取得を中止し、占有を解放する。"""
        self._dispatch(Aborted(reason))

    def _cancel_after_failure(self, reason: str) -> None:
        """失敗後に取得を中止する。元の例外は呼び出し側が送出する。"""
        if not self._session.is_active:
            return
        try:
            self.abort(reason)
        except Exception as e:
            logger.error(f"取得の中止処理に失敗: {e}")

    def _dispatch(self, event: CaptureEvent) -> None:
        session, effects = transition(self._session, event, self._codec)
        self._session = session
        try:
            self._run(effects)
        finally:
            if not session.is_active:
                self._release_grab()
                if session.state in (CaptureState.COMMITTED, CaptureState.CANCELLED):
                    logger.info(f"ホットキー取得終了: {session.state.value}")
                    self._sink = None

    def _run(self, effects: List[CaptureEffect]) -> None:
        """
        エフェクトを順に実行する。

        一つが失敗しても残りは実行し、最初の例外を最後に送出する。
        """
        first_error: Optional[Exception] = None
        for effect in effects:
            try:
                self._execute(effect)
            except Exception as e:
                logger.error(f"{type(effect).__name__}の実行に失敗: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def _execute(self, effect: CaptureEffect) -> None:
        if isinstance(effect, AcquireGrab):
            acquired = self._acquire_grab()
            follow_up = GrabAcquired() if acquired else GrabDenied()
            session, effects = transition(self._session, follow_up, self._codec)
            self._session = session
            self._run(effects)
        elif isinstance(effect, ReleaseGrab):
            self._release_grab()
        elif isinstance(effect, PresentSurface):
            self._surface.present(effect.target)
        elif isinstance(effect, ShowCandidate):
            self._surface.show_candidate(effect.text)
        elif isinstance(effect, StageBinding):
            self._sink.stage_binding(effect.target, effect.text)
        elif isinstance(effect, DismissSurface):
            self._surface.dismiss()
        elif isinstance(effect, ReportError):
            self._surface.report_error(effect.message)

    def _acquire_grab(self) -> bool:
        try:
            acquired = bool(self._grab.acquire())
        except Exception as e:
            logger.error(f"キーボード占有エラー: {e}")
            acquired = False
        self._grab_held = acquired
        if not acquired:
            logger.warning("キーボードを占有できませんでした")
        return acquired

    def _release_grab(self) -> None:
        """占有中であれば一度だけ解放する。"""
        if not self._grab_held:
            return
        self._grab_held = False
        self._grab.release()
        logger.debug("キーボード占有を解放しました")
