"""
設定反映モジュール

確定された変更ドメインごとに、対応するサブシステムへ新しい設定を通知する。
"""

from typing import Iterable, List, Optional, Protocol

from ..config.config_store import ConfigStore
from ..config.types import (
    ChangeDomain,
    HotkeyBindings,
    NotificationOptions,
    ValueKind,
    ViewOptions,
)
from ..utils.logger import get_logger
from .preferences import ChangeSet

logger = get_logger(__name__)


class AudioBackend(Protocol):
    def reinit(self, device: str, channel: Optional[str]) -> None:
        ...


class HotkeyRegistrar(Protocol):
    def arm(self, bindings: HotkeyBindings) -> None:
        ...

    def disarm(self) -> None:
        ...


class ViewNotifier(Protocol):
    def refresh(self, options: ViewOptions) -> None:
        ...


class NotificationSink(Protocol):
    def configure(self, options: NotificationOptions) -> None:
        ...


# 反映の順序
_APPLY_ORDER = (
    ChangeDomain.AUDIO_REINIT,
    ChangeDomain.HOTKEY_REBIND,
    ChangeDomain.VIEW_REFRESH,
    ChangeDomain.NOTIFICATION_REFRESH,
)


class PreferenceApplier:
    """
    変更ドメインをサブシステムに振り分ける。

    未設定のサブシステムは無視する。一つのサブシステムが失敗しても
    残りのドメインは反映を続ける。
    """

    def __init__(
        self,
        store: ConfigStore,
        audio: Optional[AudioBackend] = None,
        registrar: Optional[HotkeyRegistrar] = None,
        view: Optional[ViewNotifier] = None,
        notifications: Optional[NotificationSink] = None,
    ) -> None:
        self._store = store
        self._audio = audio
        self._registrar = registrar
        self._view = view
        self._notifications = notifications

    def apply(self, changes: ChangeSet) -> List[ChangeDomain]:
        """
        ChangeSetに含まれるドメインを反映する。

        Returns:
            反映に失敗したドメインのリスト
        """
        return self._apply_domains(changes.domains)

    def apply_all(self) -> List[ChangeDomain]:
        """起動時など、全ドメインを反映する。"""
        return self._apply_domains(_APPLY_ORDER)

    def _apply_domains(self, domains: Iterable[ChangeDomain]) -> List[ChangeDomain]:
        requested = set(domains)
        failed: List[ChangeDomain] = []
        for domain in _APPLY_ORDER:
            if domain not in requested:
                continue
            try:
                self._apply_domain(domain)
            except Exception as e:
                logger.error(f"{domain.value}の反映に失敗: {e}", exc_info=True)
                failed.append(domain)
        return failed

    def _apply_domain(self, domain: ChangeDomain) -> None:
        if domain is ChangeDomain.AUDIO_REINIT:
            if self._audio is None:
                return
            device = self._store.get(ValueKind.STRING, "AudioDevice", "default")
            channel = self._store.get_channel(device)
            logger.info(f"オーディオを再初期化: {device} / {channel}")
            self._audio.reinit(device, channel)

        elif domain is ChangeDomain.HOTKEY_REBIND:
            if self._registrar is None:
                return
            bindings = HotkeyBindings.from_store(self._store)
            if bindings.enabled:
                self._registrar.arm(bindings)
            else:
                self._registrar.disarm()

        elif domain is ChangeDomain.VIEW_REFRESH:
            if self._view is not None:
                self._view.refresh(ViewOptions.from_store(self._store))

        elif domain is ChangeDomain.NOTIFICATION_REFRESH:
            if self._notifications is not None:
                self._notifications.configure(NotificationOptions.from_store(self._store))
