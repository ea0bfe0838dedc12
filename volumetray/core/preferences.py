"""
設定トランザクションモジュール

設定画面での編集を一括で扱う。編集はトランザクションに溜めておき、
確定時に編集前の値と比較して変更ドメインを決定し、
ConfigStoreへ書き込んで保存する。破棄時はストアに一切触れない。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Set, Tuple

from ..config.config_store import ConfigStore
from ..config.constants import CHANNEL_KEY, GLOBAL_SECTION, NO_BINDING_TEXT
from ..config.types import SETTINGS, ChangeDomain, HotkeyAction, ValueKind, domain_for, setting_spec
from ..errors import ConfigSaveError, TransactionClosed
from ..utils.logger import get_logger
from .accelerator import decode_or_unbound

logger = get_logger(__name__)

SettingId = Tuple[str, str]  # (section, key)

# 設定画面から編集できるグローバルキー
EDITABLE_KEYS: Tuple[str, ...] = tuple(SETTINGS)

_ACCELERATOR_KEYS = frozenset(action.config_key for action in HotkeyAction)


class TransactionState(str, Enum):
    """Preference transaction lifecycle."""
    OPEN = "open"
    COMMITTED = "committed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class ChangeSet:
    """
    Result of a committed transaction.

    Attributes:
        domains: subsystems that must be notified
        changed: settings whose value differs from the snapshot
        save_error: set when the values could not be written to disk
    """
    domains: FrozenSet[ChangeDomain] = frozenset()
    changed: FrozenSet[SettingId] = frozenset()
    save_error: Optional[ConfigSaveError] = None

    def __contains__(self, domain: object) -> bool:
        return domain in self.domains

    @property
    def saved(self) -> bool:
        return self.save_error is None


class PreferenceTransaction:
    """
    設定画面一回分の編集内容。

    編集前の値のスナップショットと、ステージされた新しい値を保持する。
    """

    def __init__(self, store: ConfigStore, snapshot: Dict[SettingId, Any]) -> None:
        self._store = store
        self._snapshot = snapshot
        self._staged: Dict[SettingId, Any] = {}
        self._state = TransactionState.OPEN

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is TransactionState.OPEN

    @property
    def staged(self) -> Dict[SettingId, Any]:
        return dict(self._staged)

    @property
    def snapshot(self) -> Dict[SettingId, Any]:
        return dict(self._snapshot)

    def stage(self, key: str, value: Any, section: str = GLOBAL_SECTION) -> None:
        """
        編集内容を記録する。ストアには書き込まない。

        既知のキーは設定表の種類に変換して記録する。

        Raises:
            TransactionClosed: 確定または破棄済みの場合
            ValueError: キーの種類として表現できない値の場合
        """
        self._ensure_open()
        spec = setting_spec(section, key)
        kind = spec.kind if spec is not None else ValueKind.of(value)
        try:
            value = kind.coerce(value)
        except ValueError as e:
            raise ValueError(f"[{section}] {key}: {e}") from e

        setting = (section, key)
        if setting not in self._snapshot:
            # 編集画面の外で増えた項目（切り替え後のデバイスのチャンネル等）
            self._snapshot[setting] = effective_value(self._store, key, section)
        self._staged[setting] = value

    def stage_channel(self, device: str, channel: str) -> None:
        if not device or device == GLOBAL_SECTION:
            raise ValueError(f"Invalid audio device name: {device!r}")
        self.stage(CHANNEL_KEY, channel, section=device)

    def stage_binding(self, action: HotkeyAction, text: str) -> None:
        """ホットキー取得の結果を記録する。"""
        self.stage(action.config_key, text)

    def value(self, key: str, default: Any = None, section: str = GLOBAL_SECTION) -> Any:
        """編集中の値（無ければ編集前の値）を返す。"""
        setting = (section, key)
        if setting in self._staged:
            return self._staged[setting]
        snapshot = self._snapshot.get(setting)
        return default if snapshot is None else snapshot

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise TransactionClosed(f"Preference transaction already {self._state.value}.")

    def _close(self, state: TransactionState) -> None:
        self._state = state


class PreferenceCoordinator:
    """
    設定トランザクションの開始・確定・破棄を管理する。

    同時に開けるトランザクションは一つで、開いている間にopen()を呼ぶと
    同じトランザクションを返す。
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self._active: Optional[PreferenceTransaction] = None

    @property
    def active(self) -> Optional[PreferenceTransaction]:
        return self._active

    def open(self) -> PreferenceTransaction:
        """編集可能な全項目のスナップショットを取ってトランザクションを開始する。"""
        if self._active is not None and self._active.is_open:
            logger.debug("開いている設定トランザクションを再利用します")
            return self._active

        snapshot: Dict[SettingId, Any] = {
            (GLOBAL_SECTION, key): effective_value(self._store, key) for key in EDITABLE_KEYS
        }
        device = snapshot[(GLOBAL_SECTION, "AudioDevice")]
        if device and device != GLOBAL_SECTION:
            snapshot[(device, CHANNEL_KEY)] = effective_value(self._store, CHANNEL_KEY, device)

        self._active = PreferenceTransaction(self._store, snapshot)
        logger.debug("設定トランザクションを開始しました")
        return self._active

    def stage(self, key: str, value: Any, section: str = GLOBAL_SECTION) -> None:
        """開いているトランザクションに編集内容を記録する。"""
        if self._active is None:
            raise TransactionClosed("No preference transaction is open.")
        self._active.stage(key, value, section)

    def commit(self, transaction: Optional[PreferenceTransaction] = None) -> ChangeSet:
        """
        編集内容を確定する。

        編集前の値と異なる項目から変更ドメインを決定し、全ての編集内容を
        ストアに書き込んで保存する。保存に失敗してもメモリ上の値は更新され、
        エラーはChangeSet.save_errorで返される。

        Raises:
            TransactionClosed: 確定または破棄済みの場合
        """
        transaction = self._resolve(transaction)
        transaction._ensure_open()

        domains: Set[ChangeDomain] = set()
        changed: Set[SettingId] = set()
        values: Dict[SettingId, Any] = {}

        for setting, value in transaction.staged.items():
            section, key = setting
            old = transaction.snapshot.get(setting)
            if section == GLOBAL_SECTION and key in _ACCELERATOR_KEYS:
                value = decode_or_unbound(value).to_text()
                old = decode_or_unbound(old if isinstance(old, str) else NO_BINDING_TEXT).to_text()
            values[setting] = value

            if _normalized(value) != _normalized(old):
                changed.add(setting)
                domain = domain_for(section, key)
                if domain is not None:
                    domains.add(domain)

        for (section, key), value in values.items():
            self._store.set(ValueKind.of(value), key, value, section=section)

        transaction._close(TransactionState.COMMITTED)
        if self._active is transaction:
            self._active = None

        save_error = None
        try:
            self._store.save()
        except ConfigSaveError as e:
            logger.warning(f"設定は反映されましたが保存できませんでした: {e.message}")
            save_error = e

        changes = ChangeSet(frozenset(domains), frozenset(changed), save_error)
        logger.info(
            f"設定を確定しました: {len(changed)}項目変更 "
            f"[{', '.join(sorted(d.value for d in domains))}]"
        )
        return changes

    def discard(self, transaction: Optional[PreferenceTransaction] = None) -> None:
        """
        編集内容を破棄する。ストアには触れない。

        Raises:
            TransactionClosed: 確定または破棄済みの場合
        """
        transaction = self._resolve(transaction)
        transaction._ensure_open()
        transaction._close(TransactionState.DISCARDED)
        if self._active is transaction:
            self._active = None
        logger.debug("設定トランザクションを破棄しました")

    def _resolve(self, transaction: Optional[PreferenceTransaction]) -> PreferenceTransaction:
        if transaction is not None:
            return transaction
        if self._active is None:
            raise TransactionClosed("No preference transaction is open.")
        return self._active


def effective_value(store: ConfigStore, key: str, section: str = GLOBAL_SECTION) -> Any:
    """
    設定画面に表示される値を返す。

    設定表にあるキーは値が無い・型が違う場合に既定値となり、
    音量メーター色はクランプ後の値になる。表に無いキーは保存値そのまま。
    """
    if section == GLOBAL_SECTION and key == "VolMeterColor":
        return list(store.get_vol_meter_color())
    spec = setting_spec(section, key)
    if spec is None:
        return store.peek(key, section)
    return store.get(spec.kind, key, spec.default, section=section)


def _normalized(value: Any) -> Any:
    """比較用に値を正規化する（リストとタプルを同一視）。"""
    if isinstance(value, (list, tuple)):
        return [float(v) for v in value]
    return value
