"""
アクセラレータ変換モジュール

(修飾キーマスク, キー名) の組と正規テキスト表現を相互変換する。
正規テキストはpynputのホットキー表記（例: "<ctrl>+<alt>+m", "<f2>"）に従うため、
そのままグローバルホットキーの登録に使える。未割り当ては予約テキスト"(None)"で表す。
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config.constants import NO_BINDING_TEXT
from ..errors import InvalidAccelerator
from ..platform.base import DEFAULT_MOD_MASK, KeymapService, ModifierMask
from ..utils.logger import get_logger

logger = get_logger(__name__)

# 正規テキストでの修飾キーの並び順
_MODIFIER_TOKENS = (
    (ModifierMask.CONTROL, "ctrl"),
    (ModifierMask.SHIFT, "shift"),
    (ModifierMask.ALT, "alt"),
    (ModifierMask.SUPER, "cmd"),
)

# デコード時に受け付ける修飾キー名
_TOKEN_MODIFIERS = {
    "ctrl": ModifierMask.CONTROL,
    "control": ModifierMask.CONTROL,
    "primary": ModifierMask.CONTROL,
    "shift": ModifierMask.SHIFT,
    "alt": ModifierMask.ALT,
    "cmd": ModifierMask.SUPER,
    "super": ModifierMask.SUPER,
}

_RESERVED_CHARS = frozenset("+<>")

# 未割り当て時のハードウェア表現
UNSET_HARDWARE: Tuple[int, ModifierMask] = (-1, ModifierMask.NONE)


@dataclass(frozen=True)
class Accelerator:
    """
    正規化されたキーの組み合わせ。

    Attributes:
        modifiers: 修飾キーマスク
        key: キー名。Noneは未割り当て
    """

    modifiers: ModifierMask = ModifierMask.NONE
    key: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.key is not None

    def to_text(self) -> str:
        return encode(self.modifiers, self.key)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "Accelerator":
        modifiers, key = decode(text)
        return cls(modifiers, key)


NO_BINDING = Accelerator()


def _normalize_key_name(key_name: str) -> str:
    """
    キー名を正規形（小文字）にする。

    Raises:
        InvalidAccelerator: 区切り文字や空白を含む場合
    """
    name = key_name.strip().lower()
    if not name or any(c in _RESERVED_CHARS or c.isspace() for c in name):
        raise InvalidAccelerator(f"Invalid key name: {key_name!r}")
    return name


def encode(modifier_mask: int, key_name: Optional[str]) -> str:
    """
    修飾キーマスクとキー名を正規テキストに変換する。

    Args:
        modifier_mask: 修飾キーマスク（DEFAULT_MOD_MASKのビットのみ）
        key_name: キー名。Noneまたは空文字は未割り当て。大文字は小文字に揃える

    Returns:
        正規テキスト。未割り当ての場合は"(None)"

    Raises:
        InvalidAccelerator: キー名が表現できない、またはマスクに修飾キー以外のビットがある場合
    """
    if not key_name:
        return NO_BINDING_TEXT

    name = _normalize_key_name(key_name)
    mask = int(modifier_mask)
    if mask & ~int(DEFAULT_MOD_MASK):
        raise InvalidAccelerator(f"Modifier mask {mask:#x} has non-accelerator bits")

    parts = [f"<{token}>" for flag, token in _MODIFIER_TOKENS if mask & flag]
    parts.append(name if len(name) == 1 else f"<{name}>")
    return "+".join(parts)


def decode(text: Optional[str]) -> Tuple[ModifierMask, Optional[str]]:
    """
    正規テキストを修飾キーマスクとキー名に変換する。

    Args:
        text: アクセラレータのテキスト

    Returns:
        (修飾キーマスク, キー名)。未割り当ての場合キー名はNone

    Raises:
        InvalidAccelerator: パースできない場合
    """
    stripped = (text or "").strip()
    if not stripped or stripped.lower() == NO_BINDING_TEXT.lower():
        return ModifierMask.NONE, None

    parts = stripped.split("+")
    if any(not part for part in parts):
        raise InvalidAccelerator(f"Malformed accelerator: {text!r}")

    mask = ModifierMask.NONE
    for token in parts[:-1]:
        name = _unwrap(token, text).lower()
        if name not in _TOKEN_MODIFIERS:
            raise InvalidAccelerator(f"Unknown modifier '{token}' in {text!r}")
        mask |= _TOKEN_MODIFIERS[name]

    key_token = parts[-1]
    if key_token.startswith("<"):
        key = _unwrap(key_token, text)
    elif len(key_token) == 1:
        key = key_token
    else:
        raise InvalidAccelerator(f"Multi-character key must be bracketed in {text!r}")

    return mask, _normalize_key_name(key)


def _unwrap(token: str, text: Optional[str]) -> str:
    if len(token) < 3 or not (token.startswith("<") and token.endswith(">")):
        raise InvalidAccelerator(f"Malformed token '{token}' in {text!r}")
    return token[1:-1]


def decode_or_unbound(text: Optional[str]) -> Accelerator:
    """
    テキストをデコードし、不正な場合は未割り当てとして扱う。

    永続化される値へ不正なテキストを流さないために使う。
    """
    try:
        return Accelerator.from_text(text)
    except InvalidAccelerator as e:
        logger.warning(f"不正なアクセラレータを未割り当てとして扱います: {e.message}")
        return NO_BINDING


class AcceleratorCodec:
    """
    キーマップ変換サービスを使うアクセラレータ変換。

    ネイティブのキーイベントと正規テキストの間の変換を担う。
    """

    def __init__(self, keymap: KeymapService) -> None:
        self._keymap = keymap

    @property
    def keymap(self) -> KeymapService:
        return self._keymap

    def raw_to_canonical(self, keycode: int, state: int, group: int = 0) -> str:
        """
        キーイベントを正規テキストに変換する。

        キー名の生成に消費された修飾キーと、アクセラレータに無関係な修飾は取り除く。

        Args:
            keycode: ネイティブキーコード
            state: ネイティブ修飾状態
            group: キーボードレイアウトのグループ

        Returns:
            正規テキスト。変換できないキーは"(None)"
        """
        key_name, modifiers, consumed = self._keymap.translate_keyboard_state(
            keycode, state, group
        )
        if not key_name:
            logger.debug(f"キーコード {keycode} を変換できませんでした")
            return NO_BINDING_TEXT

        mask = int(modifiers) & ~int(consumed) & int(DEFAULT_MOD_MASK)
        try:
            return encode(mask, key_name)
        except InvalidAccelerator as e:
            logger.warning(f"キーを正規化できません: {e.message}")
            return NO_BINDING_TEXT

    def canonical_to_hardware(self, text: str) -> Tuple[int, ModifierMask]:
        """
        正規テキストをネイティブキーコードと修飾キーマスクに変換する。

        Returns:
            (キーコード, 修飾キーマスク)。未割り当てや解決できないキーは(-1, 0)

        Raises:
            InvalidAccelerator: テキストがパースできない場合
        """
        mask, key_name = decode(text)
        if key_name is None:
            return UNSET_HARDWARE

        keycode = self._keymap.keycode_for_name(key_name)
        if keycode is None:
            logger.warning(f"キー '{key_name}' はこのキーボードで解決できません")
            return UNSET_HARDWARE
        return keycode, mask

    def hardware_to_canonical(self, keycode: int, modifier_mask: int) -> str:
        """ネイティブキーコードと修飾キーマスクを正規テキストに変換する。"""
        if keycode < 0:
            return NO_BINDING_TEXT
        key_name = self._keymap.name_for_keycode(keycode)
        try:
            return encode(int(modifier_mask) & int(DEFAULT_MOD_MASK), key_name)
        except InvalidAccelerator as e:
            logger.warning(f"キーを正規化できません: {e.message}")
            return NO_BINDING_TEXT
