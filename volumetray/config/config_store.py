"""
設定ストアモジュール

ユーザー設定ファイル（YAML）の読み込み・保存と、型付きの設定値アクセスを提供する。
設定はセクション単位で管理される。"global"セクションがグローバル設定を、
それ以外のセクションはオーディオデバイスごとのチャンネル選択を保持する。
"""

import copy
import math
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from ..errors import ConfigLoadError, ConfigSaveError
from ..utils.logger import get_logger
from .constants import (
    CHANNEL_KEY,
    CONFIG_DIR_NAME,
    DEFAULT_DOCUMENT,
    DEFAULT_VOL_METER_COLOR,
    GLOBAL_SECTION,
    SETTINGS_FILE_NAME,
)
from .types import ValueKind

logger = get_logger(__name__)


class ConfigStore:
    """
    型付き設定値の永続化ストア。

    load()でファイル（無ければ組み込みデフォルト文書）から全状態を読み込み、
    set()はメモリ上の値のみを更新する。ディスクへの反映はsave()を呼んだ時だけ行う。
    get()は決して失敗せず、値が無い・型が違う・読み込み失敗時は
    呼び出し側のデフォルト値を返す。

    Attributes:
        config_path: 設定ファイルのパス
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        volume_commands: Optional[Sequence[str]] = None,
    ) -> None:
        """
        ConfigStoreを初期化する。状態は空で、load()を呼ぶまでファイルは読まない。

        Args:
            config_path: 設定ファイルのパス。Noneの場合はプラットフォームの設定ディレクトリ
            volume_commands: 外部ミキサーコマンドの候補。Noneの場合はプラットフォーム既定
        """
        self._platform = None
        self.config_path = self._resolve_config_path(config_path)
        self._volume_commands = volume_commands
        self._data: Dict[str, Dict[str, Any]] = {}

    def _get_platform(self):
        if self._platform is None:
            from ..platform.factory import get_platform_adapter
            self._platform = get_platform_adapter()
        return self._platform

    def _resolve_config_path(self, config_path: Optional[Union[str, Path]]) -> Path:
        """設定ファイルのパスを解決する。"""
        if config_path:
            return Path(config_path)
        return self._get_platform().config_dir / CONFIG_DIR_NAME / SETTINGS_FILE_NAME

    # -------------------------------------------------------------------------
    # 読み込み・保存
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        設定ファイルを読み込み、既存の状態を置き換える。

        ファイルが無い場合は組み込みデフォルト文書をパースする。

        Raises:
            ConfigLoadError: パースに失敗した場合。ストアは空の状態になる
        """
        self._data = {}

        from_file = self.config_path.exists()
        try:
            if from_file:
                text = self.config_path.read_text(encoding="utf-8")
            else:
                logger.info(f"設定ファイルが見つかりません: {self.config_path}。デフォルト値を使用します。")
                text = DEFAULT_DOCUMENT
            data = self._parse(text)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as e:
            if from_file:
                message = f"Couldn't load preferences file: {e}"
            else:
                message = f"Couldn't load default preferences: {e}"
            logger.error(message)
            raise ConfigLoadError(message) from e

        self._data = data
        logger.debug(f"設定を読み込みました: {len(self._data)}セクション")

    @staticmethod
    def _parse(text: str) -> Dict[str, Dict[str, Any]]:
        """
        YAML文書をセクション辞書に変換する。

        Raises:
            ValueError: 文書の構造が不正な場合
        """
        document = yaml.safe_load(text)
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ValueError("top level must be a mapping of sections")

        data: Dict[str, Dict[str, Any]] = {}
        for section, values in document.items():
            if values is None:
                values = {}
            if not isinstance(values, dict):
                raise ValueError(f"section '{section}' must be a mapping")
            data[str(section)] = {str(key): value for key, value in values.items()}
        return data

    def save(self) -> None:
        """
        メモリ上の全設定を設定ファイルに書き出す。

        同じディレクトリの一時ファイルに書いてから置き換えるため、
        途中まで書かれたファイルが残ることはない。

        Raises:
            ConfigSaveError: ディレクトリ作成または書き込みに失敗した場合
        """
        directory = self.config_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            message = f"Couldn't make prefs directory {directory}: {e}"
            logger.error(message)
            raise ConfigSaveError(message) from e

        document = yaml.safe_dump(
            self._ordered_data(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.config_path.name}.",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(document)
            os.replace(tmp_name, self.config_path)
            tmp_name = None
        except OSError as e:
            message = f"Couldn't write preferences file: {e}"
            logger.error(message)
            raise ConfigSaveError(message) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"設定を保存しました: {self.config_path}")

    def _ordered_data(self) -> Dict[str, Dict[str, Any]]:
        """グローバルセクションを先頭にした保存用の辞書を返す。"""
        ordered: Dict[str, Dict[str, Any]] = {}
        if GLOBAL_SECTION in self._data:
            ordered[GLOBAL_SECTION] = dict(self._data[GLOBAL_SECTION])
        for section, values in self._data.items():
            if section != GLOBAL_SECTION:
                ordered[section] = dict(values)
        return ordered

    # -------------------------------------------------------------------------
    # 型付きアクセス
    # -------------------------------------------------------------------------

    def get(
        self,
        kind: ValueKind,
        key: str,
        default: Any,
        section: str = GLOBAL_SECTION,
    ) -> Any:
        """
        設定値を取得する。

        Args:
            kind: 期待する値の種類
            key: 設定キー
            default: キーが無い・型が違う場合に返す値
            section: セクション名

        Returns:
            設定値、またはdefault
        """
        values = self._data.get(section)
        if values is None or key not in values:
            return default
        try:
            return kind.coerce(values[key])
        except ValueError:
            logger.debug(f"[{section}] {key} は{kind.value}ではありません。デフォルト値を使用します。")
            return default

    def set(
        self,
        kind: ValueKind,
        key: str,
        value: Any,
        section: str = GLOBAL_SECTION,
    ) -> None:
        """
        設定値をメモリ上に設定する。ディスクへはsave()まで書かれない。

        Raises:
            ValueError: valueがkindとして表現できない場合
        """
        self._data.setdefault(section, {})[key] = kind.coerce(value)

    def peek(self, key: str, section: str = GLOBAL_SECTION) -> Any:
        """型変換せずに保存値のコピーを返す。無ければNone。"""
        return copy.deepcopy(self._data.get(section, {}).get(key))

    def has_key(self, key: str, section: str = GLOBAL_SECTION) -> bool:
        return key in self._data.get(section, {})

    def remove(self, key: str, section: str = GLOBAL_SECTION) -> None:
        values = self._data.get(section)
        if values is not None:
            values.pop(key, None)

    def sections(self) -> List[str]:
        return list(self._data)

    # -------------------------------------------------------------------------
    # デバイスごとのチャンネル
    # -------------------------------------------------------------------------

    def get_channel(self, device: Optional[str], default: Optional[str] = None) -> Optional[str]:
        """
        デバイスの選択チャンネルを取得する。

        Args:
            device: オーディオデバイス識別子
            default: 未設定・型が違う場合に返す値

        Returns:
            チャンネル名、またはdefault
        """
        if not device or device == GLOBAL_SECTION:
            return default
        return self.get(ValueKind.STRING, CHANNEL_KEY, default, section=device)

    def set_channel(self, device: str, channel: str) -> None:
        """デバイスの選択チャンネルを設定する。"""
        if not device or device == GLOBAL_SECTION:
            raise ValueError(f"Invalid audio device name: {device!r}")
        self.set(ValueKind.STRING, CHANNEL_KEY, channel, section=device)

    # -------------------------------------------------------------------------
    # 音量メーター色
    # -------------------------------------------------------------------------

    def get_vol_meter_color(self) -> Tuple[float, float, float]:
        """
        音量メーターの色を取得する。

        Returns:
            0.0〜1.0にクランプされたRGB値。無い・不正（NaN等を含む）場合は既定色
        """
        colors = self.get(ValueKind.DOUBLE_LIST, "VolMeterColor", None)
        if colors is None or len(colors) < 3:
            return DEFAULT_VOL_METER_COLOR
        if not all(math.isfinite(c) for c in colors[:3]):
            logger.debug("VolMeterColor に有限でない値があります。既定色を使用します。")
            return DEFAULT_VOL_METER_COLOR
        red, green, blue = (min(max(c, 0.0), 1.0) for c in colors[:3])
        return (red, green, blue)

    def set_vol_meter_color(self, colors: Sequence[float]) -> None:
        self.set(ValueKind.DOUBLE_LIST, "VolMeterColor", list(colors))

    # -------------------------------------------------------------------------
    # 外部ミキサーコマンド
    # -------------------------------------------------------------------------

    def resolve_volume_command(self) -> Optional[str]:
        """
        外部ミキサーの起動コマンドを決定する。

        明示的に設定されていればそれを返し、無ければ既知のミキサーを
        順に探して最初に見つかったものを返す。探索の失敗は例外にしない。

        Returns:
            コマンド。見つからない場合None
        """
        command = self.get(ValueKind.STRING, "VolumeControlCommand", "")
        if command:
            return command

        candidates = self._volume_commands
        if candidates is None:
            candidates = self._get_platform().volume_control_commands

        for candidate in candidates:
            try:
                if shutil.which(candidate):
                    logger.debug(f"ミキサーコマンドを検出: {candidate}")
                    return candidate
            except OSError as e:
                logger.warning(f"ミキサーコマンドの検索に失敗: {candidate}: {e}")

        logger.info("利用可能なミキサーコマンドが見つかりませんでした。")
        return None
