"""
アプリケーション定数・デフォルト設定モジュール

VolumeTray全体で使用される定数値と、
設定ファイルが存在しない場合に読み込む組み込みデフォルト文書を定義する。
"""

from typing import Tuple

# ============================================
# アプリケーションメタデータ
# ============================================
APP_NAME: str = "VolumeTray"
APP_VERSION: str = "0.1.0"

# ============================================
# ファイル・セクション名
# ============================================
CONFIG_DIR_NAME: str = "volumetray"    # ユーザー設定ディレクトリ配下のフォルダ名
SETTINGS_FILE_NAME: str = "config.yaml"
GLOBAL_SECTION: str = "global"         # グローバル設定用の予約セクション
CHANNEL_KEY: str = "Channel"           # デバイスセクション内のチャンネルキー

# ============================================
# ホットキー
# ============================================
NO_BINDING_TEXT: str = "(None)"        # 未割り当てを表す予約テキスト

# ============================================
# 音量メーター
# ============================================
# 設定値が無い・不正な場合に使う既定色（くすんだ赤）
DEFAULT_VOL_METER_COLOR: Tuple[float, float, float] = (
    0.909803921569,
    0.43137254902,
    0.43137254902,
)

# ============================================
# デフォルト設定文書
# ============================================
# 設定ファイルが存在しない場合にConfigStore.load()がパースする
DEFAULT_DOCUMENT: str = """\
global:
  SliderOrientation: vertical
  DisplayTextVolume: true
  TextVolumePosition: 0
  ScrollStep: 5
  FineScrollStep: 1
  HotkeyVolumeStep: 1
  MiddleClickAction: 0
  CustomCommand: ""
  VolMuteKey: "(None)"
  VolUpKey: "(None)"
  VolDownKey: "(None)"
  AudioDevice: default
  SystemTheme: false
"""
