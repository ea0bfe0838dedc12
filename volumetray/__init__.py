"""
VolumeTray - デスクトップ音量コントロールのコア

型付き設定ストア、グローバルホットキーの取得と登録、
設定画面の一括確定・破棄を提供する。
"""

from .config.constants import APP_VERSION

__version__ = APP_VERSION

from .app import VolumeTrayCore

__all__ = [
    "VolumeTrayCore",  # コアコントローラー
    "__version__",     # バージョン番号
]
