"""設定管理 - 設定の読み込みと管理"""

from wspin.config.loader import get_default_config_paths, load_config_file, load_settings
from wspin.config.settings import WspinSettings, mask_secret

__all__ = [
    "WspinSettings",
    "get_default_config_paths",
    "load_config_file",
    "load_settings",
    "mask_secret",
]
