"""
設定の読み込み

YAML設定ファイル・.env・環境変数からWspinSettingsを組み立てる
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from wspin.config.settings import WspinSettings
from wspin.errors import ConfigException, ErrorCode, create_config_error


def get_default_config_paths() -> List[Path]:
    """デフォルトの設定ファイルパスを取得

    Returns:
        List[Path]: 検索する設定ファイルパスのリスト
    """
    home = Path.home()
    return [
        Path.cwd() / "wspin.yaml",
        Path.cwd() / "wspin.yml",
        home / ".config" / "wspin" / "config.yaml",
        home / ".config" / "wspin" / "config.yml",
    ]


def load_config_file(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """設定ファイルから読み込み

    Args:
        config_path: 設定ファイルのパス（省略時はデフォルトパスを検索）

    Returns:
        Dict[str, Any]: 読み込んだ設定値

    Raises:
        ConfigException: YAMLとして解釈できない場合
    """
    if config_path is None:
        for path in get_default_config_paths():
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigException(
            create_config_error(
                f"設定ファイルを解析できません: {config_path}",
                details={"error": str(exc)},
                code=ErrorCode.CONFIG_INVALID_VALUE,
            )
        ) from exc

    if not isinstance(data, dict):
        return {}
    return data


def load_settings(
    config_path: Optional[Path] = None,
    require_api_key: bool = True,
    **overrides: Any,
) -> WspinSettings:
    """設定を読み込む

    優先順位: overrides > 環境変数 > .env > 設定ファイル > デフォルト

    overridesは読み込み後に代入するため、環境変数より優先される。

    Args:
        config_path: 設定ファイルのパス
        require_api_key: APIキーを必須とするかどうか
        **overrides: コマンドラインからの上書き値（Noneは無視）

    Returns:
        WspinSettings: 読み込んだ設定

    Raises:
        ConfigException: 値が不正、またはAPIキーが未設定の場合
    """
    data = load_config_file(config_path)

    try:
        settings = WspinSettings(**data)
        for key, value in overrides.items():
            if value is not None:
                setattr(settings, key, value)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigException(
            create_config_error(
                "設定値が不正です: " + "; ".join(errors),
                details={"errors": errors},
                code=ErrorCode.CONFIG_INVALID_VALUE,
            )
        ) from exc

    if require_api_key and not settings.steam_api_key.strip():
        raise ConfigException(
            create_config_error(
                "STEAM_API_KEY が設定されていません。環境変数または .env ファイルで設定してください。",
            )
        )
    return settings
