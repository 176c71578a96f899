"""Pydantic V2 ベースの統合設定モデル"""

import logging
from pathlib import Path
from typing import Any, Literal, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def mask_secret(value: str) -> str:
    """鍵やトークンをマスクしてログ出力を避ける"""
    if not value:
        return "***"
    if len(value) <= 4:
        return "*" * len(value)
    return f"***{value[-4:]}"


class WspinSettings(BaseSettings):
    """WSPIN の統合設定"""

    model_config = SettingsConfigDict(
        env_prefix="WSPIN_",
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    # Steam Web API 設定
    steam_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "steam_api_key", "STEAM_API_KEY", "WSPIN_STEAM_API_KEY"
        ),
        description="Steam Web API Key",
    )
    api_base_url: str = Field(default="https://api.steampowered.com")
    request_timeout: float = Field(default=10.0, gt=0)

    # ログイン設定
    openid_endpoint: str = Field(default="https://steamcommunity.com/openid/login")
    callback_path: str = Field(default="/callback")
    shutdown_timeout: float = Field(default=5.0, gt=0)
    login_timeout: Optional[float] = Field(default=None, gt=0)
    steamid_path: Path = Field(default_factory=lambda: Path.home() / ".steamid")

    # 集計設定
    playtime_threshold_minutes: int = Field(default=120, ge=0)

    # 出力設定
    output_format: Literal["json", "markdown"] = "markdown"
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ) -> Tuple[Any, ...]:
        """設定ソースの優先順位をカスタマイズ（env > dotenv > init）"""
        return (
            env_settings,
            dotenv_settings,
            init_settings,
            file_secret_settings,
        )

    @field_validator("callback_path")
    @classmethod
    def validate_callback_path(cls, value: str) -> str:
        """コールバックパスは / で始まる必要がある"""
        if not value.startswith("/"):
            raise ValueError("callback_path は '/' で始めてください")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper() or None
        return value

    def dump_masked(self) -> dict:
        """機微情報をマスクした設定を返却する"""
        data = self.model_dump(mode="json")
        data["steam_api_key"] = mask_secret(data.get("steam_api_key", ""))
        return data
