"""
Steamライブラリ用データモデル
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Game(BaseModel):
    """所持ゲーム1件（名前と累計プレイ時間）"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    playtime_minutes: int = Field(default=0, ge=0, alias="playtime_forever")

    @property
    def playtime_hours(self) -> float:
        return self.playtime_minutes / 60.0


class OwnedGames(BaseModel):
    """GetOwnedGamesの ``response`` 部分"""

    game_count: int = 0
    games: List[Game] = Field(default_factory=list)


class OwnedGamesEnvelope(BaseModel):
    """GetOwnedGamesのレスポンス全体"""

    response: OwnedGames
