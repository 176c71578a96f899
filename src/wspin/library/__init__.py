"""Steamライブラリの取得と集計"""

from wspin.library.aggregator import (
    DEFAULT_PLAYTIME_THRESHOLD,
    LibrarySummary,
    filter_unplayed,
    pick_least_played,
    pick_random_unplayed,
    sort_by_name,
    summarize,
)
from wspin.library.client import SteamLibraryClient
from wspin.library.models import Game, OwnedGames, OwnedGamesEnvelope

__all__ = [
    "DEFAULT_PLAYTIME_THRESHOLD",
    "Game",
    "LibrarySummary",
    "OwnedGames",
    "OwnedGamesEnvelope",
    "SteamLibraryClient",
    "filter_unplayed",
    "pick_least_played",
    "pick_random_unplayed",
    "sort_by_name",
    "summarize",
]
