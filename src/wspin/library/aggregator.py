"""
ライブラリ集計

ゲーム一覧の並べ替え・未プレイ抽出・代表ゲームの選択を行う
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from wspin.errors import EmptySelectionError, WspinError, create_selection_error
from wspin.library.models import Game

logger = logging.getLogger(__name__)

DEFAULT_PLAYTIME_THRESHOLD = 120  # 2時間


@dataclass
class LibrarySummary:
    """集計結果

    Attributes:
        games: 名前順のゲーム一覧
        unplayed: しきい値未満のゲーム一覧
        threshold_minutes: 未プレイ判定のしきい値（分）
        random_unplayed: ランダムに選んだ未プレイゲーム
        least_played: プレイ時間が最も短いゲーム
        errors: 選択時に発生した復旧可能なエラー
    """
    games: List[Game]
    unplayed: List[Game]
    threshold_minutes: int
    random_unplayed: Optional[Game] = None
    least_played: Optional[Game] = None
    errors: List[WspinError] = field(default_factory=list)


def sort_by_name(games: Sequence[Game]) -> List[Game]:
    """名前の昇順（大文字小文字を区別）で安定ソートする"""
    return sorted(games, key=lambda game: game.name)


def filter_unplayed(games: Sequence[Game], threshold_minutes: int) -> List[Game]:
    """プレイ時間がしきい値未満のゲームを順序を保って返す"""
    return [game for game in games if game.playtime_minutes < threshold_minutes]


def pick_random_unplayed(unplayed: Sequence[Game], rng: Optional[random.Random] = None) -> Game:
    """未プレイゲームから一様ランダムに1件選ぶ

    Args:
        unplayed: 候補のゲーム一覧
        rng: 乱数生成器（省略時はモジュールの乱数）

    Returns:
        選ばれたゲーム

    Raises:
        EmptySelectionError: 候補が空の場合
    """
    if not unplayed:
        raise EmptySelectionError(create_selection_error("未プレイのゲームがありません"))
    chooser = rng or random
    return chooser.choice(list(unplayed))


def pick_least_played(games: Sequence[Game]) -> Game:
    """プレイ時間が最も短いゲームを返す（同値の場合は先頭側）

    Raises:
        EmptySelectionError: ゲームが空の場合
    """
    if not games:
        raise EmptySelectionError(create_selection_error("ゲームがありません"))
    # min()は同値のとき最初の要素を返す
    return min(games, key=lambda game: game.playtime_minutes)


def summarize(
    games: Sequence[Game],
    threshold_minutes: int = DEFAULT_PLAYTIME_THRESHOLD,
    rng: Optional[random.Random] = None,
) -> LibrarySummary:
    """ゲーム一覧を集計する

    選択に失敗してもサマリーの残りは返す。

    Args:
        games: 所持ゲーム一覧
        threshold_minutes: 未プレイ判定のしきい値（分）
        rng: 乱数生成器

    Returns:
        LibrarySummary: 集計結果
    """
    ordered = sort_by_name(games)
    unplayed = filter_unplayed(ordered, threshold_minutes)
    summary = LibrarySummary(games=ordered, unplayed=unplayed, threshold_minutes=threshold_minutes)

    try:
        summary.random_unplayed = pick_random_unplayed(unplayed, rng)
    except EmptySelectionError as exc:
        logger.warning("Couldn't pick a random unplayed game: %s", exc.error.message)
        summary.errors.append(exc.error)

    try:
        summary.least_played = pick_least_played(ordered)
    except EmptySelectionError as exc:
        logger.warning("Couldn't find least played game: %s", exc.error.message)
        summary.errors.append(exc.error)

    return summary
