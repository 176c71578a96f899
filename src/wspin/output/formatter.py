"""
出力フォーマッタ

集計結果を指定形式（JSON/Markdown）に変換するフォーマッタ
"""

import json
from enum import Enum
from typing import Any, Dict, Optional

from wspin import __version__
from wspin.library.aggregator import LibrarySummary
from wspin.library.models import Game


class OutputFormat(Enum):
    """出力形式"""
    JSON = "json"
    MARKDOWN = "markdown"


def format_threshold(minutes: int) -> str:
    """しきい値を時間表記に変換（120 -> '2h'）"""
    return f"{minutes / 60:g}h"


class OutputFormatter:
    """集計結果を指定形式にフォーマットするクラス"""

    def format(self, summary: LibrarySummary, format_type: OutputFormat) -> str:
        """結果を指定形式にフォーマット

        Args:
            summary: 集計結果
            format_type: 出力形式

        Returns:
            フォーマットされた文字列
        """
        if format_type == OutputFormat.JSON:
            return self._to_json(summary)
        elif format_type == OutputFormat.MARKDOWN:
            return self._to_markdown(summary)
        else:
            raise ValueError(f"Unsupported format type: {format_type}")

    def _to_json(self, summary: LibrarySummary) -> str:
        data = {
            "total_games": len(summary.games),
            "unplayed_games": len(summary.unplayed),
            "threshold_minutes": summary.threshold_minutes,
            "random_unplayed": self._game_dict(summary.random_unplayed),
            "least_played": self._game_dict(summary.least_played),
            "games": [self._game_dict(game) for game in summary.games],
            "errors": [
                {"code": error.code, "message": error.message}
                for error in summary.errors
            ],
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    def _to_markdown(self, summary: LibrarySummary) -> str:
        if not summary.games:
            return "No games found."

        lines = [f"# Welcome to WSPIN {__version__}", ""]
        lines.append(
            f"Total games: {len(summary.games)}, "
            f"Unplayed (<{format_threshold(summary.threshold_minutes)}) games: {len(summary.unplayed)}"
        )

        if summary.random_unplayed is not None:
            lines.append("")
            lines.append("## Random Unplayed Game")
            lines.append("")
            lines.append(summary.random_unplayed.name)

        if summary.least_played is not None:
            lines.append("")
            lines.append("## Least Played Game")
            lines.append("")
            lines.append(
                f"{summary.least_played.name} ({summary.least_played.playtime_minutes} minutes)"
            )

        return "\n".join(lines)

    def _game_dict(self, game: Optional[Game]) -> Optional[Dict[str, Any]]:
        if game is None:
            return None
        return {
            "name": game.name,
            "playtime_minutes": game.playtime_minutes,
            "playtime_hours": round(game.playtime_hours, 2),
        }
