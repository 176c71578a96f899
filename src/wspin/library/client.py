"""Steam Web APIから所持ゲーム一覧を取得するクライアント。"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

import httpx
from pydantic import ValidationError

from wspin.errors import (
    CatalogTransportError,
    ErrorCode,
    MalformedResponseError,
    RequestConstructionError,
    UnexpectedStatusError,
    create_catalog_error,
)
from wspin.library.aggregator import sort_by_name
from wspin.library.models import Game, OwnedGamesEnvelope

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.steampowered.com"
OWNED_GAMES_PATH = "/IPlayerService/GetOwnedGames/v1/"
DEFAULT_TIMEOUT = 10.0


class SteamLibraryClient:
    """GetOwnedGamesを1回だけ呼び出し、名前順のゲーム一覧を返す。

    リトライは行わず、失敗はすべて呼び出し元に伝える。
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """SteamLibraryClientを初期化する。

        Args:
            api_key: Steam Web APIキー。
            base_url: APIのベースURL。
            timeout: リクエスト全体（本文の受信を含む）の期限秒数。
            transport: httpxのトランスポート（テスト用）。
        """

        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def fetch_owned_games(self, steam_id: str, timeout: Optional[float] = None) -> List[Game]:
        """所持ゲーム一覧を取得する。

        Args:
            steam_id: SteamID64。
            timeout: このリクエストの期限秒数（省略時は初期化時の値）。

        Returns:
            名前順に並べたゲーム一覧。

        Raises:
            RequestConstructionError: リクエストを組み立てられなかった場合。
            CatalogTransportError: 通信に失敗した場合。
            UnexpectedStatusError: 200以外が返された場合。
            MalformedResponseError: レスポンスをデコードできなかった場合。
        """

        deadline = self._timeout if timeout is None else timeout
        params = {
            "key": self._api_key,
            "steamid": steam_id,
            "include_appinfo": "1",
            "include_played_free_games": "1",
        }
        started_at = time.perf_counter()

        with httpx.Client(transport=self._transport) as client:
            try:
                request = client.build_request(
                    "GET",
                    f"{self._base_url}{OWNED_GAMES_PATH}",
                    params=params,
                    timeout=deadline,
                )
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                raise RequestConstructionError(
                    create_catalog_error(
                        ErrorCode.CATALOG_REQUEST_CONSTRUCTION_FAILED,
                        f"リクエストを作成できませんでした: {exc}",
                    )
                ) from exc

            # httpxのtimeoutは接続・読み込みなどの段階ごとの上限のため、
            # 本文の受信を含めた全体の期限は別に確認する
            deadline_at = time.monotonic() + deadline
            try:
                response = client.send(request, stream=True)
                try:
                    body = _read_body(response, deadline_at)
                finally:
                    response.close()
            except httpx.RequestError as exc:
                # URLにAPIキーが含まれるため例外の文字列は出さない
                raise CatalogTransportError(
                    create_catalog_error(
                        ErrorCode.CATALOG_TRANSPORT_ERROR,
                        f"ゲーム一覧の取得に失敗しました ({type(exc).__name__})",
                        details={"timeout_seconds": deadline},
                    )
                ) from exc

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(
                create_catalog_error(
                    ErrorCode.CATALOG_UNEXPECTED_STATUS,
                    f"Steam APIがステータス {response.status_code} を返しました。",
                    details={"status_code": response.status_code},
                )
            )

        try:
            envelope = OwnedGamesEnvelope.model_validate_json(body)
        except ValidationError as exc:
            raise MalformedResponseError(
                create_catalog_error(
                    ErrorCode.CATALOG_MALFORMED_RESPONSE,
                    f"Steam APIのレスポンスが不正です: {exc.error_count()}件のエラー",
                )
            ) from exc

        games = sort_by_name(envelope.response.games)
        logger.info(
            "catalog.owned_games",
            extra={
                "game_count": envelope.response.game_count,
                "decoded_count": len(games),
                "duration_seconds": round(time.perf_counter() - started_at, 3),
            },
        )
        return games


def _read_body(response: httpx.Response, deadline_at: float) -> bytes:
    """期限（time.monotonic基準）を過ぎたらReadTimeoutとして本文の受信を打ち切る"""
    chunks = []
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        if time.monotonic() > deadline_at:
            raise httpx.ReadTimeout("レスポンス全体の受信が期限を超えました", request=response.request)
    return b"".join(chunks)
