"""OpenIDリダイレクトを一度だけ受け取るローカルHTTPサーバー。"""

from __future__ import annotations

from concurrent.futures import Future, InvalidStateError
from concurrent.futures import TimeoutError as FutureTimeoutError
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import logging
import threading
from urllib.parse import parse_qs, urlparse

from wspin.errors import (
    CallbackMalformedError,
    ErrorCode,
    HandshakeTimeoutError,
    ListenerStartError,
    create_auth_error,
)

logger = logging.getLogger(__name__)

CLAIMED_ID_PARAM = "openid.claimed_id"
DEFAULT_CALLBACK_PATH = "/callback"
SUCCESS_BODY = b"Authentication complete. You may close this window.\n"


def extract_steam_id(claimed_id: str | None) -> str:
    """claimed_id URIの末尾のパスセグメントをSteamID64として取り出す。

    Args:
        claimed_id: ``openid.claimed_id`` の値。

    Returns:
        SteamID64。

    Raises:
        CallbackMalformedError: 値が空、または末尾セグメントが空の場合。
    """

    if not claimed_id:
        raise CallbackMalformedError(
            create_auth_error(
                ErrorCode.AUTH_CALLBACK_MALFORMED,
                f"{CLAIMED_ID_PARAM} がありません。",
            )
        )
    steam_id = claimed_id.split("/")[-1]
    if not steam_id:
        raise CallbackMalformedError(
            create_auth_error(
                ErrorCode.AUTH_CALLBACK_MALFORMED,
                f"{CLAIMED_ID_PARAM} からIDを取り出せません。",
                details={"claimed_id": claimed_id},
            )
        )
    return steam_id


class _CallbackServer(ThreadingHTTPServer):
    daemon_threads = True
    block_on_close = False

    def __init__(
        self,
        server_address: tuple[str, int],
        callback_path: str,
        handoff: Future[str],
    ) -> None:
        super().__init__(server_address, _CallbackHandler)
        self.callback_path = callback_path
        self.handoff = handoff

    def deliver(self, steam_id: str) -> bool:
        """待機側にIDを渡す。既に渡し済みなら破棄してFalseを返す。"""

        try:
            self.handoff.set_result(steam_id)
        except InvalidStateError:
            return False
        return True


class _CallbackHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        server = self.server
        if not isinstance(server, _CallbackServer) or parsed.path != server.callback_path:
            self._reply(404, b"Not Found\n")
            return

        query = parse_qs(parsed.query)
        claimed_id = query.get(CLAIMED_ID_PARAM, [None])[0]
        try:
            steam_id = extract_steam_id(claimed_id)
        except CallbackMalformedError as exc:
            logger.warning("callback.malformed", extra={"error": exc.error.message})
            self._reply(400, f"Missing {CLAIMED_ID_PARAM}\n".encode("utf-8"))
            return

        self._reply(200, SUCCESS_BODY)
        if server.deliver(steam_id):
            logger.info("callback.delivered")
        else:
            logger.debug("callback.discarded")

    def _reply(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A003
        return


class CallbackListener:
    """コールバックを1件だけ待機側へ受け渡すリスナー。

    リクエスト処理はサーバーのワーカースレッドで行われ、待機側とは
    ``Future`` による一度きりの受け渡しだけで同期する。
    """

    def __init__(
        self,
        port: int,
        host: str = "127.0.0.1",
        callback_path: str = DEFAULT_CALLBACK_PATH,
    ) -> None:
        """CallbackListenerを初期化する。

        Args:
            port: 待ち受けポート。
            host: バインドするアドレス。
            callback_path: 受け付けるパス。
        """

        self._address = (host, port)
        self._callback_path = callback_path
        self._handoff: Future[str] = Future()
        self._server: _CallbackServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        if self._server is not None:
            return self._server.server_address[1]
        return self._address[1]

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """サーバーを起動し、デーモンスレッドで待ち受けを開始する。

        Raises:
            ListenerStartError: バインドに失敗した場合。
        """

        try:
            self._server = _CallbackServer(self._address, self._callback_path, self._handoff)
        except OSError as exc:
            raise ListenerStartError(
                create_auth_error(
                    ErrorCode.AUTH_LISTENER_START_FAILED,
                    f"コールバックサーバーを起動できませんでした: {exc}",
                    details={"host": self._address[0], "port": self._address[1]},
                )
            ) from exc

        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="wspin-callback",
            daemon=True,
        )
        self._thread.start()
        logger.debug("callback.listening", extra={"port": self.port, "path": self._callback_path})

    def wait(self, timeout: float | None = None) -> str:
        """コールバックで受け取ったSteamID64を返すまでブロックする。

        Args:
            timeout: 待機秒数。Noneの場合は無期限。

        Raises:
            HandshakeTimeoutError: タイムアウトした場合。
        """

        try:
            return self._handoff.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise HandshakeTimeoutError(
                create_auth_error(
                    ErrorCode.AUTH_TIMEOUT,
                    "ログインのコールバックがタイムアウトしました。",
                    details={"timeout_seconds": timeout},
                )
            ) from exc

    def stop(self, timeout: float = 5.0) -> bool:
        """サーバーを停止する。

        停止が ``timeout`` 秒以内に終わらない場合は待たずに諦める
        （スレッドはデーモンのためプロセス終了を妨げない）。

        Returns:
            時間内に停止できたかどうか。
        """

        server = self._server
        if server is None:
            return True

        stopper = threading.Thread(target=server.shutdown, name="wspin-callback-stop", daemon=True)
        stopper.start()
        stopper.join(timeout)
        if stopper.is_alive():
            logger.warning("callback.shutdown_abandoned", extra={"timeout_seconds": timeout})
            return False

        server.server_close()
        if self._thread is not None:
            self._thread.join(timeout)
        self._server = None
        return True
