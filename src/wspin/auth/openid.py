"""Steam OpenID 2.0 ログイン（ローカルループバック方式）。"""

from __future__ import annotations

from enum import Enum
import logging
import time
from typing import Callable, Optional
from urllib.parse import urlencode

from wspin.auth.browser import open_browser
from wspin.auth.callback import DEFAULT_CALLBACK_PATH, CallbackListener
from wspin.auth.port import find_free_port
from wspin.errors import BrowserLaunchError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

DEFAULT_OPENID_ENDPOINT = "https://steamcommunity.com/openid/login"
OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"
DEFAULT_SHUTDOWN_TIMEOUT = 5.0


class HandshakeState(Enum):
    """ログインの進行状態"""

    IDLE = "idle"
    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"
    FAILED = "failed"


def build_login_url(endpoint: str, return_to: str, realm: str) -> str:
    """OpenIDのcheckid_setupリクエストURLを組み立てる。"""

    params = {
        "openid.ns": OPENID_NS,
        "openid.mode": "checkid_setup",
        "openid.return_to": return_to,
        "openid.realm": realm,
        "openid.identity": IDENTIFIER_SELECT,
        "openid.claimed_id": IDENTIFIER_SELECT,
    }
    return f"{endpoint}?{urlencode(params)}"


class SteamOpenIDLogin:
    """ブラウザ経由でSteamにログインし、SteamID64を取得する。

    クライアントシークレットは使わず、OpenIDプロバイダからの
    リダイレクトをローカルのコールバックサーバーで受け取る。
    アサーションの署名検証は行わない。
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_OPENID_ENDPOINT,
        callback_path: str = DEFAULT_CALLBACK_PATH,
        host: str = "localhost",
        bind_address: str = "127.0.0.1",
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
        timeout_seconds: Optional[float] = None,
        launcher: Callable[[str], None] = open_browser,
    ) -> None:
        """SteamOpenIDLoginを初期化する。

        Args:
            endpoint: OpenIDログインエンドポイント。
            callback_path: コールバックのパス。
            host: return_to/realmに使うホスト名。
            bind_address: コールバックサーバーのバインド先。
            shutdown_timeout: 受信後にサーバーを停止するまでの上限秒数。
            timeout_seconds: コールバック待機の上限秒数。Noneなら無期限。
            launcher: URLをブラウザで開く関数。
        """

        self._endpoint = endpoint
        self._callback_path = callback_path
        self._host = host
        self._bind_address = bind_address
        self._shutdown_timeout = shutdown_timeout
        self._timeout_seconds = timeout_seconds
        self._launcher = launcher
        self.state = HandshakeState.IDLE

    def authenticate(self) -> str:
        """ログインフローを実行し、SteamID64を返す。

        Raises:
            PortUnavailableError: 空きポートを確保できなかった場合。
            ListenerStartError: コールバックサーバーを起動できなかった場合。
            HandshakeTimeoutError: 待機上限を過ぎた場合。
        """

        try:
            port = find_free_port(self._bind_address)
            realm = f"http://{self._host}:{port}"
            return_to = f"{realm}{self._callback_path}"
            login_url = build_login_url(self._endpoint, return_to, realm)

            listener = CallbackListener(port, host=self._bind_address, callback_path=self._callback_path)
            listener.start()
        except BaseException:
            self.state = HandshakeState.FAILED
            raise

        self.state = HandshakeState.AWAITING_CALLBACK
        started_at = time.perf_counter()
        logger.info("openid.login.start", extra={"port": port})

        try:
            self._open_login_page(login_url)
            steam_id = listener.wait(self._timeout_seconds)
        except BaseException:
            self.state = HandshakeState.FAILED
            raise
        finally:
            listener.stop(self._shutdown_timeout)

        self.state = HandshakeState.COMPLETED
        logger.info(
            "openid.login.complete",
            extra={"duration_seconds": round(time.perf_counter() - started_at, 3)},
        )
        return steam_id

    def _open_login_page(self, login_url: str) -> None:
        print("Opening Steam login in your browser...")
        try:
            self._launcher(login_url)
        except (UnsupportedPlatformError, BrowserLaunchError) as exc:
            logger.warning("openid.browser_unavailable", extra={"error": exc.error.message})
            print("Cannot open browser. Please visit this URL manually:")
            print(login_url)
