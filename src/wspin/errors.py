"""
エラー定義

WSPINで使用されるエラーコードと例外クラス
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """エラーコード

    カテゴリ別にエラーコードを定義:
    - CONFIG_xxx: 設定エラー
    - AUTH_xxx: ログイン（OpenIDハンドシェイク）エラー
    - CATALOG_xxx: Steam Web APIエラー
    - LIBRARY_xxx: ライブラリ集計エラー
    - STORAGE_xxx: SteamID保存エラー
    """
    # 設定エラー
    CONFIG_MISSING_API_KEY = "CONFIG_001"
    CONFIG_INVALID_VALUE = "CONFIG_002"

    # ログインエラー
    AUTH_PORT_UNAVAILABLE = "AUTH_001"
    AUTH_UNSUPPORTED_PLATFORM = "AUTH_002"
    AUTH_BROWSER_LAUNCH_FAILED = "AUTH_003"
    AUTH_LISTENER_START_FAILED = "AUTH_004"
    AUTH_CALLBACK_MALFORMED = "AUTH_005"
    AUTH_TIMEOUT = "AUTH_006"

    # Steam Web APIエラー
    CATALOG_REQUEST_CONSTRUCTION_FAILED = "CATALOG_001"
    CATALOG_TRANSPORT_ERROR = "CATALOG_002"
    CATALOG_UNEXPECTED_STATUS = "CATALOG_003"
    CATALOG_MALFORMED_RESPONSE = "CATALOG_004"

    # 集計エラー
    LIBRARY_EMPTY_SELECTION = "LIBRARY_001"

    # 保存エラー
    STORAGE_WRITE_FAILED = "STORAGE_001"


@dataclass
class WspinError:
    """WSPINエラー情報

    Attributes:
        code: エラーコード文字列
        message: エラーメッセージ
        details: 追加のエラー詳細情報
        recoverable: 復旧可能かどうか
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    recoverable: bool = False
    log_level: int = logging.ERROR


class WspinException(Exception):
    """WSPIN例外クラス

    WspinErrorをラップする例外クラス
    """

    def __init__(self, error: WspinError):
        """WspinExceptionを初期化

        Args:
            error: WspinErrorインスタンス
        """
        self.error = error
        self.log_level = error.log_level
        super().__init__(f"[{error.code}] {error.message}")


class ConfigException(WspinException):
    """設定の読み込み・検証に関する例外"""


class AuthException(WspinException):
    """Steamログインのハンドシェイクに関する例外"""


class PortUnavailableError(AuthException):
    """コールバック用の空きポートを確保できなかった"""


class UnsupportedPlatformError(AuthException):
    """ブラウザ起動方法が不明なプラットフォーム"""


class BrowserLaunchError(AuthException):
    """ブラウザ起動コマンドを実行できなかった"""


class ListenerStartError(AuthException):
    """コールバックサーバーを起動できなかった"""


class CallbackMalformedError(AuthException):
    """コールバックにopenid.claimed_idが含まれていない"""


class HandshakeTimeoutError(AuthException):
    """コールバック待機がタイムアウトした"""


class CatalogException(WspinException):
    """Steam Web API呼び出しに関する例外"""


class RequestConstructionError(CatalogException):
    """リクエストを組み立てられなかった"""


class CatalogTransportError(CatalogException):
    """通信エラー（接続失敗・タイムアウト）"""


class UnexpectedStatusError(CatalogException):
    """200以外のステータスが返された"""


class MalformedResponseError(CatalogException):
    """レスポンスをデコードできなかった"""


class EmptySelectionError(WspinException):
    """選択対象のゲームが存在しない"""


class StorageException(WspinException):
    """SteamIDの保存・削除に失敗した"""


ERROR_CODE_LOG_LEVEL: Dict[ErrorCode, int] = {
    ErrorCode.AUTH_UNSUPPORTED_PLATFORM: logging.WARNING,
    ErrorCode.AUTH_BROWSER_LAUNCH_FAILED: logging.WARNING,
    ErrorCode.AUTH_CALLBACK_MALFORMED: logging.WARNING,
    ErrorCode.LIBRARY_EMPTY_SELECTION: logging.WARNING,
    ErrorCode.STORAGE_WRITE_FAILED: logging.WARNING,
}

RECOVERABLE_CODES = frozenset(
    {
        ErrorCode.AUTH_UNSUPPORTED_PLATFORM,
        ErrorCode.AUTH_BROWSER_LAUNCH_FAILED,
        ErrorCode.AUTH_CALLBACK_MALFORMED,
        ErrorCode.LIBRARY_EMPTY_SELECTION,
        ErrorCode.STORAGE_WRITE_FAILED,
    }
)


# よく使用されるエラーのファクトリ関数
def create_config_error(
    message: str,
    details: Optional[Dict[str, Any]] = None,
    code: ErrorCode = ErrorCode.CONFIG_MISSING_API_KEY,
) -> WspinError:
    """設定エラーを作成

    Args:
        message: エラーメッセージ
        details: 追加詳細
        code: エラーコード

    Returns:
        WspinError: 設定エラー
    """
    return WspinError(
        code=code.value,
        message=message,
        details=details,
        recoverable=False,
        log_level=logging.ERROR,
    )


def create_auth_error(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> WspinError:
    """ログインエラーを作成

    復旧可能かどうかとログレベルはエラーコードから決まる。

    Args:
        code: エラーコード
        message: エラーメッセージ
        details: 追加詳細

    Returns:
        WspinError: ログインエラー
    """
    return WspinError(
        code=code.value,
        message=message,
        details=details,
        recoverable=code in RECOVERABLE_CODES,
        log_level=ERROR_CODE_LOG_LEVEL.get(code, logging.ERROR),
    )


def create_catalog_error(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> WspinError:
    """Steam Web APIエラーを作成

    Args:
        code: エラーコード
        message: エラーメッセージ
        details: 追加詳細

    Returns:
        WspinError: APIエラー（リトライしないため常に復旧不可）
    """
    return WspinError(
        code=code.value,
        message=message,
        details=details,
        recoverable=False,
        log_level=ERROR_CODE_LOG_LEVEL.get(code, logging.ERROR),
    )


def create_selection_error(message: str, details: Optional[Dict[str, Any]] = None) -> WspinError:
    """選択エラーを作成

    Args:
        message: エラーメッセージ
        details: 追加詳細

    Returns:
        WspinError: 選択エラー
    """
    return WspinError(
        code=ErrorCode.LIBRARY_EMPTY_SELECTION.value,
        message=message,
        details=details,
        recoverable=True,  # サマリーの残りは表示を継続する
        log_level=logging.WARNING,
    )
