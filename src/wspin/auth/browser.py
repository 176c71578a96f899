"""OS標準の方法でURLをブラウザで開く。"""

from __future__ import annotations

from enum import Enum
import logging
import subprocess
import sys

from wspin.errors import (
    BrowserLaunchError,
    ErrorCode,
    UnsupportedPlatformError,
    create_auth_error,
)

logger = logging.getLogger(__name__)


class BrowserPlatform(Enum):
    """ブラウザ起動に対応するプラットフォーム"""

    LINUX = "linux"
    WINDOWS = "windows"
    DARWIN = "darwin"


_LAUNCH_COMMANDS: dict[BrowserPlatform, tuple[str, ...]] = {
    BrowserPlatform.LINUX: ("xdg-open",),
    BrowserPlatform.WINDOWS: ("rundll32", "url.dll,FileProtocolHandler"),
    BrowserPlatform.DARWIN: ("open",),
}


def detect_platform(platform: str | None = None) -> BrowserPlatform:
    """``sys.platform`` 形式の文字列をBrowserPlatformに変換する。

    Raises:
        UnsupportedPlatformError: 対応していないプラットフォームの場合。
    """

    name = (platform or sys.platform).lower()
    if name.startswith("linux"):
        return BrowserPlatform.LINUX
    if name in ("win32", "cygwin", "windows"):
        return BrowserPlatform.WINDOWS
    if name == "darwin":
        return BrowserPlatform.DARWIN
    raise UnsupportedPlatformError(
        create_auth_error(
            ErrorCode.AUTH_UNSUPPORTED_PLATFORM,
            f"未対応のプラットフォームです: {name}",
            details={"platform": name},
        )
    )


def build_launch_command(url: str, platform: BrowserPlatform) -> list[str]:
    return [*_LAUNCH_COMMANDS[platform], url]


def open_browser(url: str, platform: str | None = None) -> None:
    """URLを既定のブラウザで開く。起動したプロセスの終了は待たない。

    Args:
        url: 開くURL。
        platform: ``sys.platform`` 形式の上書き値（テスト用）。

    Raises:
        UnsupportedPlatformError: 対応していないプラットフォームの場合。
        BrowserLaunchError: 起動コマンドを実行できなかった場合。
    """

    target = detect_platform(platform)
    command = build_launch_command(url, target)
    try:
        subprocess.Popen(  # noqa: S603
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        raise BrowserLaunchError(
            create_auth_error(
                ErrorCode.AUTH_BROWSER_LAUNCH_FAILED,
                f"ブラウザを起動できませんでした: {exc}",
                details={"command": command[0], "platform": target.value},
            )
        ) from exc
    logger.debug("browser.launch", extra={"platform": target.value, "command": command[0]})
