"""コールバック用の空きポート確保。"""

from __future__ import annotations

import socket

from wspin.errors import ErrorCode, PortUnavailableError, create_auth_error


def find_free_port(host: str = "127.0.0.1") -> int:
    """OSに割り当てさせた空きTCPポートを返す。

    ソケットは即座に閉じるため、コールバックサーバーが再バインドするまでの
    間に他プロセスへ取られる可能性がある。

    Args:
        host: バインドするアドレス。

    Returns:
        ポート番号。

    Raises:
        PortUnavailableError: ソケットをバインドできなかった場合。
    """

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((host, 0))
            return sock.getsockname()[1]
    except OSError as exc:
        raise PortUnavailableError(
            create_auth_error(
                ErrorCode.AUTH_PORT_UNAVAILABLE,
                f"空きポートを確保できませんでした: {exc}",
                details={"host": host},
            )
        ) from exc
