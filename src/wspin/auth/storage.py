"""ログイン済みSteamID64の保存を提供する。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import warnings

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from wspin.errors import ErrorCode, StorageException, WspinError

logger = logging.getLogger(__name__)

DEFAULT_STEAMID_PATH = Path.home() / ".steamid"
STEAMID_KEY = "steamid64"


class SteamIDStore:
    """SteamID64の保存と取得を管理する。

    固定パスのファイル（パーミッション0600）に保存する。ファイルに
    書き込めない環境ではkeyringに保存し、読み込み時はファイルが無い
    場合にkeyringを参照する。
    """

    def __init__(self, path: Path | None = None, keyring_service: str = "wspin") -> None:
        """SteamIDStoreを初期化する。

        Args:
            path: 保存先ファイルのパス（省略時は ~/.steamid）。
            keyring_service: keyringに保存する際のサービス名。
        """

        self._path = path or DEFAULT_STEAMID_PATH
        self._keyring_service = keyring_service

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        """保存済みのSteamID64を返す。

        読み込みに失敗した場合は未保存として扱う。

        Returns:
            SteamID64。未保存または空の場合はNone。
        """

        value = _normalize(self._read_file())
        if value is not None:
            return value

        try:
            return _normalize(keyring.get_password(self._keyring_service, STEAMID_KEY))
        except KeyringError as exc:
            logger.debug("storage.keyring_unavailable", extra={"error": str(exc)})
            return None

    def save(self, steam_id: str) -> None:
        """SteamID64を保存する。

        Raises:
            StorageException: ファイルにもkeyringにも保存できなかった場合。
        """

        try:
            self._write_file(steam_id)
            return
        except OSError as exc:
            file_error = exc

        warnings.warn(
            f"{self._path} に書き込めないため、keyringに保存します。",
            RuntimeWarning,
            stacklevel=2,
        )
        try:
            keyring.set_password(self._keyring_service, STEAMID_KEY, steam_id)
        except KeyringError as exc:
            raise self._storage_error("SteamID64を保存できませんでした", file_error) from exc

    def delete(self) -> None:
        """ファイルとkeyringの両方から削除する。未保存の場合は何もしない。

        Raises:
            StorageException: ファイルを削除できなかった場合。
        """

        try:
            keyring.delete_password(self._keyring_service, STEAMID_KEY)
        except PasswordDeleteError:
            pass
        except KeyringError as exc:
            logger.debug("storage.keyring_unavailable", extra={"error": str(exc)})

        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise self._storage_error("保存済みのSteamID64を削除できませんでした", exc) from exc

    def _read_file(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("storage.read_failed", extra={"path": str(self._path), "error": str(exc)})
            return None

    def _write_file(self, steam_id: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(steam_id, encoding="utf-8")
        os.chmod(self._path, 0o600)

    def _storage_error(self, message: str, exc: OSError) -> StorageException:
        return StorageException(
            WspinError(
                code=ErrorCode.STORAGE_WRITE_FAILED.value,
                message=f"{message}: {exc}",
                details={"path": str(self._path)},
                recoverable=True,
                log_level=logging.WARNING,
            )
        )


def _normalize(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
