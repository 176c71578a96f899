"""
WspinCLIメインモジュール

ログイン・ゲーム一覧取得・集計・表示を順に実行するコマンドハンドラー
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from wspin import __version__
from wspin.auth.openid import SteamOpenIDLogin
from wspin.auth.storage import SteamIDStore
from wspin.cli.parser import VALID_COMMANDS
from wspin.config.settings import WspinSettings
from wspin.errors import AuthException, CatalogException, StorageException
from wspin.library.aggregator import summarize
from wspin.library.client import SteamLibraryClient
from wspin.output.formatter import OutputFormat, OutputFormatter


class WspinCLI:
    """WSPINのエントリーポイント"""

    def __init__(
        self,
        settings: WspinSettings,
        output_format: Optional[OutputFormat] = None,
        store: Optional[SteamIDStore] = None,
        login_factory: Optional[Callable[[], SteamOpenIDLogin]] = None,
        client_factory: Optional[Callable[[], SteamLibraryClient]] = None,
        input_func: Callable[[str], str] = input,
    ):
        """初期化

        Args:
            settings: 設定オブジェクト
            output_format: 出力形式（省略時は設定値）
            store: SteamID64の保存先
            login_factory: ログインフローの生成関数
            client_factory: Steam APIクライアントの生成関数
            input_func: 確認プロンプトの入力関数
        """
        self.settings = settings
        self.output_format = output_format or OutputFormat(settings.output_format)
        self.store = store or SteamIDStore(path=settings.steamid_path)
        self.login_factory = login_factory or self._build_login
        self.client_factory = client_factory or self._build_client
        self.input_func = input_func

    def run(self, command: str, args: List[str], options: Dict[str, Any] | None = None) -> int:
        """コマンドを実行し、Exit Codeを返す

        Args:
            command: コマンド名
            args: コマンド引数
            options: 解析済みオプション辞書

        Returns:
            int: 終了コード（0: 成功、非0: エラー）
        """
        if options is None:
            options = {}

        if command == "help":
            self.show_help()
            return 0

        if command == "version":
            self.show_version()
            return 0

        if command not in VALID_COMMANDS:
            print(
                f"Unknown command: '{command}'. "
                f"Available commands: {', '.join(sorted(VALID_COMMANDS))}",
                file=sys.stderr,
            )
            return 1

        if command == "login":
            return self._run_login_command()

        if command == "logout":
            return self._run_logout_command()

        return self._run_spin_command(options)

    def _run_spin_command(self, options: Dict[str, Any]) -> int:
        """spinコマンドの実行（ログイン→取得→集計→表示）"""
        audit_logger = logging.getLogger("wspin.audit.spin")

        try:
            steam_id = self._resolve_steam_id(options)
        except AuthException as exc:
            print(f"Login failed: {exc.error.message}", file=sys.stderr)
            return 1

        started_at = time.perf_counter()
        client = self.client_factory()
        try:
            games = client.fetch_owned_games(steam_id)
        except CatalogException as exc:
            audit_logger.error(
                "library.fetch.error",
                extra={"code": exc.error.code, "duration_seconds": round(time.perf_counter() - started_at, 3)},
            )
            print(f"Error listing games: {exc.error.message}", file=sys.stderr)
            return 1

        summary = summarize(games, self.settings.playtime_threshold_minutes)
        audit_logger.info(
            "library.summary",
            extra={
                "total_games": len(summary.games),
                "unplayed_games": len(summary.unplayed),
                "threshold_minutes": summary.threshold_minutes,
                "duration_seconds": round(time.perf_counter() - started_at, 3),
            },
        )
        print(OutputFormatter().format(summary, self.output_format))
        return 0

    def _run_login_command(self) -> int:
        """loginコマンドの実行（保存済みIDに関係なく再ログイン）"""
        try:
            self._login_and_save()
        except AuthException as exc:
            print(f"Login failed: {exc.error.message}", file=sys.stderr)
            return 1
        return 0

    def _run_logout_command(self) -> int:
        """logoutコマンドの実行"""
        try:
            self.store.delete()
        except StorageException as exc:
            print(f"Logout failed: {exc.error.message}", file=sys.stderr)
            return 1
        print("Saved SteamID64 removed.", file=sys.stderr)
        return 0

    def _resolve_steam_id(self, options: Dict[str, Any]) -> str:
        """今回使うSteamID64を決める

        優先順位: --steam-id > 保存済みID（再ログイン確認あり） > ブラウザログイン
        """
        explicit = options.get("steam_id")
        if explicit:
            return explicit

        saved = self.store.load()
        if saved is None:
            return self._login_and_save()

        print(f"✔️ Found saved SteamID64: {saved}")
        if options.get("refresh"):
            refresh = True
        elif options.get("keep"):
            refresh = False
        else:
            refresh = self._prompt_yes_no("Would you like to refresh your Steam login? (y/N): ")

        if not refresh:
            print("Using saved SteamID64.")
            return saved

        try:
            self.store.delete()
        except StorageException as exc:
            print(f"Could not delete saved SteamID64: {exc.error.message}", file=sys.stderr)
        return self._login_and_save()

    def _login_and_save(self) -> str:
        """ブラウザログインを実行し、結果を保存する（保存失敗は警告のみ）"""
        steam_id = self.login_factory().authenticate()
        print(f"✔️ Saving SteamID64 for next time: {steam_id}")
        try:
            self.store.save(steam_id)
        except StorageException as exc:
            print(f"Warning: could not save SteamID64: {exc.error.message}", file=sys.stderr)
        return steam_id

    def _prompt_yes_no(self, message: str) -> bool:
        """yes/noを尋ね、y または yes のときだけTrueを返す"""
        try:
            response = self.input_func(message)
        except EOFError:
            return False
        return response.strip().lower() in ("y", "yes")

    def _build_login(self) -> SteamOpenIDLogin:
        return SteamOpenIDLogin(
            endpoint=self.settings.openid_endpoint,
            callback_path=self.settings.callback_path,
            shutdown_timeout=self.settings.shutdown_timeout,
            timeout_seconds=self.settings.login_timeout,
        )

    def _build_client(self) -> SteamLibraryClient:
        return SteamLibraryClient(
            api_key=self.settings.steam_api_key,
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
        )

    def show_help(self) -> None:
        """ヘルプメッセージを表示"""
        print(HELP_TEXT)

    def show_version(self) -> None:
        """バージョン情報を表示"""
        print(f"wspin {__version__}")


HELP_TEXT = f"""WSPIN v{__version__} - Steamライブラリから次に遊ぶゲームを選ぶCLIツール

Usage:
    wspin [command] [options]

Commands:
    spin             ログインしてゲーム一覧を集計・表示する（デフォルト）
    login            ブラウザでSteamに再ログインしてSteamID64を保存する
    logout           保存済みのSteamID64を削除する
    help             このヘルプメッセージを表示
    version          バージョン情報を表示

Options:
    -h, --help             ヘルプメッセージを表示
    -v, --version          バージョン情報を表示
    --config-check         設定内容を検証して表示（API keyはマスク）
    --config <path>        YAML設定ファイルを指定
    --format <format>      出力形式を指定（json, markdown）
    --threshold <minutes>  未プレイとみなすプレイ時間の上限（デフォルト: 120）
    --steam-id <id>        ログインせずにこのSteamID64を使う
    --refresh              確認せずに再ログインする
    -y, --yes              確認せずに保存済みのSteamID64を使う
    --log-level <level>    ログレベルを指定（DEBUG, INFO, WARNING, ERROR）

Environment:
    STEAM_API_KEY          Steam Web APIキー（.env ファイルでも可）

Examples:
    wspin
    wspin --threshold 60 --format json
    wspin login
"""
