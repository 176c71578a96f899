"""WSPINのCLIエントリーポイント"""

import json
import logging
import sys
from pathlib import Path
from typing import List

from wspin import __version__
from wspin.cli.main import HELP_TEXT, WspinCLI
from wspin.cli.parser import ArgumentParser
from wspin.config.loader import load_settings
from wspin.errors import WspinException


def main(args: List[str] | None = None) -> int:
    """
    WSPINのメインエントリーポイント

    Args:
        args: コマンドライン引数（Noneの場合はsys.argvを使用）

    Returns:
        終了コード（0: 成功、非0: エラー）
    """
    if args is None:
        args = sys.argv[1:]

    # 引数解析
    parser = ArgumentParser()
    parsed = parser.parse(args)

    # バージョン表示
    if parsed.options.get("version"):
        print(f"wspin {__version__}")
        return 0

    # ヘルプ表示
    if parsed.options.get("help") or parsed.command == "help":
        print(HELP_TEXT)
        return 0

    # バリデーション
    validation = parser.validate(parsed)
    if not validation.is_valid:
        for error in validation.errors:
            print(error, file=sys.stderr)
        return 1

    # 設定読み込み（APIキーはゲーム一覧の取得時のみ必須）
    config_path = parsed.options.get("config")
    require_api_key = parsed.command == "spin" and not parsed.options.get("config_check")
    threshold = parsed.options.get("threshold")
    try:
        settings = load_settings(
            Path(config_path) if config_path else None,
            require_api_key=require_api_key,
            playtime_threshold_minutes=int(threshold) if threshold is not None else None,
            log_level=parsed.options.get("log_level"),
        )
    except WspinException as exc:
        print(f"Configuration error: {exc.error.message}", file=sys.stderr)
        return 1

    if parsed.options.get("config_check"):
        print(json.dumps(settings.dump_masked(), ensure_ascii=False, indent=2))
        return 0

    _configure_logging(settings.log_level)

    cli = WspinCLI(settings, output_format=parsed.output_format)
    return cli.run(parsed.command, parsed.args, options=parsed.options)


def _configure_logging(level: str | None) -> None:
    """ログレベルが指定された場合のみstderrへのログ出力を設定する"""
    if not level:
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
