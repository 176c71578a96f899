"""
コマンドライン引数の解析

コマンド解析とバリデーション機能を提供
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from wspin.output.formatter import OutputFormat


# 有効なコマンド一覧
VALID_COMMANDS = {"spin", "login", "logout", "help", "version"}
DEFAULT_COMMAND = "spin"

# 値を取るオプション（オプション名 -> options辞書のキー）
VALUE_OPTIONS = {
    "--threshold": "threshold",
    "--steam-id": "steam_id",
    "--config": "config",
    "--log-level": "log_level",
}


@dataclass
class ParsedCommand:
    """解析済みコマンド

    Attributes:
        command: コマンド名
        args: コマンド引数
        options: オプション辞書
        output_format: 出力形式（未指定の場合はNone）
    """

    command: str
    args: List[str]
    options: Dict[str, Any]
    output_format: OutputFormat | None = None


@dataclass
class ValidationResult:
    """バリデーション結果

    Attributes:
        is_valid: 有効かどうか
        errors: エラーメッセージのリスト
    """

    is_valid: bool
    errors: List[str]


class ArgumentParser:
    """コマンドライン引数の解析"""

    def parse(self, argv: List[str]) -> ParsedCommand:
        """引数を解析してParsedCommandを返す

        Args:
            argv: コマンドライン引数リスト

        Returns:
            ParsedCommand: 解析結果
        """
        options: Dict[str, Any] = {}
        args: List[str] = []
        command: str = ""
        output_format: OutputFormat | None = None

        i = 0
        while i < len(argv):
            arg = argv[i]

            # ヘルプオプション
            if arg in ("-h", "--help"):
                options["help"] = True
                i += 1
                continue

            # バージョンオプション
            if arg in ("-v", "--version"):
                options["version"] = True
                i += 1
                continue

            # 設定チェックオプション
            if arg == "--config-check":
                options["config_check"] = True
                i += 1
                continue

            # フォーマットオプション
            if arg == "--format":
                if i + 1 < len(argv):
                    format_value = argv[i + 1].lower()
                    if format_value == "json":
                        output_format = OutputFormat.JSON
                    elif format_value == "markdown":
                        output_format = OutputFormat.MARKDOWN
                    else:
                        options.setdefault("invalid", []).append(f"--format {argv[i + 1]}")
                    i += 2
                    continue
                else:
                    i += 1
                    continue

            # 値を取るオプション
            if arg in VALUE_OPTIONS:
                if i + 1 < len(argv) and not argv[i + 1].startswith("-"):
                    options[VALUE_OPTIONS[arg]] = argv[i + 1]
                    i += 2
                    continue
                options.setdefault("invalid", []).append(f"{arg} requires a value")
                i += 1
                continue

            # 再ログインオプション
            if arg == "--refresh":
                options["refresh"] = True
                i += 1
                continue

            if arg in ("-y", "--yes"):
                options["keep"] = True
                i += 1
                continue

            # コマンドまたは引数
            if not command and not arg.startswith("-"):
                command = arg
            else:
                if not arg.startswith("-"):
                    args.append(arg)

            i += 1

        return ParsedCommand(
            command=command or DEFAULT_COMMAND,
            args=args,
            options=options,
            output_format=output_format,
        )

    def validate(self, parsed: ParsedCommand) -> ValidationResult:
        """解析結果の妥当性を検証

        Args:
            parsed: 解析済みコマンド

        Returns:
            ValidationResult: バリデーション結果
        """
        errors: List[str] = []

        # ヘルプ・バージョンオプションは常に有効
        if parsed.options.get("help") or parsed.options.get("version"):
            return ValidationResult(is_valid=True, errors=[])

        # 不明なコマンドの場合
        if parsed.command not in VALID_COMMANDS:
            errors.append(
                f"Unknown command: '{parsed.command}'. "
                f"Available commands: {', '.join(sorted(VALID_COMMANDS))}"
            )
            return ValidationResult(is_valid=False, errors=errors)

        for invalid in parsed.options.get("invalid", []):
            errors.append(f"Invalid option: {invalid}")

        threshold = parsed.options.get("threshold")
        if threshold is not None and not (threshold.isascii() and threshold.isdigit()):
            errors.append(
                f"--threshold must be a non-negative integer (got: '{threshold}')"
            )

        if parsed.options.get("refresh") and parsed.options.get("keep"):
            errors.append("--refresh and --yes cannot be used together")

        return ValidationResult(is_valid=not errors, errors=errors)
