"""
WspinSettings と設定読み込みのユニットテスト
"""

import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from pydantic import ValidationError

from wspin.config.loader import load_config_file, load_settings
from wspin.config.settings import WspinSettings, mask_secret
from wspin.errors import ConfigException, ErrorCode


@patch.dict(os.environ, {}, clear=True)
class TestWspinSettings(unittest.TestCase):
    """WspinSettings の基本動作を検証する"""

    def test_default_values(self):
        settings = WspinSettings(_env_file=None, steam_api_key="key")

        self.assertEqual(settings.steam_api_key, "key")
        self.assertEqual(settings.api_base_url, "https://api.steampowered.com")
        self.assertEqual(settings.openid_endpoint, "https://steamcommunity.com/openid/login")
        self.assertEqual(settings.callback_path, "/callback")
        self.assertEqual(settings.playtime_threshold_minutes, 120)
        self.assertEqual(settings.request_timeout, 10.0)
        self.assertEqual(settings.shutdown_timeout, 5.0)
        self.assertIsNone(settings.login_timeout)
        self.assertEqual(settings.steamid_path.name, ".steamid")
        self.assertEqual(settings.output_format, "markdown")
        self.assertIsNone(settings.log_level)

    def test_api_key_from_plain_env_var(self):
        with patch.dict(os.environ, {"STEAM_API_KEY": "from-env"}):
            settings = WspinSettings(_env_file=None)
        self.assertEqual(settings.steam_api_key, "from-env")

    def test_prefixed_env_vars(self):
        env = {
            "WSPIN_PLAYTIME_THRESHOLD_MINUTES": "60",
            "WSPIN_LOGIN_TIMEOUT": "30",
            "WSPIN_OUTPUT_FORMAT": "json",
        }
        with patch.dict(os.environ, env):
            settings = WspinSettings(_env_file=None)
        self.assertEqual(settings.playtime_threshold_minutes, 60)
        self.assertEqual(settings.login_timeout, 30.0)
        self.assertEqual(settings.output_format, "json")

    def test_env_overrides_init_values(self):
        with patch.dict(os.environ, {"WSPIN_REQUEST_TIMEOUT": "3"}):
            settings = WspinSettings(_env_file=None, request_timeout=20)
        self.assertEqual(settings.request_timeout, 3.0)

    def test_dotenv_file(self):
        with TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text("STEAM_API_KEY=dotenv-key\nUNRELATED=1\n", encoding="utf-8")
            settings = WspinSettings(_env_file=env_file)
        self.assertEqual(settings.steam_api_key, "dotenv-key")

    def test_invalid_values(self):
        cases = [
            {"playtime_threshold_minutes": -1},
            {"request_timeout": 0},
            {"callback_path": "callback"},
            {"output_format": "xml"},
            {"log_level": "TRACE"},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValidationError):
                    WspinSettings(_env_file=None, **kwargs)

    def test_log_level_is_normalized(self):
        settings = WspinSettings(_env_file=None, log_level="debug")
        self.assertEqual(settings.log_level, "DEBUG")

    def test_dump_masked(self):
        settings = WspinSettings(_env_file=None, steam_api_key="ABCDEF1234567890")
        dumped = settings.dump_masked()
        self.assertEqual(dumped["steam_api_key"], "***7890")
        self.assertIsInstance(dumped["steamid_path"], str)

    def test_mask_secret(self):
        self.assertEqual(mask_secret(""), "***")
        self.assertEqual(mask_secret("abc"), "***")
        self.assertEqual(mask_secret("abcdefgh"), "***efgh")


@patch.dict(os.environ, {}, clear=True)
class TestLoadSettings(unittest.TestCase):
    """load_settings のテスト"""

    def setUp(self):
        self.tmp = TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config_path = Path(self.tmp.name) / "wspin.yaml"
        # カレントディレクトリの .env や設定ファイルを読まないようにする
        cwd_patcher = patch("wspin.config.loader.get_default_config_paths", return_value=[])
        cwd_patcher.start()
        self.addCleanup(cwd_patcher.stop)
        env_file_patcher = patch.dict(WspinSettings.model_config, {"env_file": None})
        env_file_patcher.start()
        self.addCleanup(env_file_patcher.stop)

    def test_yaml_file_values(self):
        self.config_path.write_text(
            "steam_api_key: yaml-key\nplaytime_threshold_minutes: 90\n",
            encoding="utf-8",
        )
        settings = load_settings(self.config_path)
        self.assertEqual(settings.steam_api_key, "yaml-key")
        self.assertEqual(settings.playtime_threshold_minutes, 90)

    def test_overrides_win_over_file_and_none_is_ignored(self):
        self.config_path.write_text("steam_api_key: k\nplaytime_threshold_minutes: 90\n", encoding="utf-8")
        settings = load_settings(self.config_path, playtime_threshold_minutes=30, log_level=None)
        self.assertEqual(settings.playtime_threshold_minutes, 30)
        self.assertIsNone(settings.log_level)

    def test_env_wins_over_file(self):
        self.config_path.write_text("steam_api_key: yaml-key\n", encoding="utf-8")
        with patch.dict(os.environ, {"STEAM_API_KEY": "env-key"}):
            settings = load_settings(self.config_path)
        self.assertEqual(settings.steam_api_key, "env-key")

    def test_overrides_win_over_env(self):
        env = {
            "STEAM_API_KEY": "k",
            "WSPIN_PLAYTIME_THRESHOLD_MINUTES": "120",
            "WSPIN_LOG_LEVEL": "ERROR",
        }
        with patch.dict(os.environ, env):
            settings = load_settings(None, playtime_threshold_minutes=30, log_level="debug")
        self.assertEqual(settings.playtime_threshold_minutes, 30)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_invalid_override(self):
        with patch.dict(os.environ, {"STEAM_API_KEY": "k"}):
            with self.assertRaises(ConfigException) as cm:
                load_settings(None, playtime_threshold_minutes=-1)
        self.assertEqual(cm.exception.error.code, ErrorCode.CONFIG_INVALID_VALUE.value)
        self.assertIn("playtime_threshold_minutes", cm.exception.error.message)

    def test_missing_api_key(self):
        with self.assertRaises(ConfigException) as cm:
            load_settings(self.config_path)
        self.assertEqual(cm.exception.error.code, ErrorCode.CONFIG_MISSING_API_KEY.value)

    def test_missing_api_key_allowed_when_not_required(self):
        settings = load_settings(self.config_path, require_api_key=False)
        self.assertEqual(settings.steam_api_key, "")

    def test_invalid_value(self):
        self.config_path.write_text("steam_api_key: k\nrequest_timeout: -1\n", encoding="utf-8")
        with self.assertRaises(ConfigException) as cm:
            load_settings(self.config_path)
        self.assertEqual(cm.exception.error.code, ErrorCode.CONFIG_INVALID_VALUE.value)
        self.assertIn("request_timeout", cm.exception.error.message)

    def test_broken_yaml(self):
        self.config_path.write_text("steam_api_key: [unterminated\n", encoding="utf-8")
        with self.assertRaises(ConfigException) as cm:
            load_config_file(self.config_path)
        self.assertEqual(cm.exception.error.code, ErrorCode.CONFIG_INVALID_VALUE.value)

    def test_non_mapping_yaml_is_ignored(self):
        self.config_path.write_text("- a\n- b\n", encoding="utf-8")
        self.assertEqual(load_config_file(self.config_path), {})

    def test_missing_file(self):
        self.assertEqual(load_config_file(Path(self.tmp.name) / "absent.yaml"), {})


if __name__ == "__main__":
    unittest.main()
