"""Steamログインの公開API。"""

from __future__ import annotations

from wspin.auth.browser import BrowserPlatform, open_browser
from wspin.auth.callback import CallbackListener, extract_steam_id
from wspin.auth.openid import HandshakeState, SteamOpenIDLogin, build_login_url
from wspin.auth.port import find_free_port
from wspin.auth.storage import SteamIDStore

__all__ = [
    "BrowserPlatform",
    "CallbackListener",
    "HandshakeState",
    "SteamIDStore",
    "SteamOpenIDLogin",
    "build_login_url",
    "extract_steam_id",
    "find_free_port",
    "open_browser",
]
