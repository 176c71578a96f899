"""WSPIN - Steamライブラリから次に遊ぶゲームを選ぶCLIツール"""

__version__ = "1.0.0"
