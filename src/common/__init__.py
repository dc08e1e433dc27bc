"""
どこで: `common` パッケージ。
何を: 全層で使う軽量な型エイリアス・環境設定・ロギング初期化。
なぜ: 最内層に置く共通基盤を分離し、依存の向きを単純化するため。
"""

from .logging import setup_default_logging
from .types import RGBA, HorizontalRange

__all__ = [
    "setup_default_logging",
    "RGBA",
    "HorizontalRange",
]
