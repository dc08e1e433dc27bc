"""
どこで: `common.logging`。
何を: ランナー起動時に 1 度だけ適用する最小ロギング設定と、レベル名の解決ヘルパ。
なぜ: 各モジュールは `logging.getLogger(__name__)` だけを使い、設定の責務をランナー側へ寄せるため。
"""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str | None, default: int = logging.INFO) -> int:
    """`"debug"` / `10` / `None` などをロギングレベル整数へ解決する。不明な名前は既定値。"""
    if level is None:
        return default
    if isinstance(level, str):
        value = getattr(logging, level.strip().upper(), None)
        return value if isinstance(value, int) else default
    return int(level)


def setup_default_logging(level: int | str | None = "INFO") -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（ホスト側の設定を尊重）
    - `api.viewer` / `api.plotter` から呼び出す想定
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=resolve_level(level), format=DEFAULT_FORMAT)


__all__ = ["setup_default_logging", "resolve_level", "DEFAULT_FORMAT"]
