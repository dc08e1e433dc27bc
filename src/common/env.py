"""
どこで: `common.env`
何を: 環境変数の軽量パースヘルパ（int/float/bool/str）。
なぜ: `os.getenv` と不正値ガードの散在を避け、`common.settings` から一様に読むため。
"""

from __future__ import annotations

import os
from typing import Optional

_TRUE_WORDS = {"true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"false", "f", "no", "n", "off"}


def env_int(
    name: str, default: Optional[int] = None, *, min_value: Optional[int] = None
) -> Optional[int]:
    """整数環境変数を取得する（未設定/不正値は既定値、`min_value` 未満は下限へ丸める）。"""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        val = int(raw.strip())
    except ValueError:
        return default
    if min_value is not None and val < min_value:
        val = min_value
    return val


def env_float(
    name: str, default: Optional[float] = None, *, min_value: Optional[float] = None
) -> Optional[float]:
    """浮動小数環境変数を取得する（未設定/不正値/非有限値は既定値）。"""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        val = float(raw.strip())
    except ValueError:
        return default
    if val != val or val in (float("inf"), float("-inf")):
        return default
    if min_value is not None and val < min_value:
        val = min_value
    return val


def env_bool(name: str, default: bool = False) -> bool:
    """真偽環境変数を取得する（0/1, true/false, yes/no, on/off を許容）。"""
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = raw.strip().lower()
    try:
        return int(s) != 0
    except ValueError:
        pass
    if s in _TRUE_WORDS:
        return True
    if s in _FALSE_WORDS:
        return False
    return bool(default)


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """文字列環境変数を取得する（空文字は未設定扱い）。"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


__all__ = ["env_int", "env_float", "env_bool", "env_str"]
