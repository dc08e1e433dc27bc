"""
どこで: `sampling.result`。
何を: ユーザ関数 1 回の評価を `SampleOutcome` へ変換するヘルパ（例外/非有限値/形状不正を失敗として扱う）。
なぜ: テッセレーション/曲線サンプリングの内側ループから例外処理を追い出し、失敗を値として集計するため。
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Callable

from engine.core.sample import SampleFailure, SampleOutcome


def _finite_real(x: Any) -> float | None:
    # bool は numbers.Real に含まれるが数値として受理する
    if not isinstance(x, numbers.Real):
        return None
    fx = float(x)
    return fx if math.isfinite(fx) else None


def coerce_vector(value: Any, size: int) -> tuple[float, ...] | str:
    """`value` を長さ `size` の有限実数タプルへ変換する。失敗時は分類文字列を返す。"""
    if isinstance(value, (str, bytes)):
        return "BadShape"
    try:
        items = tuple(value)
    except TypeError:
        return "BadShape"
    if len(items) != size:
        return "BadShape"
    out = []
    for item in items:
        fx = _finite_real(item)
        if fx is None:
            return "NonFinite" if isinstance(item, numbers.Real) else "NotReal"
        out.append(fx)
    return tuple(out)


def evaluate(fn: Callable[..., Any], params: tuple[float, ...], size: int) -> SampleOutcome:
    """`fn(*params)` を評価する。

    - `size == 1`: スカラー（有限実数）を期待する
    - `size >= 2`: 長さ `size` のシーケンスを期待する
    """
    try:
        raw = fn(*params)
    except Exception as e:
        return SampleOutcome(failure=SampleFailure.from_exception(params, e))

    try:
        return _coerce_outcome(raw, params, size)
    except Exception as e:
        # ユーザ定義型の __iter__ / __float__ が送出した場合
        return SampleOutcome(failure=SampleFailure.from_exception(params, e))


def _coerce_outcome(raw: Any, params: tuple[float, ...], size: int) -> SampleOutcome:
    if size == 1:
        fx = _finite_real(raw)
        if fx is None:
            kind = "NonFinite" if isinstance(raw, numbers.Real) else "NotReal"
            return SampleOutcome(failure=SampleFailure(params, kind, f"got {raw!r}"))
        return SampleOutcome(value=(fx,))

    coerced = coerce_vector(raw, size)
    if isinstance(coerced, str):
        return SampleOutcome(
            failure=SampleFailure(params, coerced, f"expected {size} finite reals, got {raw!r}")
        )
    return SampleOutcome(value=coerced)


def evaluate_surface(fn: Callable[..., Any], u: float, v: float, t: float) -> SampleOutcome:
    return evaluate(fn, (u, v, t), 3)


def evaluate_curve(fn: Callable[..., Any], x: float, t: float) -> SampleOutcome:
    return evaluate(fn, (x, t), 1)


def evaluate_parametric(fn: Callable[..., Any], s: float, t: float) -> SampleOutcome:
    return evaluate(fn, (s, t), 2)


__all__ = [
    "coerce_vector",
    "evaluate",
    "evaluate_surface",
    "evaluate_curve",
    "evaluate_parametric",
]
