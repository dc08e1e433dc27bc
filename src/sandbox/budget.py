"""
どこで: `sandbox.budget`。
何を: ユーザプログラム本体の実行にウォールクロック予算を課すコンテキストマネージャ。
なぜ: 登録フェーズでの無限ループがイベントループ（描画）を止めないようにするため。

実装メモ:
- `sys.settrace` の行トレーサで経過時間を検査し、超過時に `BudgetExceeded` を送出する。
- 既存のトレーサ（デバッガ/カバレッジ）は退避し、終了時に必ず戻す。
- 対象はユーザコードのフレーム（`filename` 一致）のみ。ホスト側関数は追跡しない。
"""

from __future__ import annotations

import sys
import time
from types import FrameType
from typing import Any, Callable

from .errors import BudgetExceeded


class ExecutionBudget:
    """`with ExecutionBudget(2.0, filename="<editor>"):` の形で使う。

    `seconds` が None または 0 以下なら何もしない（予算無効）。
    """

    def __init__(
        self,
        seconds: float | None,
        *,
        filename: str = "<editor>",
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.seconds = seconds if seconds and seconds > 0 else None
        self.filename = filename
        self._clock = clock
        self._deadline = 0.0
        self._start = 0.0
        self._previous: Any = None

    @property
    def enabled(self) -> bool:
        return self.seconds is not None

    def _check(self) -> None:
        now = self._clock()
        if now > self._deadline:
            assert self.seconds is not None
            raise BudgetExceeded(self.seconds, now - self._start)

    def _local(self, frame: FrameType, event: str, arg: Any):
        if event == "line":
            self._check()
        return self._local

    def _global(self, frame: FrameType, event: str, arg: Any):
        if event != "call" or frame.f_code.co_filename != self.filename:
            return None
        self._check()
        return self._local

    def __enter__(self) -> "ExecutionBudget":
        if self.seconds is None:
            return self
        self._start = self._clock()
        self._deadline = self._start + self.seconds
        self._previous = sys.gettrace()
        sys.settrace(self._global)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.seconds is None:
            return None
        sys.settrace(self._previous)
        self._previous = None
        return None


__all__ = ["ExecutionBudget"]
