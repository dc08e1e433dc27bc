"""
どこで: `engine.core.sample`。
何を: 1 回のユーザ関数評価の結果（成功値 or `SampleFailure`）を表す値オブジェクト。
なぜ: 頂点ごとの例外巻き戻しに頼らず、失敗を値として集計（件数/最初の失敗）できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SampleFailure:
    """評価 1 回分の失敗記録。

    - `params`: 評価した引数（例: `(u, v, t)`）
    - `error_type`: 例外クラス名、または `"NonFinite"` / `"BadShape"` などの分類
    - `message`: 表示用メッセージ
    """

    params: tuple[float, ...]
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, params: tuple[float, ...], exc: BaseException) -> "SampleFailure":
        return cls(params=params, error_type=type(exc).__name__, message=str(exc))

    def describe(self) -> str:
        args = ", ".join(f"{p:g}" for p in self.params)
        return f"f({args}) -> {self.error_type}: {self.message}"


@dataclass(frozen=True, slots=True)
class SampleOutcome:
    """`Result<value, SampleFailure>` 相当。どちらか一方だけが設定される。"""

    value: tuple[float, ...] | None = None
    failure: SampleFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


__all__ = ["SampleFailure", "SampleOutcome"]
