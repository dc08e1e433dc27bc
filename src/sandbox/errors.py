"""
どこで: `sandbox.errors`。
何を: サンドボックスの例外階層（コンパイル失敗/登録実行失敗/実行予算超過）と登録警告。
なぜ: 呼び出し側（コンポーザ）が失敗の種類ごとに「直前の正常な関数集合を保持する」判断を行えるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass


class SandboxError(Exception):
    """サンドボックス関連の基底例外。"""


class CompileError(SandboxError):
    """ソースを実行単位へ変換できなかった（構文エラー等）。

    `lineno`/`offset`/`text` は SyntaxError 由来の位置情報（不明時は None）。
    """

    def __init__(
        self,
        message: str,
        *,
        lineno: int | None = None,
        offset: int | None = None,
        text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.lineno = lineno
        self.offset = offset
        self.text = text

    @classmethod
    def from_syntax_error(cls, exc: SyntaxError) -> "CompileError":
        where = f" (line {exc.lineno})" if exc.lineno else ""
        return cls(
            f"{exc.msg}{where}",
            lineno=exc.lineno,
            offset=exc.offset,
            text=exc.text.rstrip("\n") if exc.text else None,
        )


class RegistrationError(SandboxError):
    """コンパイル済みプログラムの実行（関数登録）中に例外が発生した。

    元の例外は `__cause__` と `original` に保持する。
    """

    def __init__(self, message: str, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original


class BudgetExceeded(BaseException):
    """実行予算（ウォールクロック）を超えたことをトレーサから通知する内部例外。

    ユーザコードの `except Exception:` で握りつぶされないよう `BaseException` を継承する。
    `run_program` が捕捉して `RegistrationError` へ変換する。
    """

    def __init__(self, budget: float, elapsed: float) -> None:
        super().__init__(f"execution exceeded time budget ({elapsed:.2f}s > {budget:.2f}s)")
        self.budget = budget
        self.elapsed = elapsed


@dataclass(frozen=True, slots=True)
class RegistrationWarning:
    """登録コールバックの誤用（何も登録されなかった呼び出し）の記録。"""

    call_index: int
    reason: str
    target: str

    def __str__(self) -> str:
        return f"render() call #{self.call_index}: {self.reason} ({self.target})"


__all__ = [
    "SandboxError",
    "CompileError",
    "RegistrationError",
    "BudgetExceeded",
    "RegistrationWarning",
]
