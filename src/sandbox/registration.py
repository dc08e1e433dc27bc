"""
どこで: `sandbox.registration`。
何を: 登録コールバック `render` の実体（Registrar）と、登録関数の値オブジェクト/種別推定。
なぜ: ユーザコードから「どの関数を、どの種別で、どの順に」描くかを受け取り、誤用を例外ではなく警告として集約するため。

使用例（ユーザコード側）:
    def torus(u, v, t):
        ...
    render(torus)

    @render(kind="curve")
    def wave(x, t):
        return math.sin(x / 50 + t) * 100
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .errors import RegistrationWarning

logger = logging.getLogger(__name__)


class FunctionKind(str, Enum):
    SURFACE = "surface"
    CURVE = "curve"
    PARAMETRIC_CURVE = "parametric_curve"

    @classmethod
    def parse(cls, value: "FunctionKind | str") -> "FunctionKind":
        if isinstance(value, FunctionKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"未知の関数種別です: {value!r}") from None


@dataclass(frozen=True, slots=True)
class RegisteredFunction:
    """登録済み関数。`index` は登録順（0 始まり）で、パレット色の選択に使う。"""

    fn: Callable[..., Any]
    kind: FunctionKind
    index: int
    name: str

    def __call__(self, *args: float) -> Any:
        return self.fn(*args)


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    functions: tuple[RegisteredFunction, ...] = ()
    warnings: tuple[RegistrationWarning, ...] = ()

    def of_kind(self, kind: FunctionKind) -> tuple[RegisteredFunction, ...]:
        return tuple(f for f in self.functions if f.kind is kind)

    def __len__(self) -> int:
        return len(self.functions)


def _describe(target: Any) -> str:
    name = getattr(target, "__name__", None)
    return name if isinstance(name, str) else type(target).__name__


def _binds(sig: inspect.Signature, n: int) -> bool:
    try:
        sig.bind(*([0.0] * n))
    except TypeError:
        return False
    return True


def infer_kind(fn: Callable[..., Any]) -> FunctionKind | None:
    """シグネチャから種別を推定する（3 引数で束縛可能→SURFACE、2 引数→CURVE、どちらも不可→None）。

    既定値付き引数も考慮する（例: `klein(u, v, t=0)` は 3 引数で束縛できるので SURFACE）。
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    if _binds(sig, 3):
        return FunctionKind.SURFACE
    if _binds(sig, 2):
        return FunctionKind.CURVE
    return None


def _arity_ok(fn: Callable[..., Any], kind: FunctionKind) -> bool:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # シグネチャを取れない組込み等は呼び出し時の失敗に任せる
        return True
    return _binds(sig, 3 if kind is FunctionKind.SURFACE else 2)


_UNSET = object()


@dataclass
class Registrar:
    """ユーザコードへ `render` として渡す登録コールバック。

    - `render(fn)` / `render(fn, kind="curve")` は `fn` をそのまま返す
    - `render(kind="curve")` はデコレータを返す（`@render(kind=...)`）
    - 誤用は何も登録せず `RegistrationWarning` を記録し WARNING を出す
    - `close()` 後の呼び出しも誤用として扱う
    """

    _functions: list[RegisteredFunction] = field(default_factory=list)
    _warnings: list[RegistrationWarning] = field(default_factory=list)
    _calls: int = 0
    _closed: bool = False

    def __call__(self, fn: Any = _UNSET, kind: FunctionKind | str | None = None) -> Any:
        if fn is _UNSET:
            def _decorator(target: Any) -> Any:
                return self(target, kind=kind)

            return _decorator

        self._calls += 1
        call_index = self._calls

        if self._closed:
            self._warn(call_index, "registration after the program finished", fn)
            return fn
        if not callable(fn):
            self._warn(call_index, "argument is not callable", fn)
            return fn

        if kind is None:
            resolved = infer_kind(fn)
            if resolved is None:
                self._warn(call_index, "signature accepts neither (u, v, t) nor (x, t)", fn)
                return fn
        else:
            try:
                resolved = FunctionKind.parse(kind)
            except ValueError:
                self._warn(call_index, f"unknown kind {kind!r}", fn)
                return fn
            if not _arity_ok(fn, resolved):
                self._warn(call_index, f"signature does not match kind '{resolved.value}'", fn)
                return fn

        entry = RegisteredFunction(
            fn=fn, kind=resolved, index=len(self._functions), name=_describe(fn)
        )
        self._functions.append(entry)
        logger.debug("registered %s #%d as %s", entry.name, entry.index, resolved.value)
        return fn

    def _warn(self, call_index: int, reason: str, target: Any) -> None:
        warning = RegistrationWarning(call_index=call_index, reason=reason, target=_describe(target))
        self._warnings.append(warning)
        logger.warning("%s", warning)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def result(self) -> RegistrationResult:
        return RegistrationResult(functions=tuple(self._functions), warnings=tuple(self._warnings))


__all__ = [
    "FunctionKind",
    "RegisteredFunction",
    "RegistrationResult",
    "Registrar",
    "infer_kind",
]
