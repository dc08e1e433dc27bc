"""
どこで: `sandbox.safe_builtins`。
何を: ユーザコードへ渡す最小の組込み関数集合と、ホワイトリスト制の `__import__`。
なぜ: ユーザコードが「関数を登録して返す」以外にホスト状態へ触れられないよう、実行環境を明示的に組み立てるため。

方針:
- 数値・コンテナ・反復まわりの組込みと、よく使う例外型のみを公開する。
- `open`/`eval`/`exec`/`compile`/`globals`/`vars`/`getattr` などは公開しない。
- `print` は `sandbox.user` ロガーへ流す（標準出力を汚さない）。
- `import` は `allowed_modules` に列挙した純数値モジュールだけを許可し、公開名だけの読み取り専用ビューを渡す。
"""

from __future__ import annotations

import builtins as _py_builtins
import importlib
import logging
from types import MappingProxyType, ModuleType
from typing import Any, Callable, Iterable, Mapping

user_logger = logging.getLogger("sandbox.user")

DEFAULT_ALLOWED_MODULES: tuple[str, ...] = ("math", "cmath", "random")

_SAFE_NAMES: tuple[str, ...] = (
    # 数値
    "abs",
    "bool",
    "complex",
    "divmod",
    "float",
    "int",
    "max",
    "min",
    "pow",
    "round",
    "sum",
    # コンテナ/反復
    "all",
    "any",
    "dict",
    "enumerate",
    "filter",
    "frozenset",
    "iter",
    "len",
    "list",
    "map",
    "next",
    "range",
    "reversed",
    "set",
    "slice",
    "sorted",
    "str",
    "tuple",
    "zip",
    # 型判定/関数
    "callable",
    "isinstance",
    "issubclass",
    "repr",
    "hash",
    # 定数
    "True",
    "False",
    "None",
    "NotImplemented",
    "Ellipsis",
    # 例外型（ユーザコードの raise/except 用）
    "ArithmeticError",
    "AssertionError",
    "Exception",
    "IndexError",
    "KeyError",
    "LookupError",
    "NotImplementedError",
    "OverflowError",
    "RuntimeError",
    "StopIteration",
    "TypeError",
    "ValueError",
    "ZeroDivisionError",
)


class ModuleView:
    """モジュールの公開名（`_` で始まらない名前）だけを持つ読み取り専用の名前空間。

    実モジュールを渡すと `random._os` のような内部参照からホストへ届くため、写しを渡す。
    """

    __slots__ = ("_name", "_attrs")

    def __init__(self, module: ModuleType) -> None:
        attrs = {k: getattr(module, k) for k in dir(module) if not k.startswith("_")}
        object.__setattr__(self, "_name", module.__name__)
        object.__setattr__(self, "_attrs", MappingProxyType(attrs))

    def __getattr__(self, name: str) -> Any:
        try:
            return self._attrs[name]
        except KeyError:
            raise AttributeError(f"module '{self._name}' has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"module '{self._name}' is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"module '{self._name}' is read-only")

    def __dir__(self) -> list[str]:
        return sorted(self._attrs)

    def __repr__(self) -> str:
        return f"<module view '{self._name}'>"


_VIEWS: dict[str, ModuleView] = {}


def module_view(name: str) -> ModuleView:
    """`name` の `ModuleView` を返す（モジュール名ごとに 1 つを共有）。"""
    view = _VIEWS.get(name)
    if view is None:
        view = _VIEWS[name] = ModuleView(importlib.import_module(name))
    return view


def _user_print(*args: Any, sep: str = " ", end: str = "\n", **_: Any) -> None:
    user_logger.info("%s", sep.join(str(a) for a in args) + ("" if end == "\n" else end))


def make_restricted_import(allowed: Iterable[str]) -> Callable[..., Any]:
    """`allowed` に列挙したモジュールだけを `ModuleView` として import できる `__import__` を返す。"""
    allowed_set = frozenset(allowed)

    def _restricted_import(
        name: str,
        globals: Mapping[str, Any] | None = None,  # noqa: A002 - __import__ 互換
        locals: Mapping[str, Any] | None = None,  # noqa: A002
        fromlist: Iterable[str] = (),
        level: int = 0,
    ) -> Any:
        if level != 0:
            raise ImportError("relative imports are not available in the editor")
        if name not in allowed_set:
            raise ImportError(f"import of '{name}' is not allowed (allowed: {sorted(allowed_set)})")
        # 実モジュールではなく公開名だけの写しを返す
        return module_view(name)

    return _restricted_import


def build_builtins(allowed_modules: Iterable[str] = DEFAULT_ALLOWED_MODULES) -> dict[str, Any]:
    """ユーザコード用の `__builtins__` 辞書を組み立てる（呼び出しごとに新しい辞書）。"""
    table: dict[str, Any] = {name: getattr(_py_builtins, name) for name in _SAFE_NAMES}
    table["print"] = _user_print
    table["__import__"] = make_restricted_import(allowed_modules)
    # class 文は __build_class__ を必要とする
    table["__build_class__"] = _py_builtins.__build_class__
    return table


def _expose(render: Callable[..., Any]) -> Callable[..., Any]:
    # 登録オブジェクト本体（close/result など）をユーザへ見せない
    def render_(*args: Any, **kwargs: Any) -> Any:
        return render(*args, **kwargs)

    render_.__name__ = render_.__qualname__ = "render"
    return render_


def build_globals(
    render: Callable[..., Any],
    *,
    allowed_modules: Iterable[str] = DEFAULT_ALLOWED_MODULES,
    filename: str = "<editor>",
) -> dict[str, Any]:
    """実行用 globals を組み立てる。ユーザから見える名前は `render`・`math`・安全な組込みのみ。"""
    return {
        "__builtins__": build_builtins(allowed_modules),
        "__name__": "__sandbox__",
        "__file__": filename,
        "render": _expose(render),
        "math": module_view("math"),
    }


__all__ = [
    "DEFAULT_ALLOWED_MODULES",
    "build_builtins",
    "build_globals",
    "module_view",
    "ModuleView",
    "make_restricted_import",
    "user_logger",
]
