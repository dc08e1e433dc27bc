"""
どこで: `sandbox.validator`。
何を: コンパイル前に AST を走査し、内部属性/フレーム内省へ届く構文を `CompileError` で拒否する。
なぜ: 組込み関数を絞るだけでは `obj.__class__` や `gen.gi_frame.f_back` を辿ってホストへ到達できるため。

拒否する構文:
- `_` で始まる属性参照（`x.__class__`, `random._os` など）
- `_` で始まる名前（単独の `_` は除く）と import 名
- フレーム/ジェネレータ/トレースバックの内省属性と `str.format` 系（書式文字列経由の属性参照）
- `match` のクラスパターンでの上記属性の束縛
"""

from __future__ import annotations

import ast

from .errors import CompileError

_INTROSPECTION_ATTRS = frozenset(
    {
        "gi_frame",
        "gi_code",
        "gi_yieldfrom",
        "cr_frame",
        "cr_code",
        "cr_await",
        "cr_origin",
        "ag_frame",
        "ag_code",
        "ag_await",
        "f_back",
        "f_builtins",
        "f_code",
        "f_globals",
        "f_locals",
        "tb_frame",
        "tb_next",
        "format",
        "format_map",
    }
)


def _blocked_attr(name: str) -> bool:
    return name.startswith("_") or name in _INTROSPECTION_ATTRS


def _blocked_name(name: str) -> bool:
    return name.startswith("_") and name != "_"


class _SourceValidator(ast.NodeVisitor):
    def _reject(self, node: ast.AST, what: str) -> None:
        lineno = getattr(node, "lineno", None)
        col = getattr(node, "col_offset", None)
        where = f" (line {lineno})" if lineno else ""
        raise CompileError(
            f"{what} はエディタでは使用できません{where}",
            lineno=lineno,
            offset=col + 1 if col is not None else None,
        )

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if _blocked_attr(node.attr):
            self._reject(node, f"属性 '{node.attr}'")
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if _blocked_name(node.id):
            self._reject(node, f"名前 '{node.id}'")

    def visit_alias(self, node: ast.alias) -> None:
        for part in node.name.split("."):
            if _blocked_name(part):
                self._reject(node, f"import 名 '{node.name}'")

    def visit_MatchClass(self, node: ast.MatchClass) -> None:
        for attr in node.kwd_attrs:
            if _blocked_attr(attr):
                self._reject(node, f"属性 '{attr}'")
        self.generic_visit(node)


def validate_tree(tree: ast.AST) -> None:
    """`tree` に禁止構文があれば最初の 1 件で `CompileError` を送出する。"""
    _SourceValidator().visit(tree)


__all__ = ["validate_tree"]
