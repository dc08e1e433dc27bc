"""
どこで: `sandbox.compiler`。
何を: ソース文字列→`CompiledProgram`（compile）と、登録コールバック付きの実行（run）。
なぜ: 構文エラーと実行時エラーを別の例外へ分け、呼び出し側が直前の正常状態を保てるようにするため。

流れ:
    program = compile_source(text)              # CompileError
    result = run_program(program, time_budget=2) # RegistrationError
    for f in result.functions: ...
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from types import CodeType
from typing import Any, Iterable, Mapping

from common import settings as _settings
from util.utils import config_float, config_section, load_config

from .budget import ExecutionBudget
from .errors import BudgetExceeded, CompileError, RegistrationError
from .registration import Registrar, RegistrationResult
from .safe_builtins import DEFAULT_ALLOWED_MODULES, build_globals
from .validator import validate_tree

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "<editor>"
DEFAULT_TIME_BUDGET = 2.0


@dataclass(frozen=True, slots=True)
class CompiledProgram:
    """コンパイル済みのユーザプログラム（不変）。"""

    code: CodeType
    source: str
    filename: str = DEFAULT_FILENAME


def compile_source(source: str, filename: str = DEFAULT_FILENAME) -> CompiledProgram:
    """ソースを検査してコンパイルする。構文エラー/ヌルバイト/禁止構文は `CompileError`。"""
    if not isinstance(source, str):
        raise CompileError(f"ソースは str である必要があります: {type(source).__name__}")
    try:
        tree = ast.parse(source, filename, "exec")
    except SyntaxError as e:
        raise CompileError.from_syntax_error(e) from e
    except (ValueError, TypeError) as e:
        # 3.11 以前はヌルバイトで ValueError
        raise CompileError(str(e)) from e
    validate_tree(tree)
    try:
        code = compile(tree, filename, "exec", dont_inherit=True)
    except SyntaxError as e:
        raise CompileError.from_syntax_error(e) from e
    return CompiledProgram(code=code, source=source, filename=filename)


def run_program(
    program: CompiledProgram,
    registrar: Registrar | None = None,
    *,
    time_budget: float | None = None,
    allowed_modules: Iterable[str] = DEFAULT_ALLOWED_MODULES,
) -> RegistrationResult:
    """プログラム本体を新しい globals で実行し、登録結果を返す。

    本体が例外を送出した/予算を超過した場合は `RegistrationError`（元例外は `__cause__`）。
    登録コールバックは実行終了時に閉じられ、以後の呼び出しは警告扱いになる。
    """
    reg = registrar if registrar is not None else Registrar()
    env = build_globals(reg, allowed_modules=allowed_modules, filename=program.filename)
    try:
        with ExecutionBudget(time_budget, filename=program.filename):
            exec(program.code, env)
    except BudgetExceeded as e:
        raise RegistrationError(str(e), original=e) from e
    except Exception as e:
        raise RegistrationError(f"{type(e).__name__}: {e}", original=e) from e
    finally:
        reg.close()
    return reg.result()


class FunctionSandbox:
    """compile + run をまとめ、既定値を構成から解決するファサード。"""

    def __init__(
        self,
        *,
        time_budget: float | None = DEFAULT_TIME_BUDGET,
        allowed_modules: Iterable[str] = DEFAULT_ALLOWED_MODULES,
        filename: str = DEFAULT_FILENAME,
    ) -> None:
        self.time_budget = time_budget
        self.allowed_modules = tuple(allowed_modules)
        self.filename = filename

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None = None) -> "FunctionSandbox":
        """`sandbox` セクションと `SFP_SANDBOX_TIME_BUDGET` から構築する（env が優先）。"""
        section = config_section(cfg if cfg is not None else load_config(), "sandbox")
        budget: float | None = config_float(section, "run_time_budget_sec", DEFAULT_TIME_BUDGET)
        env_budget = _settings.get().SANDBOX_TIME_BUDGET
        if env_budget is not None:
            budget = env_budget
        modules = section.get("allowed_modules")
        if isinstance(modules, (list, tuple)) and all(isinstance(m, str) for m in modules):
            allowed = tuple(modules)
        else:
            allowed = DEFAULT_ALLOWED_MODULES
        return cls(time_budget=budget if budget and budget > 0 else None, allowed_modules=allowed)

    def compile(self, source: str) -> CompiledProgram:
        return compile_source(source, self.filename)

    def run(self, program: CompiledProgram) -> RegistrationResult:
        return run_program(
            program, time_budget=self.time_budget, allowed_modules=self.allowed_modules
        )

    def load(self, source: str) -> RegistrationResult:
        """`compile` → `run`。`CompileError` / `RegistrationError` はそのまま伝播する。"""
        result = self.run(self.compile(source))
        logger.debug(
            "loaded %d function(s), %d warning(s)", len(result.functions), len(result.warnings)
        )
        return result


__all__ = [
    "CompiledProgram",
    "FunctionSandbox",
    "compile_source",
    "run_program",
    "DEFAULT_TIME_BUDGET",
]
