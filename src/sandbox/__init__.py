"""
どこで: `sandbox` パッケージ。
何を: ユーザのソース文字列を、登録コールバック経由で数値関数の列へ変換する。
なぜ: 信頼できない/壊れたコードを描画ループから隔離し、失敗を型付きで返すため。
"""

from .compiler import (
    DEFAULT_TIME_BUDGET,
    CompiledProgram,
    FunctionSandbox,
    compile_source,
    run_program,
)
from .errors import (
    BudgetExceeded,
    CompileError,
    RegistrationError,
    RegistrationWarning,
    SandboxError,
)
from .registration import (
    FunctionKind,
    RegisteredFunction,
    Registrar,
    RegistrationResult,
    infer_kind,
)

__all__ = [
    "DEFAULT_TIME_BUDGET",
    "CompiledProgram",
    "FunctionSandbox",
    "compile_source",
    "run_program",
    "BudgetExceeded",
    "CompileError",
    "RegistrationError",
    "RegistrationWarning",
    "SandboxError",
    "FunctionKind",
    "RegisteredFunction",
    "Registrar",
    "RegistrationResult",
    "infer_kind",
]
