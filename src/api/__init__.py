"""
どこで: `api` 入口（高レベル公開 API）。
何を: ランナー `run_viewer` / `run_plotter` と、サンドボックス/コンポーザの主要型を再輸出。
なぜ: 利用者が単一名前空間から「ソースを渡して起動」まで完結できるようにするため。

Usage:
    from api import run_viewer

    run_viewer(\"\"\"
    def sphere(u, v, t):
        a, b = u * 2 * math.pi, v * math.pi
        return (10 * math.cos(a) * math.sin(b), 10 * math.sin(a) * math.sin(b), 10 * math.cos(b))

    render(sphere)
    \"\"\")
"""

from engine.core.geometry import Mesh, Polyline
from engine.scene.composer import CompileReport, CompileStatus, SceneComposer
from engine.scene.editor import FileEditorSource, TextEditorSource
from engine.scene.plot import PlotComposer
from sandbox import FunctionKind, FunctionSandbox

from .examples import CURVE_EXAMPLE_SOURCE, EXAMPLE_SOURCE
from .plotter import run_plotter
from .viewer import run_viewer

__all__ = [
    # 実行
    "run_viewer",
    "run_plotter",
    # サンプル
    "EXAMPLE_SOURCE",
    "CURVE_EXAMPLE_SOURCE",
    # クラス（高度な使用）
    "SceneComposer",
    "PlotComposer",
    "CompileReport",
    "CompileStatus",
    "TextEditorSource",
    "FileEditorSource",
    "FunctionSandbox",
    "FunctionKind",
    "Mesh",
    "Polyline",
]

__version__ = "0.1.0"
