"""
どこで: `engine.scene.composer`。
何を: エディタのテキストをコンパイルし、登録関数ごとのプリミティブを所有・差し替える `SceneComposer`。
なぜ: コンパイル失敗時は直前のシーンを保ち、成功時のみ旧プリミティブを破棄して新しい集合へ原子的に切り替えるため。

状態遷移（compile）:
    空テキスト            -> EMPTY（何もしない）
    CompileError          -> COMPILE_ERROR（旧シーン維持）
    RegistrationError     -> REGISTRATION_ERROR（旧シーン維持）
    全曲面が初回評価で全滅 -> REGISTRATION_ERROR（新プリミティブを破棄し旧シーン維持）
    成功                  -> OK（旧プリミティブ dispose → 新プリミティブ start）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, Sequence, TypeVar

from common.types import RGBA
from engine.render.types import RenderItem
from engine.runtime.primitive import Primitive, SurfacePrimitive
from engine.runtime.scheduler import TickScheduler
from sandbox.compiler import FunctionSandbox
from sandbox.errors import CompileError, RegistrationError, RegistrationWarning, SandboxError
from sandbox.registration import FunctionKind, RegisteredFunction
from util.color import normalize_palette
from util.utils import config_float, config_section

from .editor import EditorSource
from .settings import DEFAULT_PALETTE, RenderSettings, palette_from_config

logger = logging.getLogger(__name__)

DEFAULT_AUTOCOMPILE_DELAY = 1.0


class CompileStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    COMPILE_ERROR = "compile_error"
    REGISTRATION_ERROR = "registration_error"


@dataclass(frozen=True)
class CompileReport:
    """1 回の `compile()` の結果。`started` は開始したプリミティブ数、`skipped` は対象外の関数数。"""

    status: CompileStatus
    message: str = ""
    started: int = 0
    skipped: int = 0
    warnings: tuple[RegistrationWarning, ...] = ()
    error: SandboxError | None = None

    @property
    def ok(self) -> bool:
        return self.status is CompileStatus.OK

    def summary(self) -> str:
        """ステータス表示用の 1 行要約。"""
        if self.status is CompileStatus.OK:
            text = f"{self.started} shape(s)"
            if self.skipped:
                text += f", {self.skipped} skipped"
            if self.warnings:
                text += f", {len(self.warnings)} warning(s)"
            return text
        if self.status is CompileStatus.EMPTY:
            return "empty source"
        return f"{self.status.value}: {self.message}"


P = TypeVar("P", bound=Primitive)


class _ComposerBase(Generic[P]):
    """コンパイル/自動コンパイル/破棄の共通部分。サブクラスは `_build` でプリミティブを作る。"""

    def __init__(
        self,
        editor: EditorSource,
        *,
        scheduler: TickScheduler,
        palette: Sequence[Any] | None = None,
        sandbox: FunctionSandbox | None = None,
        autocompile_delay: float = DEFAULT_AUTOCOMPILE_DELAY,
    ) -> None:
        self._editor = editor
        self._scheduler = scheduler
        self._palette: tuple[RGBA, ...] = normalize_palette(
            palette if palette is not None else DEFAULT_PALETTE
        )
        self._sandbox = sandbox if sandbox is not None else FunctionSandbox()
        self._autocompile_delay = float(autocompile_delay)
        self._primitives: list[P] = []
        self._functions: tuple[RegisteredFunction, ...] = ()
        self._last_report: CompileReport | None = None
        self._autocompile_pending = False
        self._disposed = False

    # ── 公開状態 ───────────────────
    @property
    def primitives(self) -> tuple[P, ...]:
        return tuple(self._primitives)

    @property
    def functions(self) -> tuple[RegisteredFunction, ...]:
        """直近に成功したコンパイルの登録関数（全種別）。"""
        return self._functions

    @property
    def palette(self) -> tuple[RGBA, ...]:
        return self._palette

    @property
    def last_report(self) -> CompileReport | None:
        return self._last_report

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    def color_for(self, index: int) -> RGBA:
        return self._palette[index % len(self._palette)]

    # ── コンパイル ───────────────────
    def compile(self) -> CompileReport:
        """エディタの現在テキストをコンパイルしてシーンを差し替える。例外は送出しない。"""
        report = self._compile()
        self._last_report = report
        return report

    def _compile(self) -> CompileReport:
        if self._disposed:
            return CompileReport(CompileStatus.EMPTY, "composer disposed")
        text = self._editor.get_current_text()
        if not text or not text.strip():
            logger.debug("compile skipped: empty source")
            return CompileReport(CompileStatus.EMPTY)
        try:
            result = self._sandbox.load(text)
        except CompileError as e:
            logger.warning("compile failed: %s", e)
            return CompileReport(CompileStatus.COMPILE_ERROR, str(e), error=e)
        except RegistrationError as e:
            logger.warning("program raised during registration: %s", e)
            return CompileReport(CompileStatus.REGISTRATION_ERROR, str(e), error=e)

        new, skipped = self._build(result.functions)
        for prim in new:
            prim.prime()
        rejected = self._rejection(new)
        if rejected is not None:
            for prim in new:
                prim.dispose()
            error = RegistrationError(rejected)
            logger.warning("new program rejected, keeping previous scene: %s", rejected)
            return CompileReport(
                CompileStatus.REGISTRATION_ERROR,
                rejected,
                skipped=skipped,
                warnings=result.warnings,
                error=error,
            )

        old = self._primitives
        self._primitives = []
        for prim in old:
            prim.dispose()

        self._functions = result.functions
        self._primitives = new
        for prim in new:
            prim.start()
        logger.info(
            "compiled: %d primitive(s), %d skipped, %d warning(s)",
            len(new),
            skipped,
            len(result.warnings),
        )
        return CompileReport(
            CompileStatus.OK, started=len(new), skipped=skipped, warnings=result.warnings
        )

    def _build(self, functions: Sequence[RegisteredFunction]) -> tuple[list[P], int]:
        raise NotImplementedError

    def _rejection(self, primed: Sequence[P]) -> str | None:
        """初回ジオメトリ確定後の新プリミティブを見て、差し替えを拒否する理由を返す（既定は受理）。"""
        return None

    # ── 自動コンパイル ───────────────────
    def schedule_autocompile(self, delay: float | None = None) -> None:
        """`delay` 秒後（既定 `app.autocompile_delay`）に 1 回だけ `compile()` する。"""
        if self._autocompile_pending:
            self._scheduler.cancel(self._on_autocompile)
        self._autocompile_pending = True
        self._scheduler.schedule(
            self._on_autocompile, self._autocompile_delay if delay is None else delay
        )

    def _on_autocompile(self, dt: float) -> None:
        self._autocompile_pending = False
        self.compile()

    # ── 破棄 ───────────────────
    def dispose(self) -> None:
        """全プリミティブの予約 tick と保留中の自動コンパイルを取り消す。"""
        if self._autocompile_pending:
            self._scheduler.cancel(self._on_autocompile)
            self._autocompile_pending = False
        for prim in self._primitives:
            prim.dispose()
        self._primitives = []
        self._disposed = True


class SceneComposer(_ComposerBase[SurfacePrimitive]):
    """3D ビューア用。SURFACE 関数ごとに `SurfacePrimitive` を持ち、`RenderItem` を出力する。"""

    def __init__(
        self,
        editor: EditorSource,
        *,
        scheduler: TickScheduler,
        settings: RenderSettings | None = None,
        palette: Sequence[Any] | None = None,
        sandbox: FunctionSandbox | None = None,
        autocompile_delay: float = DEFAULT_AUTOCOMPILE_DELAY,
    ) -> None:
        super().__init__(
            editor,
            scheduler=scheduler,
            palette=palette,
            sandbox=sandbox,
            autocompile_delay=autocompile_delay,
        )
        self._settings = settings if settings is not None else RenderSettings()

    @classmethod
    def from_config(
        cls,
        editor: EditorSource,
        cfg: Mapping[str, Any] | None,
        *,
        scheduler: TickScheduler,
    ) -> "SceneComposer":
        return cls(
            editor,
            scheduler=scheduler,
            settings=RenderSettings.from_config(cfg),
            palette=palette_from_config(cfg),
            sandbox=FunctionSandbox.from_config(cfg),
            autocompile_delay=config_float(
                config_section(cfg, "app"), "autocompile_delay", DEFAULT_AUTOCOMPILE_DELAY
            ),
        )

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    def _build(
        self, functions: Sequence[RegisteredFunction]
    ) -> tuple[list[SurfacePrimitive], int]:
        prims: list[SurfacePrimitive] = []
        skipped = 0
        for fn in functions:
            if fn.kind is not FunctionKind.SURFACE:
                skipped += 1
                continue
            prims.append(
                SurfacePrimitive(fn, self._scheduler, resolution=self._settings.resolution)
            )
        return prims, skipped

    def _rejection(self, primed: Sequence[SurfacePrimitive]) -> str | None:
        # 1 つでも描ける曲面があれば受理する
        if not primed or any(p.mesh is not None for p in primed):
            return None
        names = ", ".join(p.function.name for p in primed)
        return f"登録された曲面がすべての点で評価に失敗しました: {names}"

    # ── 設定 ───────────────────
    def set_resolution(self, resolution: int) -> int:
        """解像度を丸めて適用し、全プリミティブを現在の `t` で作り直す。適用後の値を返す。"""
        new = self._settings.with_resolution(resolution)
        if new.resolution != self._settings.resolution:
            self._settings = new
            for prim in self._primitives:
                prim.set_resolution(new.resolution)
            logger.debug("resolution -> %d", new.resolution)
        return self._settings.resolution

    def set_wireframe(self, wireframe: bool) -> None:
        self._settings = self._settings.with_wireframe(wireframe)

    def toggle_wireframe(self) -> bool:
        self.set_wireframe(not self._settings.wireframe)
        return self._settings.wireframe

    # ── 出力 ───────────────────
    def render_items(self) -> list[RenderItem]:
        """現在メッシュを持つプリミティブごとに 1 つの `RenderItem`（登録順）。"""
        items: list[RenderItem] = []
        for prim in self._primitives:
            mesh = prim.mesh
            if mesh is None:
                continue
            items.append(
                RenderItem(
                    index=prim.index,
                    color=self.color_for(prim.index),
                    wireframe=self._settings.wireframe,
                    mesh=mesh,
                )
            )
        return items


__all__ = [
    "SceneComposer",
    "CompileReport",
    "CompileStatus",
    "DEFAULT_AUTOCOMPILE_DELAY",
]
