"""
どこで: `engine.scene.plot`。
何を: 2D プロット経路のコンポーザ `PlotComposer`（曲線プリミティブ + ViewportTransform）。
なぜ: 表示範囲を各曲線プリミティブへ明示的に渡し、パン/ズームのたびに現在の `t` で作り直すため。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from engine.core.viewport import ScreenRect, ViewBox, ViewportTransform
from engine.render.types import PlotItem
from engine.runtime.primitive import CurvePrimitive
from engine.runtime.scheduler import TickScheduler
from sampling.curve import DEFAULT_MAX_CURVE_SAMPLES, DEFAULT_PARAMETRIC_SAMPLES
from sandbox.compiler import FunctionSandbox
from sandbox.registration import FunctionKind, RegisteredFunction
from util.utils import config_float, config_int, config_section

from .composer import DEFAULT_AUTOCOMPILE_DELAY, _ComposerBase
from .editor import EditorSource
from .settings import palette_from_config

logger = logging.getLogger(__name__)


def viewport_from_config(cfg: Mapping[str, Any] | None) -> ViewportTransform:
    """`viewport` セクション（initial/zoom_step/min_extent）から ViewportTransform を作る。"""
    section = config_section(cfg, "viewport")
    initial = section.get("initial")
    view: ViewBox | None = None
    if initial is not None:
        try:
            view = ViewBox.from_sequence(initial)
        except (TypeError, ValueError) as e:
            logger.warning("invalid viewport.initial %r: %s", initial, e)
    return ViewportTransform(
        view,
        zoom_step=config_float(section, "zoom_step", 0.01),
        min_extent=config_float(section, "min_extent", 1e-6),
    )


class PlotComposer(_ComposerBase[CurvePrimitive]):
    """CURVE / PARAMETRIC_CURVE 関数ごとに `CurvePrimitive` を持つ。"""

    def __init__(
        self,
        editor: EditorSource,
        *,
        scheduler: TickScheduler,
        viewport: ViewportTransform | None = None,
        palette: Sequence[Any] | None = None,
        sandbox: FunctionSandbox | None = None,
        samples: int = DEFAULT_PARAMETRIC_SAMPLES,
        max_samples: int = DEFAULT_MAX_CURVE_SAMPLES,
        autocompile_delay: float = DEFAULT_AUTOCOMPILE_DELAY,
    ) -> None:
        super().__init__(
            editor,
            scheduler=scheduler,
            palette=palette,
            sandbox=sandbox,
            autocompile_delay=autocompile_delay,
        )
        self._viewport = viewport if viewport is not None else ViewportTransform()
        self._samples = int(samples)
        self._max_samples = max(int(max_samples), 1)

    @classmethod
    def from_config(
        cls,
        editor: EditorSource,
        cfg: Mapping[str, Any] | None,
        *,
        scheduler: TickScheduler,
    ) -> "PlotComposer":
        return cls(
            editor,
            scheduler=scheduler,
            viewport=viewport_from_config(cfg),
            palette=palette_from_config(cfg),
            sandbox=FunctionSandbox.from_config(cfg),
            samples=config_int(
                config_section(cfg, "clock"), "parametric_samples", DEFAULT_PARAMETRIC_SAMPLES
            ),
            max_samples=config_int(
                config_section(cfg, "clock"), "curve_max_samples", DEFAULT_MAX_CURVE_SAMPLES
            ),
            autocompile_delay=config_float(
                config_section(cfg, "app"), "autocompile_delay", DEFAULT_AUTOCOMPILE_DELAY
            ),
        )

    @property
    def viewport(self) -> ViewportTransform:
        return self._viewport

    @property
    def view_box(self) -> ViewBox:
        return self._viewport.view_box

    def _build(self, functions: Sequence[RegisteredFunction]) -> tuple[list[CurvePrimitive], int]:
        visible = self._viewport.view_box.visible_range
        prims: list[CurvePrimitive] = []
        skipped = 0
        for fn in functions:
            if fn.kind is FunctionKind.SURFACE:
                skipped += 1
                continue
            prims.append(
                CurvePrimitive(
                    fn,
                    self._scheduler,
                    visible_range=visible,
                    samples=self._samples,
                    max_samples=self._max_samples,
                )
            )
        return prims, skipped

    # ── ビューポート ───────────────────
    def view_changed(self) -> None:
        """現在の表示範囲を全曲線プリミティブへ渡す。"""
        visible = self._viewport.view_box.visible_range
        for prim in self._primitives:
            prim.set_visible_range(visible)

    def resize(self, bounds: ScreenRect) -> None:
        self._viewport.resize(bounds)

    def drag_start(self, px: float, py: float) -> None:
        self._viewport.drag_start(px, py)

    def drag_move(self, px: float, py: float) -> bool:
        changed = self._viewport.drag_move(px, py)
        if changed:
            self.view_changed()
        return changed

    def drag_end(self) -> None:
        self._viewport.drag_end()

    def wheel(self, px: float, py: float, delta: float) -> bool:
        changed = self._viewport.wheel(px, py, delta)
        if changed:
            self.view_changed()
        return changed

    # ── 出力 ───────────────────
    def polylines(self) -> list[PlotItem]:
        """現在 Polyline を持つ曲線ごとに `(index, color, polyline)`。"""
        items: list[PlotItem] = []
        for prim in self._primitives:
            line = prim.polyline
            if line is None:
                continue
            items.append(PlotItem(index=prim.index, color=self.color_for(prim.index), polyline=line))
        return items


__all__ = ["PlotComposer", "viewport_from_config"]
