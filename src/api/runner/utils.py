"""
どこで: `api.runner.utils`（純粋関数/小ヘルパ）。
何を: 構成からのウィンドウサイズ/背景色/FPS/ログレベル解決、エディタ入力の選択、ステータス表示の Tickable。
なぜ: `api.viewer` / `api.plotter` を薄く保ち、ヘッドレスでテストできる部分を切り出すため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from common import settings as _settings
from common.logging import setup_default_logging
from common.types import RGBA
from engine.scene.editor import EditorSource, FileEditorSource, TextEditorSource
from util.color import normalize_color
from util.utils import config_float, config_section

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = (1280, 720)
DEFAULT_BACKGROUND: RGBA = (0.93, 0.93, 0.93, 1.0)


def resolve_window_size(
    requested: tuple[int, int] | None, cfg: Mapping[str, Any] | None
) -> tuple[int, int]:
    """ウィンドウサイズ（px）を解決する。明示指定 > `app.window_size` > 既定。"""
    src: Any = requested
    if src is None:
        src = config_section(cfg, "app").get("window_size", DEFAULT_WINDOW_SIZE)
    try:
        w, h = int(src[0]), int(src[1])
    except (TypeError, ValueError, IndexError):
        logger.warning("invalid window_size %r, using default", src)
        return DEFAULT_WINDOW_SIZE
    if w <= 0 or h <= 0:
        raise ValueError(f"window_size must be positive, got: {(w, h)}")
    return w, h


def resolve_background(requested: Any, cfg: Mapping[str, Any] | None) -> RGBA:
    """背景色を RGBA(0–1) で返す。明示指定 > `app.background` > 既定のライトグレー。"""
    if requested is not None:
        return normalize_color(requested)
    raw = config_section(cfg, "app").get("background")
    if raw is None:
        return DEFAULT_BACKGROUND
    try:
        return normalize_color(raw)
    except ValueError as e:
        logger.warning("invalid app.background %r: %s", raw, e)
        return DEFAULT_BACKGROUND


def resolve_fps(requested: float | None, cfg: Mapping[str, Any] | None, *, default: float = 60.0) -> float:
    """フレームレートを解決して正の値で返す。"""
    if requested is not None:
        try:
            v = float(requested)
        except (TypeError, ValueError):
            return default
        return v if v > 0 else default
    v = config_float(config_section(cfg, "clock"), "fps", default)
    return v if v > 0 else default


def configure_logging(cfg: Mapping[str, Any] | None) -> None:
    """`SFP_LOG_LEVEL` > `logging.level` > INFO でロギングを初期化する。"""
    level = _settings.get().LOG_LEVEL or config_section(cfg, "logging").get("level") or "INFO"
    setup_default_logging(level)


def select_editor(source: str | None, path: str | Path | None, default_source: str) -> EditorSource:
    """エディタ入力を選ぶ。`path` はファイル（都度再読込）、`source` はメモリ上の文字列。"""
    if source is not None and path is not None:
        raise ValueError("source と path は同時に指定できません")
    if path is not None:
        return FileEditorSource(path)
    return TextEditorSource(source if source is not None else default_source)


class StatusTicker:
    """直近のコンパイル結果などをウィンドウタイトルへ反映する Tickable。

    `text()` の値が変わったときだけ `sink(text)` を呼ぶ。
    """

    def __init__(self, text: Callable[[], str], sink: Callable[[str], None]):
        self._text = text
        self._sink = sink
        self._last: str | None = None

    def tick(self, dt: float) -> None:
        current = self._text()
        if current != self._last:
            self._last = current
            self._sink(current)


__all__ = [
    "resolve_window_size",
    "resolve_background",
    "resolve_fps",
    "configure_logging",
    "select_editor",
    "StatusTicker",
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_BACKGROUND",
]
