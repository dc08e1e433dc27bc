"""
どこで: `engine.scene.settings`。
何を: 描画設定 `RenderSettings`（解像度/ワイヤフレーム）とパレット既定値の解決。
なぜ: 設定 UI からの値を不変オブジェクトとして丸ごと差し替え、範囲外の解像度を入口で丸めるため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping

from common import settings as _settings
from common.types import RGBA
from util.color import normalize_palette
from util.utils import config_int, config_section

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = 15
MIN_RESOLUTION = 1
DEFAULT_PALETTE: tuple[str, ...] = ("orange", "red", "blue", "green", "#333")


def clamp_resolution(value: Any) -> int:
    """解像度を `1..MAX_RESOLUTION`（既定 2000、`SFP_MAX_RESOLUTION`）へ丸める。"""
    try:
        r = int(value)
    except (TypeError, ValueError, OverflowError):
        r = DEFAULT_RESOLUTION
    return max(MIN_RESOLUTION, min(_settings.get().MAX_RESOLUTION, r))


@dataclass(frozen=True, slots=True)
class RenderSettings:
    resolution: int = DEFAULT_RESOLUTION
    wireframe: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "resolution", clamp_resolution(self.resolution))
        object.__setattr__(self, "wireframe", bool(self.wireframe))

    def with_resolution(self, resolution: int) -> "RenderSettings":
        return replace(self, resolution=resolution)

    def with_wireframe(self, wireframe: bool) -> "RenderSettings":
        return replace(self, wireframe=wireframe)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None) -> "RenderSettings":
        section = config_section(cfg, "render")
        return cls(
            resolution=config_int(section, "resolution", DEFAULT_RESOLUTION),
            wireframe=bool(section.get("wireframe", False)),
        )


def palette_from_config(cfg: Mapping[str, Any] | None) -> tuple[RGBA, ...]:
    """`render.palette` を RGBA 列へ正規化する。不正/欠落時は既定の 5 色。"""
    raw = config_section(cfg, "render").get("palette")
    if isinstance(raw, (list, tuple)) and raw:
        try:
            return normalize_palette(raw)
        except ValueError as e:
            logger.warning("invalid render.palette, using default: %s", e)
    return normalize_palette(DEFAULT_PALETTE)


__all__ = [
    "RenderSettings",
    "clamp_resolution",
    "palette_from_config",
    "DEFAULT_PALETTE",
    "DEFAULT_RESOLUTION",
]
