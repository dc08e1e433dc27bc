"""
どこで: `util.color`。
何を: 色指定（Hex 短縮/通常形式, CSS 色名の一部, RGBA 0–1/0–255）を RGBA(0–1) へ正規化する。
なぜ: パレット設定（YAML）・レンダラ・背景色で同一の受理仕様とエラーメッセージを使うため。
"""

from __future__ import annotations

from typing import Sequence

# パレット既定値（orange/red/blue/green/#333）と背景で使う名前のみを扱う
NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "orange": "#ffa500",
    "grey": "#808080",
    "gray": "#808080",
    "yellow": "#ffff00",
    "purple": "#800080",
}


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> tuple[float, float, float, float]:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RGB", "#RGBA", "#RRGGBB", "#RRGGBBAA"（"#" / "0x" は省略可）。大文字/小文字は不問。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) in (3, 4):
        t = "".join(ch * 2 for ch in t)
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RGB, RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def normalize_color(value: object) -> tuple[float, float, float, float]:
    """色を RGBA(0–1) へ正規化する。

    - 受理: CSS 色名（`NAMED_COLORS`）, Hex 文字列, (r,g,b[,a])（0–1 または 0–255）
    - 返値: (r,g,b,a)（0–1）
    """
    if isinstance(value, str):
        named = NAMED_COLORS.get(value.strip().lower())
        return parse_hex_color_str(named if named is not None else value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"unsupported color type: {type(value)!r}")
    seq: Sequence[object] = value
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        comps = [float(c) for c in seq]  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(comps) == 3:
        comps.append(1.0 if all(0.0 <= c <= 1.0 for c in comps) else 255.0)
    if all(0.0 <= c <= 1.0 for c in comps):
        return (comps[0], comps[1], comps[2], comps[3])
    # 0–255 とみなして丸め → 0–1 へスケール
    r, g, b, a = (max(0, min(255, int(round(c)))) / 255.0 for c in comps)
    return (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))


def normalize_palette(values: Sequence[object]) -> tuple[tuple[float, float, float, float], ...]:
    """パレット（色指定の列）を正規化する。空パレットは `ValueError`。"""
    palette = tuple(normalize_color(v) for v in values)
    if not palette:
        raise ValueError("palette must contain at least one color")
    return palette


__all__ = [
    "NAMED_COLORS",
    "parse_hex_color_str",
    "normalize_color",
    "normalize_palette",
]
