"""
どこで: `src/chainring/core/color.py`。
何を: 32bit ARGB 整数色の定数と変換ユーティリティを定義する。
なぜ: 描画コード（primitive）とラスタライザ/SVG 出力で同じ色表現を共有するため。
"""

from __future__ import annotations

from typing import Any

ARGB = int
"""`0xAARRGGBB` 形式の 32bit 色。"""

TRANSPARENT: ARGB = 0x00000000
BLACK: ARGB = 0xFF000000
WHITE: ARGB = 0xFFFFFFFF
RED: ARGB = 0xFFFF0000
GREEN: ARGB = 0xFF00FF00
BLUE: ARGB = 0xFF0000FF
YELLOW: ARGB = 0xFFFFFF00
CYAN: ARGB = 0xFF00FFFF
MAGENTA: ARGB = 0xFFFF00FF


def argb(a: int, r: int, g: int, b: int) -> ARGB:
    """0..255 の各成分から ARGB 整数を組み立てて返す。"""

    def _clamp(v: int) -> int:
        iv = int(v)
        return 0 if iv < 0 else 255 if iv > 255 else iv

    return (_clamp(a) << 24) | (_clamp(r) << 16) | (_clamp(g) << 8) | _clamp(b)


def argb_to_rgba255(color: ARGB) -> tuple[int, int, int, int]:
    """ARGB 整数を `(r, g, b, a)`（0..255）に分解して返す。"""

    c = int(color) & 0xFFFFFFFF
    return (c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF, (c >> 24) & 0xFF


def argb_to_rgba01(color: ARGB) -> tuple[float, float, float, float]:
    """ARGB 整数を `(r, g, b, a)`（0..1 float）に変換して返す。"""

    r, g, b, a = argb_to_rgba255(color)
    return r / 255.0, g / 255.0, b / 255.0, a / 255.0


def argb_to_hex(color: ARGB) -> str:
    """ARGB 整数の RGB 部分を `#RRGGBB` に変換して返す（alpha は捨てる）。"""

    r, g, b, _a = argb_to_rgba255(color)
    return f"#{r:02X}{g:02X}{b:02X}"


def alpha01(color: ARGB) -> float:
    """ARGB 整数の alpha を 0..1 float で返す。"""

    return argb_to_rgba255(color)[3] / 255.0


def parse_color(value: Any, *, key: str = "color") -> ARGB:
    """設定ファイル由来の色表現を ARGB 整数へ正規化して返す。

    受け付ける形:

    - `"#RRGGBB"`（不透明）/ `"#AARRGGBB"`
    - `[r, g, b]` / `[r, g, b, a]`（0..1 float）
    - int（ARGB そのもの）

    Raises
    ------
    ValueError
        解釈できない値の場合。
    """

    if isinstance(value, bool):
        raise ValueError(f"{key} は色として解釈できません: got={value!r}")
    if isinstance(value, int):
        return int(value) & 0xFFFFFFFF

    if isinstance(value, str):
        s = value.strip().lstrip("#")
        if len(s) not in (6, 8):
            raise ValueError(f"{key} は #RRGGBB か #AARRGGBB である必要があります: got={value!r}")
        try:
            n = int(s, 16)
        except ValueError as exc:
            raise ValueError(f"{key} は 16 進の色である必要があります: got={value!r}") from exc
        if len(s) == 6:
            n |= 0xFF000000
        return n

    try:
        seq = [float(v) for v in value]
    except Exception as exc:
        raise ValueError(f"{key} は色として解釈できません: got={value!r}") from exc
    if len(seq) not in (3, 4):
        raise ValueError(f"{key} は [r, g, b] か [r, g, b, a] である必要があります: got={value!r}")
    if len(seq) == 3:
        seq.append(1.0)

    def _to255(v: float) -> int:
        fv = 0.0 if v < 0.0 else 1.0 if v > 1.0 else v
        return int(round(fv * 255.0))

    r, g, b, a = (_to255(v) for v in seq)
    return argb(a, r, g, b)


__all__ = [
    "ARGB",
    "BLACK",
    "BLUE",
    "CYAN",
    "GREEN",
    "MAGENTA",
    "RED",
    "TRANSPARENT",
    "WHITE",
    "YELLOW",
    "alpha01",
    "argb",
    "argb_to_hex",
    "argb_to_rgba01",
    "argb_to_rgba255",
    "parse_color",
]
