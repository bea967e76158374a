"""
どこで: `src/chainring/core/primitives/triangle.py`。
何を: 「ピストン」三角形（直線の正三角形 / ベジエで膨らませた Wankel 形）のパスとスタイルを生成する。
なぜ: 頂点ごとの放射グラデーションを重ね塗りして立体感を作る描画を、純粋な値の計算として持つため。

描画モード
----------
- 頂点モード（`vertex` が 0/1/2）: その頂点を中心とする楕円グラデーション（color → 透明）で全体を塗る。
  1 つの三角形につき頂点ごとに 3 回呼び、3 方向からの陰影を重ねる。
- 輪郭モード（`vertex` が None）: 上辺にハイライトが乗る白 → color のグラデーションで輪郭線を描く。
"""

from __future__ import annotations

import math

from chainring.core.color import ARGB, WHITE
from chainring.core.geometry import DEGREES_IN_RADIANS, PI, Point2D, point_in_circle
from chainring.core.paint import FILL, JOIN_BEVEL, STROKE, Paint, radial_gradient
from chainring.core.path import Path, PathBuilder
from chainring.core.primitives.chain_ring import pen_width
from chainring.core.scene import DrawItem

VERTEX_COUNT = 3
VERTEX_STEP_DEGREES = 120.0

# Wankel 形の辺の制御点を置く半径（R に対する比）。
WANKEL_CTRL_RATIO = 0.9

# 頂点グラデーションの消え先（透明な青みの黒）。
VERTEX_FADE: ARGB = 0x000000FF

HIGHLIGHT_RATIO = 0.5

# 頂点グラデーションの (rx, ry)（side に対する比）。キーは (頂点番号, wankel)。
_VERTEX_GRADIENT_RADII: dict[tuple[int, bool], tuple[float, float]] = {
    (0, True): (0.36, 0.404),
    (0, False): (0.30, 0.60),
    (1, True): (0.404, 0.50),
    (1, False): (0.420, 0.50),
    (2, True): (0.36, 0.404),
    (2, False): (0.30, 0.60),
}


def check_vertex_index(vertex: int | None) -> None:
    """頂点番号が None または 0/1/2 であることを検証する。

    Raises
    ------
    ValueError
        それ以外の値の場合（呼び出し側の契約違反）。
    """
    if vertex is None:
        return
    if isinstance(vertex, bool) or not isinstance(vertex, int) or not 0 <= vertex < VERTEX_COUNT:
        raise ValueError(f"Invalid vertex index {vertex!r} for triangle.")


def side_length(radius: float) -> float:
    """グラデーション半径の基準となる辺長を返す。"""
    delta = VERTEX_STEP_DEGREES * DEGREES_IN_RADIANS
    return float(radius) / math.cos((PI - delta) / 2.0) * 2.0


def vertex_gradient_radii(index: int, side: float, wankel: bool) -> tuple[float, float]:
    """頂点モードのグラデーション半径 `(rx, ry)` を返す。"""
    check_vertex_index(index)
    rx, ry = _VERTEX_GRADIENT_RADII[(int(index), bool(wankel))]
    return rx * float(side), ry * float(side)


def triangle_path(center: Point2D, radius: float, degrees: float, wankel: bool) -> Path:
    """三角形（または Wankel 形）の閉輪郭を返す。

    Parameters
    ----------
    center : Point2D
        外接円の中心。
    radius : float
        外接円の半径 R。
    degrees : float
        頂点 0 の角度 [deg]。
    wankel : bool
        True なら各辺を半径 0.9R に制御点を持つ 3 次ベジエにする。

    Returns
    -------
    Path
        move + 3 セグメント（頂点 1, 2, 0 へ）+ close。
    """
    r = float(radius)
    b = r * WANKEL_CTRL_RATIO
    delta = VERTEX_STEP_DEGREES * DEGREES_IN_RADIANS

    builder = PathBuilder()
    alpha = float(degrees) * DEGREES_IN_RADIANS
    for i in range(VERTEX_COUNT + 1):
        v = point_in_circle(center, r, alpha)
        if i == 0:
            builder.move_to(v)
        elif wankel:
            builder.cubic_to(
                point_in_circle(center, b, alpha - 2.0 * delta / 3.0),
                point_in_circle(center, b, alpha - delta / 3.0),
                v,
            )
        else:
            builder.line_to(v)
        alpha += delta
    builder.close()
    return builder.build()


def triangle_paint(
    center: Point2D,
    radius: float,
    degrees: float,
    vertex: int | None,
    color: ARGB,
    wankel: bool,
    *,
    canvas_width: int | float,
) -> Paint:
    """頂点モード / 輪郭モードの Paint を返す。"""
    check_vertex_index(vertex)
    r = float(radius)

    if vertex is not None:
        a = (float(degrees) + VERTEX_STEP_DEGREES * vertex) * DEGREES_IN_RADIANS
        radii = vertex_gradient_radii(vertex, side_length(r), wankel)
        shader = radial_gradient(point_in_circle(center, r, a), radii, (color, VERTEX_FADE))
        return Paint(style=FILL).with_shader(shader)

    # 上辺に乗るハイライトの反射。
    highlight = radial_gradient(
        (float(center[0]), float(center[1]) - HIGHLIGHT_RATIO * r),
        (HIGHLIGHT_RATIO * r, HIGHLIGHT_RATIO * r),
        (WHITE, color),
    )
    return Paint(
        style=STROKE,
        stroke_width=pen_width(canvas_width),
        stroke_join=JOIN_BEVEL,
        anti_alias=True,
    ).with_shader(highlight)


def triangle(
    center: Point2D,
    radius: float,
    degrees: float,
    vertex: int | None,
    color: ARGB,
    wankel: bool,
    *,
    canvas_width: int | float,
) -> tuple[DrawItem, ...]:
    """三角形 1 回分の DrawItem を返す。

    Raises
    ------
    ValueError
        `vertex` が None/0/1/2 以外の場合。形状は一切生成しない。
    """
    check_vertex_index(vertex)
    paint = triangle_paint(center, radius, degrees, vertex, color, wankel, canvas_width=canvas_width)
    mode = "outline" if vertex is None else f"vertex{vertex}"
    shape = "wankel" if wankel else "straight"
    return (
        DrawItem(
            path=triangle_path(center, radius, degrees, wankel),
            paint=paint,
            label=f"triangle.{shape}.{mode}",
        ),
    )


__all__ = [
    "VERTEX_FADE",
    "check_vertex_index",
    "side_length",
    "triangle",
    "triangle_paint",
    "triangle_path",
    "vertex_gradient_radii",
]
