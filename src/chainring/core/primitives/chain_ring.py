"""
どこで: `src/chainring/core/primitives/chain_ring.py`。
何を: 自転車のチェーンリング（外周の歯・内周の 5 葉スカラップ・5 つのボルト穴）の複合パスと、
     その塗り/線/リッジ円の DrawItem 列を生成する。
なぜ: 回転するロゴの主役となる形状を、Canvas に依存しない純粋な計算として持つため。

形状（局所原点まわり、外径 R）
------------------------------
1. 外周: `teeth_count` 個の歯。各セクタで「歯底 → 3 次ベジエで 1.035R まで膨らむ歯先 → 歯底の隙間」を辿る。
2. 内周: 5 葉。外周と逆回り（delta < 0）で、内側へ凹むベジエと 1.05r へ戻るベジエを繋ぐ。
3. ボルト穴: 5 個。4 本の 90° 刻みのベジエで角の丸い四角（squircle）を作る。

塗りは非ゼロ巻き数規則で、内周は逆回りなので穴として抜ける。

Notes
-----
比率の定数はロゴの形そのものを決めるため、値を変えると別の形になる。
"""

from __future__ import annotations

import math

from chainring.core.color import ARGB
from chainring.core.geometry import PI, Point2D, point_in_circle
from chainring.core.paint import FILL, STROKE, Paint, RadialGradient, radial_gradient
from chainring.core.path import Path, PathBuilder
from chainring.core.scene import DrawItem

DEFAULT_TEETH_COUNT = 32

INNER_RADIUS_RATIO = 0.73
RIDGE_RADIUS_RATIO = 0.85
TOOTH_LENGTH_RATIO = 0.8
TOOTH_TIP_RATIO = 1.035
TOOTH_BOTTOM_GAP_RATIO = 0.2

LOBE_COUNT = 5
LOBE_BOTTOM_GAP_RATIO = 0.70
LOBE_DEPTH_RATIO = 1.33
LOBE_RETURN_RATIO = 1.05
LOBE_RETURN_CTRL_1 = 0.67
LOBE_RETURN_CTRL_2 = 0.34

BOLT_RADIUS_RATIO = 0.81
BOLT_OFFSET_RATIO = 0.33
BOLT_CTRL_RATIO = 1.14

RING_GRADIENT_CENTER_RATIO = 0.04
RING_GRADIENT_STOPS = (0.8, 1.0)

# 鋼のグレー → 錆色
STEEL: ARGB = 0xFF555555
RUST: ARGB = 0xFF7B492D
OUTLINE_BROWN: ARGB = 0xFF592E1F
RIDGE_COPPER: ARGB = 0xFF885543

PEN_SIZE = 1.0
PEN_CANVAS_DIVISOR = 360.0


def pen_width(canvas_width: int | float) -> float:
    """canvas 幅に応じた線幅（最低 1px）を返す。"""
    return max(PEN_SIZE, float(canvas_width) / PEN_CANVAS_DIVISOR)


def _add_teeth(b: PathBuilder, c: Point2D, outer_radius: float, teeth_length: float, teeth_count: int) -> None:
    delta = 2.0 * PI / float(teeth_count)
    gap = TOOTH_BOTTOM_GAP_RATIO * delta
    bottom = outer_radius - teeth_length
    tip = outer_radius * TOOTH_TIP_RATIO

    alpha = PI / 2.0
    for i in range(teeth_count):
        a = alpha - delta / 2.0 + gap / 2.0
        b.move_or_line_to(point_in_circle(c, bottom, a), first=(i == 0))
        middle = a + (delta - gap) / 2.0
        a += delta - gap
        b.cubic_to(
            point_in_circle(c, tip, middle),
            point_in_circle(c, tip, middle),
            point_in_circle(c, bottom, a),
        )
        a += gap
        b.line_to(point_in_circle(c, bottom, a))
        alpha += delta
    b.close()


def _lobe_angles() -> tuple[float, float]:
    delta = -2.0 * PI / float(LOBE_COUNT)
    return delta, LOBE_BOTTOM_GAP_RATIO * delta


def _add_lobes(b: PathBuilder, c: Point2D, inner_radius: float, teeth_length: float) -> None:
    delta, gap = _lobe_angles()
    depth = inner_radius - teeth_length * LOBE_DEPTH_RATIO
    ret = inner_radius * LOBE_RETURN_RATIO

    alpha = PI / 2.0
    for i in range(LOBE_COUNT):
        a = alpha - delta / 2.0 + gap / 2.0
        b.move_or_line_to(point_in_circle(c, inner_radius, a), first=(i == 0))
        middle = a + (delta - gap) / 2.0
        a += delta - gap
        b.cubic_to(
            point_in_circle(c, depth, middle),
            point_in_circle(c, depth, middle),
            point_in_circle(c, inner_radius, a),
        )
        a += gap
        b.cubic_to(
            point_in_circle(c, ret, a - gap * LOBE_RETURN_CTRL_1),
            point_in_circle(c, ret, a - gap * LOBE_RETURN_CTRL_2),
            point_in_circle(c, inner_radius, a),
        )
        alpha += delta
    b.close()


def bolt_radius(inner_radius: float) -> float:
    """ボルト穴（squircle）の半径を返す。"""
    delta, gap = _lobe_angles()
    return inner_radius * BOLT_RADIUS_RATIO * (delta - gap) / delta / PI


def _add_bolts(b: PathBuilder, c: Point2D, inner_radius: float) -> None:
    delta, _gap = _lobe_angles()
    r = bolt_radius(inner_radius)
    ctrl = r * BOLT_CTRL_RATIO

    alpha = PI / 2.0
    for _ in range(LOBE_COUNT):
        bc = point_in_circle(c, inner_radius + r * BOLT_OFFSET_RATIO, alpha)
        a = alpha
        b.move_to(point_in_circle(bc, r, a))
        for _side in range(4):
            a -= PI / 2.0
            b.cubic_to(
                point_in_circle(bc, ctrl, a + PI / 3.0),
                point_in_circle(bc, ctrl, a + PI / 6.0),
                point_in_circle(bc, r, a),
            )
        b.close()
        alpha += delta


def chain_ring_path(radius: float, teeth_count: int = DEFAULT_TEETH_COUNT) -> Path:
    """局所原点まわりのチェーンリング複合パスを返す。

    Parameters
    ----------
    radius : float
        外径 R（歯先の基準半径）。
    teeth_count : int, optional
        外周の歯数。内周の葉数・ボルト数（5）とは独立。

    Returns
    -------
    Path
        外周 1 + 内周 1 + ボルト 5 の計 7 つの閉輪郭。
    """
    teeth = int(teeth_count)
    if teeth < 1:
        raise ValueError(f"teeth_count は 1 以上である必要がある: got={teeth_count!r}")

    c = (0.0, 0.0)
    outer_radius = float(radius)
    inner_radius = outer_radius * INNER_RADIUS_RATIO
    ridge_radius = outer_radius * RIDGE_RADIUS_RATIO
    teeth_length = (outer_radius - ridge_radius) * TOOTH_LENGTH_RATIO

    b = PathBuilder()
    _add_teeth(b, c, outer_radius, teeth_length, teeth)
    _add_lobes(b, c, inner_radius, teeth_length)
    _add_bolts(b, c, inner_radius)
    return b.build()


def chain_ring_gradient(radius: float) -> RadialGradient:
    """リング本体の「鋼 → 錆」グラデーションを返す。"""
    ridge_radius = float(radius) * RIDGE_RADIUS_RATIO
    return radial_gradient(
        (0.0, RING_GRADIENT_CENTER_RATIO * ridge_radius),
        (ridge_radius, ridge_radius),
        (STEEL, RUST),
        stops=RING_GRADIENT_STOPS,
    )


def ridge_path(radius: float) -> Path:
    """歯の下のリッジ円（局所原点中心、半径 0.85R）を返す。"""
    b = PathBuilder()
    b.add_circle((0.0, 0.0), float(radius) * RIDGE_RADIUS_RATIO)
    return b.build()


def chain_ring(
    center: Point2D,
    radius: float,
    rotation: float,
    teeth_count: int = DEFAULT_TEETH_COUNT,
    *,
    canvas_width: int | float,
) -> tuple[DrawItem, ...]:
    """チェーンリング 1 つ分の DrawItem 列を返す。

    Parameters
    ----------
    center : Point2D
        canvas 座標でのリング中心。
    radius : float
        外径 R。
    rotation : float
        リング本体の回転 [deg]。リッジ円には掛けない。
    teeth_count : int, optional
        外周の歯数。
    canvas_width : int | float
        線幅の算出に使う canvas 幅 [px]。

    Returns
    -------
    tuple[DrawItem, ...]
        (本体の塗り, 本体の線, リッジ円) の 3 要素。
    """
    path = chain_ring_path(radius, teeth_count)
    ridge_radius = float(radius) * RIDGE_RADIUS_RATIO
    width = pen_width(canvas_width)

    body = Paint(style=FILL, stroke_width=width, anti_alias=True).with_shader(chain_ring_gradient(radius))
    outline = Paint(style=STROKE, stroke_width=width, anti_alias=True, color=OUTLINE_BROWN)
    # リッジは本体の線と同じ線スタイルのまま、上から下への銅色グラデーションに差し替える。
    ridge = outline.with_shader(
        radial_gradient(
            (0.0, -ridge_radius),
            (2.0 * ridge_radius, 2.0 * ridge_radius),
            (OUTLINE_BROWN, RIDGE_COPPER),
        )
    )

    rot = math.fmod(float(rotation), 360.0)
    return (
        DrawItem(path=path, paint=body, translate=center, rotate=rot, label="chain_ring.body"),
        DrawItem(path=path, paint=outline, translate=center, rotate=rot, label="chain_ring.outline"),
        DrawItem(path=ridge_path(radius), paint=ridge, translate=center, label="chain_ring.ridge"),
    )


__all__ = [
    "DEFAULT_TEETH_COUNT",
    "bolt_radius",
    "chain_ring",
    "chain_ring_gradient",
    "chain_ring_path",
    "pen_width",
    "ridge_path",
]
