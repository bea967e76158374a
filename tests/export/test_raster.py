"""ソフトウェアラスタライザ（`chainring.export.raster.RasterCanvas`）のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from chainring.core.color import BLACK, BLUE, RED, WHITE
from chainring.core.frame import render_frame
from chainring.core.paint import JOIN_BEVEL, JOIN_MITER, JOIN_ROUND, STROKE, Paint, RadialGradient
from chainring.core.path import Path, PathBuilder
from chainring.export.raster import RasterCanvas


def _rect(b: PathBuilder, x0: float, y0: float, x1: float, y1: float, *, reverse: bool = False) -> None:
    """矩形の閉輪郭を追加する（reverse なら逆回り）。"""
    corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    if reverse:
        corners.reverse()
    b.move_to(corners[0])
    for p in corners[1:]:
        b.line_to(p)
    b.close()


def _square(x0: float, y0: float, x1: float, y1: float) -> Path:
    b = PathBuilder()
    _rect(b, x0, y0, x1, y1)
    return b.build()


def test_fill_colors_inside_and_keeps_background_outside() -> None:
    canvas = RasterCanvas(40, 40)
    canvas.clear(WHITE)
    canvas.draw_path(_square(10.0, 10.0, 30.0, 30.0), Paint(color=BLACK))
    img = canvas.to_rgba8()

    assert img.shape == (40, 40, 4)
    assert img.dtype == np.uint8
    assert img[20, 20].tolist() == [0, 0, 0, 255]
    assert img[5, 5].tolist() == [255, 255, 255, 255]
    assert img[35, 20].tolist() == [255, 255, 255, 255]


def test_fill_uses_nonzero_winding() -> None:
    opposite = PathBuilder()
    _rect(opposite, 0.0, 0.0, 40.0, 40.0)
    _rect(opposite, 10.0, 10.0, 30.0, 30.0, reverse=True)
    same = PathBuilder()
    _rect(same, 0.0, 0.0, 40.0, 40.0)
    _rect(same, 10.0, 10.0, 30.0, 30.0)

    hole = RasterCanvas(40, 40)
    hole.clear(WHITE)
    hole.draw_path(opposite.build(), Paint(color=BLACK))
    filled = RasterCanvas(40, 40)
    filled.clear(WHITE)
    filled.draw_path(same.build(), Paint(color=BLACK))

    # 逆回りの内輪郭は穴として抜ける。
    assert hole.to_rgba8()[20, 20].tolist() == [255, 255, 255, 255]
    assert hole.to_rgba8()[5, 5].tolist() == [0, 0, 0, 255]
    # 同じ向きなら巻き数 2 で塗られる（偶奇規則ではない）。
    assert filled.to_rgba8()[20, 20].tolist() == [0, 0, 0, 255]


def test_translate_and_rotate_move_the_shape() -> None:
    canvas = RasterCanvas(40, 40)
    canvas.clear(WHITE)
    canvas.save()
    canvas.translate(20.0, 20.0)
    canvas.rotate(90.0)
    # 局所座標の右側 (2..12, -2..2) は回転後に下側へ来る。
    canvas.draw_path(_square(2.0, -2.0, 12.0, 2.0), Paint(color=BLACK))
    canvas.restore()
    img = canvas.to_rgba8()

    assert img[27, 20].tolist() == [0, 0, 0, 255]
    assert img[20, 27].tolist() == [255, 255, 255, 255]


def test_anti_aliased_edges_are_partially_covered() -> None:
    canvas = RasterCanvas(20, 20, supersample=4)
    canvas.clear(WHITE)
    canvas.draw_path(_square(4.5, 4.0, 15.5, 16.0), Paint(color=BLACK, anti_alias=True))
    img = canvas.to_rgba8()

    # 左端の画素（x=4）は半分だけ覆われる。
    assert 100 < int(img[10, 4, 0]) < 160
    assert img[10, 10].tolist() == [0, 0, 0, 255]


def test_stroke_draws_outline_only() -> None:
    canvas = RasterCanvas(40, 40)
    canvas.clear(WHITE)
    canvas.draw_path(
        _square(10.0, 10.0, 30.0, 30.0),
        Paint(style=STROKE, stroke_width=4.0, anti_alias=True, color=BLACK),
    )
    img = canvas.to_rgba8()

    assert img[10, 20].tolist() == [0, 0, 0, 255]
    assert img[20, 10].tolist() == [0, 0, 0, 255]
    assert img[20, 20].tolist() == [255, 255, 255, 255]
    assert img[2, 2].tolist() == [255, 255, 255, 255]


@pytest.mark.parametrize(
    ("join", "corner", "near_corner"),
    [
        (JOIN_MITER, True, True),
        (JOIN_ROUND, False, True),
        (JOIN_BEVEL, False, False),
    ],
)
def test_stroke_join_shapes_outer_corner(join: str, corner: bool, near_corner: bool) -> None:
    canvas = RasterCanvas(40, 40)
    canvas.clear(WHITE)
    # 線幅 6（半幅 3）。角 (30, 30) の外側だけが join で変わる。
    canvas.draw_path(
        _square(10.0, 10.0, 30.0, 30.0),
        Paint(style=STROKE, stroke_width=6.0, stroke_join=join, color=BLACK),
    )
    img = canvas.to_rgba8()
    black = [0, 0, 0, 255]

    # 画素中心 (32.5, 32.5): miter の四角い角にだけ入る。
    assert (img[32, 32].tolist() == black) is corner
    # 画素中心 (32.5, 31.5): 角から 2.9 で丸には入り、bevel の斜辺より外。
    assert (img[31, 32].tolist() == black) is near_corner
    # 画素中心 (30.5, 30.5): どの join でも塗られる。
    assert img[30, 30].tolist() == black
    # 線分本体は半幅 3 の帯。
    assert img[32, 20].tolist() == black
    assert img[20, 33].tolist() == [255, 255, 255, 255]


def test_radial_gradient_fill_interpolates_and_clamps() -> None:
    shader = RadialGradient(center=(20.0, 20.0), radius=20.0, colors=(RED, BLUE))
    canvas = RasterCanvas(40, 40)
    canvas.clear(WHITE)
    canvas.draw_path(_square(0.0, 0.0, 40.0, 40.0), Paint(color=None, shader=shader))
    img = canvas.to_rgba8()

    center = img[20, 20]
    assert center[0] > 230 and center[2] < 25
    # 半径の外は端の色（clamp）
    assert img[0, 0].tolist() == [0, 0, 255, 255]


def test_translucent_source_blends_over_background() -> None:
    canvas = RasterCanvas(10, 10)
    canvas.clear(WHITE)
    canvas.draw_path(_square(0.0, 0.0, 10.0, 10.0), Paint(color=0x80000000))
    px = canvas.to_rgba8()[5, 5]

    assert px[3] == 255
    assert int(px[0]) == pytest.approx(127, abs=1)


def test_shapes_outside_canvas_are_ignored() -> None:
    canvas = RasterCanvas(10, 10)
    canvas.clear(WHITE)
    canvas.draw_path(_square(50.0, 50.0, 60.0, 60.0), Paint(color=BLACK))

    assert np.all(canvas.to_rgba8() == 255)


def test_render_frame_produces_opaque_image() -> None:
    canvas = RasterCanvas(96, 96, supersample=2)
    canvas.clear(WHITE)
    remaining = render_frame(0, 20, 60, canvas)
    img = canvas.to_rgba8()

    assert remaining == 599
    assert np.all(img[..., 3] == 255)
    # リングの歯（上端付近）は背景と異なる色になる。
    assert img[6, 48].tolist() != [255, 255, 255, 255]
    assert canvas.to_rgba8()[0, 0].tolist() == [255, 255, 255, 255]


def test_raster_canvas_validation() -> None:
    with pytest.raises(ValueError):
        RasterCanvas(0, 10)
    with pytest.raises(ValueError):
        RasterCanvas(10, 10, supersample=0)
