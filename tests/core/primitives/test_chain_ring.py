"""チェーンリング primitive（`chainring.core.primitives.chain_ring`）のテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from chainring.core.paint import FILL, STROKE
from chainring.core.path import CLOSE, CUBIC, LINE, MOVE
from chainring.core.primitives.chain_ring import (
    OUTLINE_BROWN,
    RUST,
    STEEL,
    chain_ring,
    chain_ring_gradient,
    chain_ring_path,
    pen_width,
)


def test_chain_ring_path_has_outer_inner_and_five_bolts() -> None:
    contours = chain_ring_path(400.0).contours()

    assert len(contours) == 7
    for contour in contours:
        assert contour.verbs[0] == MOVE
        assert contour.verbs[-1] == CLOSE


def test_outer_contour_repeats_tooth_unit_per_tooth() -> None:
    outer = chain_ring_path(400.0, 32).contours()[0]
    body = outer.verbs[1:-1]

    assert outer.verbs.count(CUBIC) == 32
    # 歯ごとに「cubic → line（隙間）」、歯と歯の間は line で繋ぐ。
    assert body[:2] == (CUBIC, LINE)
    assert body[2:5] == (LINE, CUBIC, LINE)
    assert body.count(LINE) == 32 + 31


def test_teeth_count_controls_outer_contour_only() -> None:
    a = chain_ring_path(100.0, 12).contours()
    b = chain_ring_path(100.0, 32).contours()

    assert a[0].verbs.count(CUBIC) == 12
    assert [c.verbs for c in a[1:]] == [c.verbs for c in b[1:]]


def test_inner_contour_has_five_lobes() -> None:
    inner = chain_ring_path(400.0).contours()[1]

    assert inner.verbs.count(CUBIC) == 10
    assert inner.verbs.count(LINE) == 4


def test_bolts_are_closed_four_cubic_contours() -> None:
    bolts = chain_ring_path(400.0).contours()[2:]

    assert len(bolts) == 5
    for bolt in bolts:
        assert bolt.verbs == (MOVE, CUBIC, CUBIC, CUBIC, CUBIC, CLOSE)
        # squircle は始点へ戻る。
        np.testing.assert_allclose(bolt.points[0], bolt.points[-1], atol=1e-9)


def test_tooth_tips_reach_beyond_outer_radius() -> None:
    r = 400.0
    outer = chain_ring_path(r).contours()[0]
    radii = np.hypot(outer.points[:, 0], outer.points[:, 1])

    assert radii.max() == pytest.approx(r * 1.035)
    # 歯底は R - 0.8*(R - 0.85R)
    assert radii.min() == pytest.approx(r - 0.8 * (r - 0.85 * r))


def test_chain_ring_path_rejects_zero_teeth() -> None:
    with pytest.raises(ValueError):
        chain_ring_path(100.0, 0)


def test_chain_ring_items_body_outline_ridge() -> None:
    body, outline, ridge = chain_ring((400.0, 400.0), 400, 370.0, canvas_width=800)

    assert body.paint.style == FILL
    assert body.paint.anti_alias
    assert body.paint.shader is not None
    assert body.paint.shader.colors == (STEEL, RUST)
    assert body.paint.shader.stops == (0.8, 1.0)
    assert body.rotate == pytest.approx(10.0)
    assert body.translate == (400.0, 400.0)

    assert outline.paint.style == STROKE
    assert outline.paint.color == OUTLINE_BROWN
    assert outline.paint.stroke_width == pytest.approx(800 / 360)
    assert outline.path is body.path

    # リッジ円は回転しない。
    assert ridge.rotate == 0.0
    assert ridge.paint.style == STROKE
    assert ridge.paint.color is None
    assert ridge.paint.shader is not None
    assert ridge.paint.shader.colors[0] == OUTLINE_BROWN


def test_chain_ring_gradient_center_is_offset_below_origin() -> None:
    g = chain_ring_gradient(400.0)

    assert g.radius == pytest.approx(340.0)
    assert (g.matrix.e, g.matrix.f) == pytest.approx((0.0, 0.04 * 340.0))


def test_pen_width_has_one_pixel_floor() -> None:
    assert pen_width(100) == 1.0
    assert pen_width(720) == pytest.approx(2.0)
    assert not math.isnan(pen_width(0))
