"""Paint / RadialGradient / Affine と `radial_gradient()` のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from chainring.core.color import BLACK, BLUE, RED, TRANSPARENT
from chainring.core.paint import STROKE, Affine, Paint, RadialGradient, radial_gradient


def test_radial_gradient_with_equal_radii_is_circular() -> None:
    g = radial_gradient((10.0, 20.0), (5.0, 5.0), (RED, BLUE))

    assert g.radius == 5.0
    assert g.center == (0.0, 0.0)
    assert g.matrix.a == 1.0
    assert g.matrix.d == 1.0
    assert (g.matrix.e, g.matrix.f) == (10.0, 20.0)


def test_radial_gradient_with_unequal_radii_scales_y_by_ratio() -> None:
    rx, ry = 36.0, 40.4
    g = radial_gradient((0.0, 0.0), (rx, ry), (RED, TRANSPARENT))

    assert g.matrix.a == 1.0
    assert g.matrix.d == ry / rx
    assert g.radius == rx


def test_radial_gradient_rejects_non_positive_rx() -> None:
    with pytest.raises(ValueError):
        radial_gradient((0.0, 0.0), (0.0, 3.0), (RED, BLUE))


def test_gradient_sample_clamps_outside_unit_range() -> None:
    g = RadialGradient(center=(0.0, 0.0), radius=1.0, colors=(RED, BLUE), stops=(0.8, 1.0))
    rgba = g.sample(np.asarray([0.0, 0.5, 0.9, 1.0, 3.0]))

    np.testing.assert_allclose(rgba[0], (1.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(rgba[1], (1.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(rgba[2], (0.5, 0.0, 0.5, 1.0))
    np.testing.assert_allclose(rgba[4], (0.0, 0.0, 1.0, 1.0))


def test_gradient_rejects_mismatched_stops() -> None:
    with pytest.raises(ValueError):
        RadialGradient(center=(0.0, 0.0), radius=1.0, colors=(RED, BLUE), stops=(0.0,))


def test_paint_requires_exactly_one_fill_source() -> None:
    g = radial_gradient((0.0, 0.0), (1.0, 1.0), (RED, BLUE))

    with pytest.raises(ValueError):
        Paint(color=None, shader=None)
    with pytest.raises(ValueError):
        Paint(color=BLACK, shader=g)


def test_paint_with_shader_replaces_color() -> None:
    g = radial_gradient((0.0, 0.0), (1.0, 1.0), (RED, BLUE))
    base = Paint(style=STROKE, stroke_width=2.0, anti_alias=True, color=RED)
    shaded = base.with_shader(g)

    assert shaded.color is None
    assert shaded.shader is g
    assert (shaded.style, shaded.stroke_width, shaded.anti_alias) == (STROKE, 2.0, True)
    # 元の Paint は変わらない。
    assert base.color == RED
    assert base.with_shader(g).with_color(BLUE).shader is None


def test_affine_then_applies_left_first() -> None:
    m = Affine.scale(2.0, 3.0).then(Affine.translate(1.0, -1.0))

    assert m.apply_point((1.0, 1.0)) == pytest.approx((3.0, 2.0))


def test_affine_rotate_and_inverse() -> None:
    m = Affine.rotate(90.0).then(Affine.translate(5.0, 0.0))

    assert m.apply_point((1.0, 0.0)) == pytest.approx((5.0, 1.0))
    assert m.inverse().apply_point((5.0, 1.0)) == pytest.approx((1.0, 0.0))
    assert m.mean_scale() == pytest.approx(1.0)
