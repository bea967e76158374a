"""閉輪郭パス（`chainring.core.path`）の組み立て・検証・折れ線化のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from chainring.core.path import CLOSE, CUBIC, LINE, MOVE, Path, PathBuilder


def _triangle() -> Path:
    """直線 3 本の閉じた三角形を返す。"""
    b = PathBuilder()
    b.move_to((0.0, 0.0))
    b.line_to((10.0, 0.0))
    b.line_to((0.0, 10.0))
    b.close()
    return b.build()


def test_builder_records_verbs_and_points() -> None:
    path = _triangle()

    assert path.verbs == (MOVE, LINE, LINE, CLOSE)
    assert path.points.shape == (3, 2)
    assert path.points.dtype == np.float64
    assert not path.points.flags.writeable


def test_builder_rejects_segment_before_move() -> None:
    b = PathBuilder()
    with pytest.raises(ValueError):
        b.line_to((1.0, 1.0))
    with pytest.raises(ValueError):
        b.cubic_to((0.0, 0.0), (1.0, 1.0), (2.0, 2.0))
    with pytest.raises(ValueError):
        b.close()


def test_builder_rejects_unclosed_contour() -> None:
    b = PathBuilder()
    b.move_to((0.0, 0.0))
    b.line_to((1.0, 0.0))

    with pytest.raises(ValueError):
        b.build()
    with pytest.raises(ValueError):
        b.move_to((5.0, 5.0))


def test_path_rejects_point_count_mismatch() -> None:
    with pytest.raises(ValueError):
        Path(verbs=(MOVE, CUBIC, CLOSE), points=np.zeros((2, 2)))
    with pytest.raises(ValueError):
        Path(verbs=("arc",), points=np.zeros((1, 2)))


def test_iter_contours_splits_at_close() -> None:
    b = PathBuilder()
    b.add_circle((0.0, 0.0), 5.0)
    b.move_to((20.0, 0.0))
    b.line_to((30.0, 0.0))
    b.line_to((30.0, 10.0))
    b.close()
    contours = b.build().contours()

    assert len(contours) == 2
    assert contours[0].verbs == (MOVE, CUBIC, CUBIC, CUBIC, CUBIC, CLOSE)
    assert contours[0].points.shape == (13, 2)
    assert contours[1].verbs == (MOVE, LINE, LINE, CLOSE)


def test_flatten_returns_closed_polylines() -> None:
    polylines = _triangle().flatten()

    assert len(polylines) == 1
    poly = polylines[0]
    np.testing.assert_allclose(poly[0], poly[-1])
    assert poly.shape == (4, 2)


def test_flatten_samples_cubic_end_points() -> None:
    b = PathBuilder()
    b.add_circle((3.0, 4.0), 10.0)
    poly = b.build().flatten(cubic_steps=8)[0]

    # 4 本 × 8 分割 + move の 1 点 + 閉じる 1 点
    assert poly.shape == (34, 2)
    radii = np.hypot(poly[:, 0] - 3.0, poly[:, 1] - 4.0)
    np.testing.assert_allclose(radii, 10.0, rtol=1e-3)

