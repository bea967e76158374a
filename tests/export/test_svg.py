"""SVG export（`chainring.export.svg`）のテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from chainring.core.color import BLACK, WHITE
from chainring.core.paint import STROKE, Paint
from chainring.core.path import PathBuilder
from chainring.export.svg import SvgCanvas, _fmt, export_svg, path_to_d

_NS = {"svg": "http://www.w3.org/2000/svg"}


def test_fmt_is_deterministic_and_drops_negative_zero() -> None:
    assert _fmt(1.23456) == "1.235"
    assert _fmt(-0.0001) == "0.000"
    assert _fmt(2.0, decimals=1) == "2.0"


def test_path_to_d_emits_each_verb() -> None:
    b = PathBuilder()
    b.move_to((0.0, 0.0))
    b.line_to((1.0, 0.0))
    b.cubic_to((1.0, 1.0), (0.5, 1.5), (0.0, 1.0))
    b.close()

    assert path_to_d(b.build()) == (
        "M 0.000 0.000 L 1.000 0.000 C 1.000 1.000 0.500 1.500 0.000 1.000 Z"
    )


def test_svg_canvas_writes_transform_and_stroke_attributes() -> None:
    b = PathBuilder()
    b.add_circle((0.0, 0.0), 5.0)
    canvas = SvgCanvas(20, 20)
    canvas.clear(WHITE)
    canvas.save()
    canvas.translate(10.0, 10.0)
    canvas.draw_path(b.build(), Paint(style=STROKE, stroke_width=2.0, color=BLACK))
    canvas.restore()
    text = canvas.to_svg()

    assert 'transform="matrix(1.000000 0.000000 0.000000 1.000000 10.000 10.000)"' in text
    assert 'stroke="#000000"' in text
    assert 'stroke-width="2.000"' in text
    assert 'fill="none"' in text
    assert "<rect" in text


def test_export_svg_writes_one_gradient_per_shaded_draw(tmp_path: Path) -> None:
    out = export_svg(0, tmp_path / "nested" / "frame.svg", canvas_size=(800, 800), fps=20, bpm=60)

    assert out.exists()
    root = ET.parse(out).getroot()
    assert root.get("viewBox") == "0 0 800 800"

    paths = root.findall("svg:path", _NS)
    gradients = root.findall("svg:defs/svg:radialGradient", _NS)
    # リング 3 + 三角形 8。単色はリングの線だけ。
    assert len(paths) == 11
    assert len(gradients) == 10
    for g in gradients:
        assert g.get("gradientUnits") == "userSpaceOnUse"
        assert g.get("spreadMethod") == "pad"
        assert len(g.findall("svg:stop", _NS)) == 2

    fills = [p for p in paths if p.get("fill") != "none"]
    assert fills
    assert all(p.get("fill-rule") == "nonzero" for p in fills)
    assert any(p.get("stroke-linejoin") == "bevel" for p in paths)


def test_export_svg_rejects_bad_canvas(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_svg(0, tmp_path / "x.svg", canvas_size=(0, 10), fps=20, bpm=60)
