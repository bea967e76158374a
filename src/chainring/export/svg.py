"""
どこで: `src/chainring/export/svg.py`。
何を: 描画呼び出しを SVG 要素として溜める `SvgCanvas` と、1 フレームを SVG 保存する `export_svg()`。
なぜ: ラスタライズ無しで、ベジエと放射グラデーションをそのまま残したベクター出力を得るため。
"""

from __future__ import annotations

from pathlib import Path

from chainring.core.canvas import TransformStack, check_canvas_size
from chainring.core.color import ARGB, WHITE, alpha01, argb_to_hex
from chainring.core.frame import render_frame
from chainring.core.paint import FILL, Affine, Paint, RadialGradient
from chainring.core.path import CLOSE, CUBIC, LINE, MOVE
from chainring.core.path import Path as ShapePath

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _matrix_attr(m: Affine) -> str:
    linear = " ".join(_fmt(v, decimals=6) for v in (m.a, m.b, m.c, m.d))
    return f"matrix({linear} {_fmt(m.e)} {_fmt(m.f)})"


def path_to_d(path: ShapePath) -> str:
    """Path を SVG path の d 属性へ変換して返す。"""
    parts: list[str] = []
    cursor = 0
    for verb in path.verbs:
        if verb == MOVE:
            x, y = path.points[cursor]
            parts.append(f"M {_fmt(x)} {_fmt(y)}")
            cursor += 1
        elif verb == LINE:
            x, y = path.points[cursor]
            parts.append(f"L {_fmt(x)} {_fmt(y)}")
            cursor += 1
        elif verb == CUBIC:
            c1, c2, p = path.points[cursor : cursor + 3]
            parts.append(
                f"C {_fmt(c1[0])} {_fmt(c1[1])} {_fmt(c2[0])} {_fmt(c2[1])} {_fmt(p[0])} {_fmt(p[1])}"
            )
            cursor += 3
        elif verb == CLOSE:
            parts.append("Z")
    return " ".join(parts)


def _gradient_element(gradient_id: str, shader: RadialGradient) -> str:
    lines = [
        (
            f'    <radialGradient id="{gradient_id}" gradientUnits="userSpaceOnUse" '
            f'cx="{_fmt(shader.center[0])}" cy="{_fmt(shader.center[1])}" r="{_fmt(shader.radius)}" '
            f'gradientTransform="{_matrix_attr(shader.matrix)}" spreadMethod="pad">'
        )
    ]
    for offset, color in zip(shader.stop_positions(), shader.colors, strict=True):
        lines.append(
            f'      <stop offset="{_fmt(offset)}" stop-color="{argb_to_hex(color)}" '
            f'stop-opacity="{_fmt(alpha01(color))}" />'
        )
    lines.append("    </radialGradient>")
    return "\n".join(lines)


class SvgCanvas:
    """描画呼び出しを SVG 要素へ変換して溜める Canvas。

    Notes
    -----
    - 各 path 要素は描画時点の変換を `transform="matrix(...)"` として持つ。
    - グラデーションは `userSpaceOnUse` なので、その path の局所座標で評価される。
    - `clear()` はそれまでの要素を捨てて背景矩形に置き換える。
    """

    def __init__(self, width: int, height: int) -> None:
        self._width, self._height = check_canvas_size(width, height)
        self._stack = TransformStack()
        self._defs: list[str] = []
        self._body: list[str] = []
        self._n_gradients = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self, color: ARGB) -> None:
        self._defs.clear()
        self._body.clear()
        self._n_gradients = 0
        self._body.append(
            f'  <rect x="0" y="0" width="{self._width}" height="{self._height}" '
            f'fill="{argb_to_hex(color)}" fill-opacity="{_fmt(alpha01(color))}" />'
        )

    def save(self) -> None:
        self._stack.save()

    def restore(self) -> None:
        self._stack.restore()

    def translate(self, dx: float, dy: float) -> None:
        self._stack.translate(dx, dy)

    def rotate(self, degrees: float) -> None:
        self._stack.rotate(degrees)

    def _paint_ref(self, paint: Paint) -> tuple[str, str]:
        """Paint の塗りソースを (paint 属性値, opacity 属性値) で返す。"""
        if paint.shader is None:
            assert paint.color is not None
            return argb_to_hex(paint.color), _fmt(alpha01(paint.color))
        gradient_id = f"g{self._n_gradients}"
        self._n_gradients += 1
        self._defs.append(_gradient_element(gradient_id, paint.shader))
        return f"url(#{gradient_id})", "1"

    def draw_path(self, path: ShapePath, paint: Paint) -> None:
        source, opacity = self._paint_ref(paint)
        attrs = [f'd="{path_to_d(path)}"']
        ctm = self._stack.current
        if not ctm.is_identity():
            attrs.append(f'transform="{_matrix_attr(ctm)}"')
        if paint.style == FILL:
            attrs.append(f'fill="{source}" fill-opacity="{opacity}" fill-rule="nonzero" stroke="none"')
        else:
            attrs.append(f'fill="none" stroke="{source}" stroke-opacity="{opacity}"')
            if float(paint.stroke_width) > 0.0:
                attrs.append(f'stroke-width="{_fmt(paint.stroke_width)}"')
            else:
                attrs.append('stroke-width="1" vector-effect="non-scaling-stroke"')
            attrs.append(f'stroke-linejoin="{paint.stroke_join}"')
        if not paint.anti_alias:
            attrs.append('shape-rendering="crispEdges"')
        self._body.append(f"  <path {' '.join(attrs)} />")

    def to_svg(self) -> str:
        """SVG 文書全体を文字列で返す。"""
        lines: list[str] = []
        lines.append('<?xml version="1.0" encoding="UTF-8"?>')
        lines.append(
            (
                f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {self._width} {self._height}" '
                f'width="{self._width}" height="{self._height}">'
            )
        )
        if self._defs:
            lines.append("  <defs>")
            lines.extend(self._defs)
            lines.append("  </defs>")
        lines.extend(self._body)
        lines.append("</svg>")
        return "\n".join(lines) + "\n"


def export_svg(
    frame: int,
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    fps: float,
    bpm: float,
    background: ARGB = WHITE,
) -> Path:
    """1 フレームを SVG として保存する。

    Parameters
    ----------
    frame : int
        フレーム番号。
    path : str or Path
        出力先パス。
    canvas_size : tuple[int, int]
        キャンバス寸法。
    fps, bpm : float
        回転速度の基準。
    background : ARGB, optional
        背景色。

    Returns
    -------
    Path
        保存先パス。
    """
    _path = Path(path)
    canvas = SvgCanvas(*canvas_size)
    canvas.clear(background)
    render_frame(frame, fps, bpm, canvas)

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(canvas.to_svg())
    return _path


__all__ = ["SvgCanvas", "export_svg", "path_to_d"]
