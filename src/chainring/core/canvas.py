"""
どこで: `src/chainring/core/canvas.py`。
何を: 描画先 Canvas のプロトコル、変換スタック、描画呼び出しを記録する `RecordingCanvas` を定義する。
なぜ: フレーム合成（core）をラスタ/SVG などの具体的な描画先から切り離し、
     実ラスタライザ無しで描画順・色・パスを検査できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from chainring.core.color import ARGB
from chainring.core.paint import Affine, Paint
from chainring.core.path import Path


class Canvas(Protocol):
    """core が要求する描画先の最小インターフェース。

    Notes
    -----
    - `translate()` / `rotate()` は現在の変換に「後ろから」掛ける（局所座標系を動かす）。
    - `draw_path()` は非ゼロ巻き数規則で塗る（Paint.style が fill の場合）。
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def clear(self, color: ARGB) -> None: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, dx: float, dy: float) -> None: ...

    def rotate(self, degrees: float) -> None: ...

    def draw_path(self, path: Path, paint: Paint) -> None: ...


class TransformStack:
    """save/restore 可能な現在変換（CTM）の保持。"""

    def __init__(self) -> None:
        self._current = Affine.identity()
        self._saved: list[Affine] = []

    @property
    def current(self) -> Affine:
        return self._current

    @property
    def depth(self) -> int:
        return len(self._saved)

    def save(self) -> None:
        self._saved.append(self._current)

    def restore(self) -> None:
        if not self._saved:
            raise RuntimeError("restore が save より多く呼ばれた")
        self._current = self._saved.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._current = Affine.translate(dx, dy).then(self._current)

    def rotate(self, degrees: float) -> None:
        self._current = Affine.rotate(degrees).then(self._current)


def check_canvas_size(width: int, height: int) -> tuple[int, int]:
    """canvas 寸法を検証して `(width, height)` を返す。"""

    w = int(width)
    h = int(height)
    if w <= 0 or h <= 0:
        raise ValueError(f"canvas 寸法は正である必要がある: got=({width!r}, {height!r})")
    return w, h


@dataclass(frozen=True, slots=True)
class DrawCall:
    """`RecordingCanvas` が記録した 1 回の draw_path。"""

    path: Path
    paint: Paint
    transform: Affine


class RecordingCanvas:
    """描画呼び出しを記録するだけの Canvas。

    `calls` には draw_path 時点の変換と Paint/Path が順に積まれる。
    `ops` には save/restore/translate/rotate/draw_path/clear の操作名が順に積まれる。
    """

    def __init__(self, width: int, height: int) -> None:
        self._width, self._height = check_canvas_size(width, height)
        self._stack = TransformStack()
        self.calls: list[DrawCall] = []
        self.ops: list[str] = []
        self.cleared_with: ARGB | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def save_depth(self) -> int:
        return self._stack.depth

    def clear(self, color: ARGB) -> None:
        self.ops.append("clear")
        self.cleared_with = int(color)
        self.calls.clear()

    def save(self) -> None:
        self.ops.append("save")
        self._stack.save()

    def restore(self) -> None:
        self.ops.append("restore")
        self._stack.restore()

    def translate(self, dx: float, dy: float) -> None:
        self.ops.append("translate")
        self._stack.translate(dx, dy)

    def rotate(self, degrees: float) -> None:
        self.ops.append("rotate")
        self._stack.rotate(degrees)

    def draw_path(self, path: Path, paint: Paint) -> None:
        self.ops.append("draw_path")
        self.calls.append(DrawCall(path=path, paint=paint, transform=self._stack.current))


__all__ = [
    "Canvas",
    "DrawCall",
    "RecordingCanvas",
    "TransformStack",
    "check_canvas_size",
]
