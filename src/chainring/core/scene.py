# どこで: `src/chainring/core/scene.py`。
# 何を: 1 回の描画（Path + Paint + 局所変換）を表す `DrawItem` と、その列を Canvas に流す `replay()`。
# なぜ: 形状/陰影の計算（純粋）と Canvas への発行（状態を持つ）を分け、前者を単体テストできるようにするため。

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from chainring.core.canvas import Canvas
from chainring.core.geometry import Point2D
from chainring.core.paint import Paint
from chainring.core.path import Path


@dataclass(frozen=True, slots=True)
class DrawItem:
    """描画 1 回分の不変レコード。

    Parameters
    ----------
    path : Path
        描画する閉輪郭群（局所座標）。
    paint : Paint
        塗り/線スタイル。
    translate : Point2D | None
        局所原点の平行移動。None なら移動しない。
    rotate : float
        平行移動の後に掛ける回転 [deg]。0 なら回転しない。
    label : str
        診断用の名前（描画には使わない）。
    """

    path: Path
    paint: Paint
    translate: Point2D | None = None
    rotate: float = 0.0
    label: str = ""


def replay(items: Iterable[DrawItem], canvas: Canvas) -> int:
    """DrawItem 列を順に Canvas へ発行し、発行した draw 数を返す。

    Notes
    -----
    各 item は save → (translate) → (rotate) → draw_path → restore で独立に描く。
    後の item ほど上に重なる（深度バッファは無い）。
    """

    n = 0
    for item in items:
        canvas.save()
        try:
            if item.translate is not None:
                canvas.translate(float(item.translate[0]), float(item.translate[1]))
            if item.rotate != 0.0:
                canvas.rotate(float(item.rotate))
            canvas.draw_path(item.path, item.paint)
        finally:
            canvas.restore()
        n += 1
    return n


__all__ = ["DrawItem", "replay"]
