# どこで: `src/chainring/core/geometry.py`。
# 何を: 円周上の点配置など、パス生成で使う三角関数ヘルパを提供する。
# なぜ: chain_ring / triangle の両 primitive で同じ座標規約（y 下向き）を共有するため。

from __future__ import annotations

import math

Point2D = tuple[float, float]

PI = math.pi
DEGREES_IN_RADIANS = PI / 180.0


def point_in_circle(center: Point2D, radius: float, radians: float) -> Point2D:
    """中心 `center`・半径 `radius`・角度 `radians` の円周上の点を返す。

    Notes
    -----
    画面座標（左上原点・y 下向き）を前提とし、角度が増えると y は減る。
    ``x = cx + r*cos(θ)``, ``y = cy - r*sin(θ)``。
    """

    cx, cy = center
    return (
        float(cx) + float(radius) * math.cos(radians),
        float(cy) - float(radius) * math.sin(radians),
    )


__all__ = ["DEGREES_IN_RADIANS", "PI", "Point2D", "point_in_circle"]
