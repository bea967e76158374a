"""
どこで: `src/chainring/core/paint.py`。
何を: 2D アフィン行列 `Affine`、放射グラデーション `RadialGradient`、描画スタイル `Paint` と
     グラデーション生成関数 `radial_gradient()` を定義する。
なぜ: 塗り/線のスタイルを「描画呼び出しごとに新しく作る不変値」にし、
     共有 Paint を書き換える順序依存をなくすため。

Paint の不変条件
----------------
`Paint` は `color`（単色）と `shader`（グラデーション）のどちらか一方だけを持つ。
両方/どちらも無い Paint は構築時に ValueError になる。
シェーダーを差し替える場合は `with_shader()` / `with_color()` で新しい Paint を作る。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

import numpy as np

from chainring.core.color import ARGB, BLACK, argb_to_rgba01
from chainring.core.geometry import Point2D

FILL = "fill"
STROKE = "stroke"

JOIN_MITER = "miter"
JOIN_ROUND = "round"
JOIN_BEVEL = "bevel"

TILE_CLAMP = "clamp"

_STYLES = (FILL, STROKE)
_JOINS = (JOIN_MITER, JOIN_ROUND, JOIN_BEVEL)


@dataclass(frozen=True, slots=True)
class Affine:
    """2D アフィン変換 `(a, b, c, d, e, f)`。

    ``x' = a*x + c*y + e``, ``y' = b*x + d*y + f``（SVG の `matrix()` と同じ並び）。
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    @classmethod
    def scale(cls, sx: float, sy: float) -> Affine:
        return cls(a=float(sx), d=float(sy))

    @classmethod
    def translate(cls, tx: float, ty: float) -> Affine:
        return cls(e=float(tx), f=float(ty))

    @classmethod
    def rotate(cls, degrees: float) -> Affine:
        """原点まわりに `degrees` 回転する行列を返す（y 下向き座標では時計回り）。"""
        rad = math.radians(float(degrees))
        cos_t = math.cos(rad)
        sin_t = math.sin(rad)
        return cls(a=cos_t, b=sin_t, c=-sin_t, d=cos_t)

    def then(self, other: Affine) -> Affine:
        """`self` を適用した後に `other` を適用する合成変換を返す。"""
        return Affine(
            a=other.a * self.a + other.c * self.b,
            b=other.b * self.a + other.d * self.b,
            c=other.a * self.c + other.c * self.d,
            d=other.b * self.c + other.d * self.d,
            e=other.a * self.e + other.c * self.f + other.e,
            f=other.b * self.e + other.d * self.f + other.f,
        )

    def inverse(self) -> Affine:
        """逆行列を返す。特異行列なら ValueError。"""
        det = self.a * self.d - self.b * self.c
        if det == 0.0:
            raise ValueError("特異なアフィン行列は逆行列を持たない")
        inv_det = 1.0 / det
        a = self.d * inv_det
        b = -self.b * inv_det
        c = -self.c * inv_det
        d = self.a * inv_det
        return Affine(
            a=a,
            b=b,
            c=c,
            d=d,
            e=-(a * self.e + c * self.f),
            f=-(b * self.e + d * self.f),
        )

    def apply(self, points: np.ndarray) -> np.ndarray:
        """shape (N, 2) の点配列を変換して返す。"""
        p = np.asarray(points, dtype=np.float64)
        x = p[..., 0]
        y = p[..., 1]
        return np.stack([self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f], axis=-1)

    def apply_point(self, p: Point2D) -> Point2D:
        x, y = float(p[0]), float(p[1])
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def is_identity(self) -> bool:
        return self == Affine()

    def mean_scale(self) -> float:
        """線幅の換算に使う平均スケール（行列式の平方根）を返す。"""
        return math.sqrt(abs(self.a * self.d - self.b * self.c))


@dataclass(frozen=True, slots=True)
class RadialGradient:
    """放射グラデーション（タイルモードは clamp 固定）。

    Parameters
    ----------
    center : Point2D
        グラデーション局所座標での中心。
    radius : float
        局所座標での半径（> 0）。
    colors : tuple[ARGB, ...]
        色列（2 色以上）。
    stops : tuple[float, ...] | None
        各色の位置（0..1）。None なら等間隔。
    matrix : Affine
        局所座標 → 描画座標の変換。楕円グラデーションはここで表現する。
    tile_mode : str
        半径外の扱い。`"clamp"`（端の色を延長）のみ。
    """

    center: Point2D
    radius: float
    colors: tuple[ARGB, ...]
    stops: tuple[float, ...] | None = None
    matrix: Affine = Affine()
    tile_mode: str = TILE_CLAMP

    def __post_init__(self) -> None:
        if not float(self.radius) > 0.0:
            raise ValueError(f"gradient radius は正である必要がある: got={self.radius!r}")
        if len(self.colors) < 2:
            raise ValueError("gradient には 2 色以上が必要")
        if self.stops is not None and len(self.stops) != len(self.colors):
            raise ValueError("gradient の stops と colors は同じ長さである必要がある")
        if self.tile_mode != TILE_CLAMP:
            raise ValueError(f"未対応の tile_mode: {self.tile_mode!r}")

    def stop_positions(self) -> tuple[float, ...]:
        """各色の位置を返す（stops 未指定なら等間隔）。"""
        if self.stops is not None:
            return tuple(float(s) for s in self.stops)
        n = len(self.colors)
        return tuple(i / (n - 1) for i in range(n))

    def sample(self, t: np.ndarray) -> np.ndarray:
        """正規化距離 `t` における色（unpremultiplied RGBA, 0..1）を返す。

        Notes
        -----
        `t` の範囲外は端の色に clamp される（`np.interp` の端点延長）。
        """
        tt = np.asarray(t, dtype=np.float64)
        xp = np.asarray(self.stop_positions(), dtype=np.float64)
        rgba = np.asarray([argb_to_rgba01(c) for c in self.colors], dtype=np.float64)
        return np.stack([np.interp(tt, xp, rgba[:, ch]) for ch in range(4)], axis=-1)


@dataclass(frozen=True, slots=True)
class Paint:
    """1 回の描画呼び出しのスタイル。

    既定値は「単色の黒で塗る・アンチエイリアス無し・線幅 0」。
    """

    style: str = FILL
    stroke_width: float = 0.0
    stroke_join: str = JOIN_MITER
    anti_alias: bool = False
    color: ARGB | None = BLACK
    shader: RadialGradient | None = None

    def __post_init__(self) -> None:
        if self.style not in _STYLES:
            raise ValueError(f"未知の paint style: {self.style!r}")
        if self.stroke_join not in _JOINS:
            raise ValueError(f"未知の stroke join: {self.stroke_join!r}")
        if float(self.stroke_width) < 0.0:
            raise ValueError("stroke_width は 0 以上である必要がある")
        # 有効な塗りソースは常にちょうど 1 つ。
        if (self.color is None) == (self.shader is None):
            raise ValueError("Paint は color と shader のどちらか一方だけを持つ必要がある")

    def with_shader(self, shader: RadialGradient) -> Paint:
        """shader を差し替え（color を外し）た新しい Paint を返す。"""
        return replace(self, color=None, shader=shader)

    def with_color(self, color: ARGB) -> Paint:
        """単色へ差し替え（shader を外し）た新しい Paint を返す。"""
        return replace(self, color=int(color), shader=None)


def radial_gradient(
    center: Point2D,
    radii: tuple[float, float],
    colors: tuple[ARGB, ARGB],
    *,
    stops: Sequence[float] | None = None,
) -> RadialGradient:
    """中心・半径ペア・2 色から放射グラデーションを作る。

    Parameters
    ----------
    center : Point2D
        グラデーション中心（描画座標）。
    radii : tuple[float, float]
        `(rx, ry)`。rx は正である必要がある。rx != ry なら楕円になる。
    colors : tuple[ARGB, ARGB]
        `(inner, outer)`。
    stops : Sequence[float] | None, optional
        色位置。None なら `[0, 1]`。

    Returns
    -------
    RadialGradient
        局所原点・半径 rx の円グラデーションに、
        ``scale(1, ry/rx)`` → ``translate(center)`` の行列を掛けたもの。
    """
    rx, ry = float(radii[0]), float(radii[1])
    if not rx > 0.0:
        raise ValueError(f"gradient の rx は正である必要がある: got={rx!r}")
    matrix = Affine.scale(1.0, ry / rx).then(Affine.translate(float(center[0]), float(center[1])))
    return RadialGradient(
        center=(0.0, 0.0),
        radius=rx,
        colors=(int(colors[0]), int(colors[1])),
        stops=None if stops is None else tuple(float(s) for s in stops),
        matrix=matrix,
    )


__all__ = [
    "Affine",
    "FILL",
    "JOIN_BEVEL",
    "JOIN_MITER",
    "JOIN_ROUND",
    "Paint",
    "RadialGradient",
    "STROKE",
    "TILE_CLAMP",
    "radial_gradient",
]
