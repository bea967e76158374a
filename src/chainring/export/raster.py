"""
どこで: `src/chainring/export/raster.py`。
何を: `Canvas` プロトコルを満たすソフトウェアラスタライザ `RasterCanvas` を提供する。
なぜ: GPU/外部描画ライブラリ無しで、PNG/GIF 出力とプレビューウィンドウに同じ画素を供給するため。

処理の全体像（draw_path 1 回）
------------------------------
1. Path を折れ線化し（3 次ベジエは固定分割）、現在変換（CTM）でデバイス座標へ移す
2. 折れ線群の AABB を canvas にクリップし、その範囲だけを処理する
3. カバレッジ（0..1）を Numba で評価する
   - fill: スキャンライン + 非ゼロ巻き数規則（サブサンプル格子）
   - stroke: 線分本体（butt）と頂点の join（miter/round/bevel）に入るサブサンプルを数える
4. 塗りソース（単色 or 放射グラデーション）の色を画素中心で評価する
5. premultiplied RGBA バッファへ source-over で合成する

注意
----
- anti_alias=False の Paint は画素中心 1 点だけをサンプルする。
- miter は長さ比が MITER_LIMIT を超えると bevel に落ちる。
- 3 次ベジエの分割点にも join が付く（分割が細かいので見た目はほぼ滑らか）。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from chainring.core.canvas import TransformStack, check_canvas_size
from chainring.core.color import ARGB, argb_to_rgba01
from chainring.core.paint import FILL, JOIN_BEVEL, JOIN_MITER, JOIN_ROUND, Affine, Paint
from chainring.core.path import DEFAULT_CUBIC_STEPS, Path

DEFAULT_SUPERSAMPLE = 4

# stroke_width=0（hairline）を描くときの線幅 [px]。
_HAIRLINE_WIDTH = 1.0

# 線幅に対する miter 先端長の上限。
MITER_LIMIT = 4.0

_JOIN_MITER_CODE = 0
_JOIN_ROUND_CODE = 1
_JOIN_BEVEL_CODE = 2
_JOIN_CODES = {
    JOIN_MITER: _JOIN_MITER_CODE,
    JOIN_ROUND: _JOIN_ROUND_CODE,
    JOIN_BEVEL: _JOIN_BEVEL_CODE,
}


def _drop_repeated_points(poly: np.ndarray) -> np.ndarray:
    """連続する同一点を除く（join の向きが定まらないため）。"""
    if poly.shape[0] < 2:
        return poly
    keep = np.ones((poly.shape[0],), dtype=bool)
    keep[1:] = np.any(poly[1:] != poly[:-1], axis=1)
    return poly[keep]


def _pack_polylines(polylines: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
    """折れ線列を Numba 入力用の連結バッファへパックする。"""
    n = len(polylines)
    total = 0
    for poly in polylines:
        total += int(poly.shape[0])

    vertices = np.empty((total, 2), dtype=np.float64)
    offsets = np.empty((n + 1,), dtype=np.int32)
    offsets[0] = 0
    cursor = 0
    for i, poly in enumerate(polylines):
        m = int(poly.shape[0])
        vertices[cursor : cursor + m] = poly
        cursor += m
        offsets[i + 1] = np.int32(cursor)
    return vertices, offsets


@njit(cache=True)
def _fill_coverage_nonzero_numba(
    vertices: np.ndarray,
    offsets: np.ndarray,
    x0: float,
    y0: float,
    nx: int,
    ny: int,
    ss: int,
) -> np.ndarray:
    """非ゼロ巻き数規則で塗りカバレッジ（shape (ny, nx)）を作る（スキャンライン）。

    Notes
    -----
    - サブサンプル点は画素内の ss×ss 格子の中心。
    - 交点は「下端を含み上端を含まない」半開区間で数え、頂点上の二重カウントを避ける。
    """

    cov = np.zeros((ny, nx), dtype=np.float64)
    n_polys = int(offsets.shape[0]) - 1
    n_vertices = int(vertices.shape[0])
    xints = np.empty((n_vertices,), dtype=np.float64)
    dirs = np.empty((n_vertices,), dtype=np.int32)
    weight = 1.0 / float(ss * ss)

    for r in range(ny * ss):
        y = y0 + (float(r) + 0.5) / float(ss)
        nints = 0
        for pi in range(n_polys):
            s = int(offsets[pi])
            e = int(offsets[pi + 1])
            for k in range(s, e - 1):
                ay = vertices[k, 1]
                by = vertices[k + 1, 1]
                if ay <= y < by:
                    d = 1
                elif by <= y < ay:
                    d = -1
                else:
                    continue
                ax = vertices[k, 0]
                bx = vertices[k + 1, 0]
                xints[nints] = ax + (y - ay) * (bx - ax) / (by - ay)
                dirs[nints] = d
                nints += 1

        if nints < 2:
            continue

        order = np.argsort(xints[:nints])
        winding = 0
        row = r // ss
        for q in range(nints - 1):
            winding += dirs[order[q]]
            if winding == 0:
                continue
            x_left = xints[order[q]]
            x_right = xints[order[q + 1]]
            if x_right <= x_left:
                continue
            # サンプル中心 x0 + (i+0.5)/ss が [x_left, x_right) に入る列 i。
            i0 = int(math.ceil((x_left - x0) * ss - 0.5))
            i1 = int(math.ceil((x_right - x0) * ss - 0.5))
            if i0 < 0:
                i0 = 0
            if i1 > nx * ss:
                i1 = nx * ss
            for i in range(i0, i1):
                cov[row, i // ss] += weight

    return cov


@njit(cache=True)
def _sample_window(
    lo_x: float,
    hi_x: float,
    lo_y: float,
    hi_y: float,
    x0: float,
    y0: float,
    fss: float,
    n_cols: int,
    n_rows: int,
) -> tuple[int, int, int, int]:
    """デバイス座標の矩形に入りうるサブサンプル行列の範囲（両端含む）を返す。"""
    c0 = int(math.floor((lo_x - x0) * fss - 0.5))
    c1 = int(math.ceil((hi_x - x0) * fss - 0.5))
    r0 = int(math.floor((lo_y - y0) * fss - 0.5))
    r1 = int(math.ceil((hi_y - y0) * fss - 0.5))
    if c0 < 0:
        c0 = 0
    if r0 < 0:
        r0 = 0
    if c1 > n_cols - 1:
        c1 = n_cols - 1
    if r1 > n_rows - 1:
        r1 = n_rows - 1
    return c0, c1, r0, r1


@njit(cache=True)
def _mark_triangle(
    mask: np.ndarray,
    x0: float,
    y0: float,
    fss: float,
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
) -> None:
    """三角形 ABC（境界含む）に入るサブサンプルを mask に立てる。"""
    area = (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)
    if area == 0.0:
        return
    sign = 1.0 if area > 0.0 else -1.0
    n_rows, n_cols = mask.shape
    c0, c1, r0, r1 = _sample_window(
        min(ax, bx, cx), max(ax, bx, cx), min(ay, by, cy), max(ay, by, cy), x0, y0, fss, n_cols, n_rows
    )
    for r in range(r0, r1 + 1):
        py = y0 + (float(r) + 0.5) / fss
        for c in range(c0, c1 + 1):
            if mask[r, c] != 0:
                continue
            px = x0 + (float(c) + 0.5) / fss
            e0 = ((bx - ax) * (py - ay) - (by - ay) * (px - ax)) * sign
            e1 = ((cx - bx) * (py - by) - (cy - by) * (px - bx)) * sign
            e2 = ((ax - cx) * (py - cy) - (ay - cy) * (px - cx)) * sign
            if e0 >= 0.0 and e1 >= 0.0 and e2 >= 0.0:
                mask[r, c] = 1


@njit(cache=True)
def _mark_disc(
    mask: np.ndarray, x0: float, y0: float, fss: float, vx: float, vy: float, radius: float
) -> None:
    n_rows, n_cols = mask.shape
    c0, c1, r0, r1 = _sample_window(
        vx - radius, vx + radius, vy - radius, vy + radius, x0, y0, fss, n_cols, n_rows
    )
    r2 = radius * radius
    for r in range(r0, r1 + 1):
        py = y0 + (float(r) + 0.5) / fss
        for c in range(c0, c1 + 1):
            px = x0 + (float(c) + 0.5) / fss
            if (px - vx) * (px - vx) + (py - vy) * (py - vy) <= r2:
                mask[r, c] = 1


@njit(cache=True)
def _mark_join(
    mask: np.ndarray,
    x0: float,
    y0: float,
    fss: float,
    px: float,
    py: float,
    vx: float,
    vy: float,
    qx: float,
    qy: float,
    half_width: float,
    join: int,
    miter_limit: float,
) -> None:
    """線分 P→V と V→Q の外側の継ぎ目を join 種別どおりに埋める。"""
    d1x = vx - px
    d1y = vy - py
    d2x = qx - vx
    d2y = qy - vy
    l1 = math.hypot(d1x, d1y)
    l2 = math.hypot(d2x, d2y)
    if l1 <= 0.0 or l2 <= 0.0:
        return
    d1x /= l1
    d1y /= l1
    d2x /= l2
    d2y /= l2
    cross = d1x * d2y - d1y * d2x
    if abs(cross) < 1e-12:
        # 直進は継ぎ目無し。折り返しは丸で塞ぐ。
        if d1x * d2x + d1y * d2y < 0.0:
            _mark_disc(mask, x0, y0, fss, vx, vy, half_width)
        return
    if join == _JOIN_ROUND_CODE:
        _mark_disc(mask, x0, y0, fss, vx, vy, half_width)
        return

    # 外側 = 曲がる向きと反対側の法線。
    s = -1.0 if cross > 0.0 else 1.0
    n1x = -d1y * s
    n1y = d1x * s
    n2x = -d2y * s
    n2y = d2x * s
    o1x = vx + n1x * half_width
    o1y = vy + n1y * half_width
    o2x = vx + n2x * half_width
    o2y = vy + n2y * half_width
    _mark_triangle(mask, x0, y0, fss, vx, vy, o1x, o1y, o2x, o2y)
    if join != _JOIN_MITER_CODE:
        return

    mx = n1x + n2x
    my = n1y + n2y
    ml = math.hypot(mx, my)
    if ml <= 0.0:
        return
    mx /= ml
    my /= ml
    cos_half = mx * n1x + my * n1y
    if cos_half <= 0.0 or 1.0 / cos_half > miter_limit:
        return
    tip_x = vx + mx * half_width / cos_half
    tip_y = vy + my * half_width / cos_half
    _mark_triangle(mask, x0, y0, fss, o1x, o1y, tip_x, tip_y, o2x, o2y)


@njit(cache=True)
def _stroke_coverage_numba(
    vertices: np.ndarray,
    offsets: np.ndarray,
    x0: float,
    y0: float,
    nx: int,
    ny: int,
    ss: int,
    half_width: float,
    join: int,
    miter_limit: float,
) -> np.ndarray:
    """線幅 2*half_width の線が覆うサブサンプル比率（shape (ny, nx)）を返す。

    Notes
    -----
    - 線分本体は端を延ばさない矩形（butt）。
    - 閉じた折れ線（始点 == 終点）は全頂点に、開いた折れ線は内側の頂点にだけ join を付ける。
    """

    mask = np.zeros((ny * ss, nx * ss), dtype=np.uint8)
    n_polys = int(offsets.shape[0]) - 1
    hw2 = half_width * half_width
    fss = float(ss)

    for pi in range(n_polys):
        s = int(offsets[pi])
        e = int(offsets[pi + 1])
        for k in range(s, e - 1):
            ax = vertices[k, 0]
            ay = vertices[k, 1]
            bx = vertices[k + 1, 0]
            by = vertices[k + 1, 1]
            dx = bx - ax
            dy = by - ay
            denom = dx * dx + dy * dy
            if denom <= 0.0:
                continue

            # 線分 AABB（半幅ぶん拡張）に入るサブサンプルだけを調べる。
            c0, c1, r0, r1 = _sample_window(
                min(ax, bx) - half_width,
                max(ax, bx) + half_width,
                min(ay, by) - half_width,
                max(ay, by) + half_width,
                x0,
                y0,
                fss,
                nx * ss,
                ny * ss,
            )
            for r in range(r0, r1 + 1):
                py = y0 + (float(r) + 0.5) / fss
                for c in range(c0, c1 + 1):
                    if mask[r, c] != 0:
                        continue
                    px = x0 + (float(c) + 0.5) / fss
                    t = ((px - ax) * dx + (py - ay) * dy) / denom
                    if t < 0.0 or t > 1.0:
                        continue
                    qx = ax + t * dx
                    qy = ay + t * dy
                    if (px - qx) * (px - qx) + (py - qy) * (py - qy) <= hw2:
                        mask[r, c] = 1

        m = e - s
        if m < 3:
            continue
        closed = vertices[s, 0] == vertices[e - 1, 0] and vertices[s, 1] == vertices[e - 1, 1]
        if closed:
            u = m - 1
            for j in range(u):
                prev = s + (j - 1 + u) % u
                cur = s + j
                nxt = s + (j + 1) % u
                _mark_join(
                    mask, x0, y0, fss,
                    vertices[prev, 0], vertices[prev, 1],
                    vertices[cur, 0], vertices[cur, 1],
                    vertices[nxt, 0], vertices[nxt, 1],
                    half_width, join, miter_limit,
                )
        else:
            for cur in range(s + 1, e - 1):
                _mark_join(
                    mask, x0, y0, fss,
                    vertices[cur - 1, 0], vertices[cur - 1, 1],
                    vertices[cur, 0], vertices[cur, 1],
                    vertices[cur + 1, 0], vertices[cur + 1, 1],
                    half_width, join, miter_limit,
                )

    cov = np.zeros((ny, nx), dtype=np.float64)
    weight = 1.0 / float(ss * ss)
    for r in range(ny * ss):
        for c in range(nx * ss):
            if mask[r, c] != 0:
                cov[r // ss, c // ss] += weight
    return cov


class RasterCanvas:
    """premultiplied RGBA（float32, 0..1）の画素バッファへ描く Canvas。

    Parameters
    ----------
    width, height : int
        画素寸法。
    supersample : int, optional
        anti_alias な Paint で使う 1px あたりのサブサンプル数（一辺）。
    cubic_steps : int, optional
        3 次ベジエ 1 本の折れ線分割数。
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        supersample: int = DEFAULT_SUPERSAMPLE,
        cubic_steps: int = DEFAULT_CUBIC_STEPS,
    ) -> None:
        self._width, self._height = check_canvas_size(width, height)
        if int(supersample) < 1:
            raise ValueError(f"supersample は 1 以上である必要がある: got={supersample!r}")
        self._supersample = int(supersample)
        self._cubic_steps = int(cubic_steps)
        self._stack = TransformStack()
        self.pixels = np.zeros((self._height, self._width, 4), dtype=np.float32)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self, color: ARGB) -> None:
        r, g, b, a = argb_to_rgba01(color)
        self.pixels[...] = np.asarray([r * a, g * a, b * a, a], dtype=np.float32)

    def save(self) -> None:
        self._stack.save()

    def restore(self) -> None:
        self._stack.restore()

    def translate(self, dx: float, dy: float) -> None:
        self._stack.translate(dx, dy)

    def rotate(self, degrees: float) -> None:
        self._stack.rotate(degrees)

    def draw_path(self, path: Path, paint: Paint) -> None:
        ctm = self._stack.current
        polylines = [ctm.apply(p) for p in path.flatten(cubic_steps=self._cubic_steps)]
        if not polylines:
            return

        is_fill = paint.style == FILL
        half_width = 0.0
        if not is_fill:
            width = float(paint.stroke_width) * ctm.mean_scale()
            half_width = 0.5 * (width if width > 0.0 else _HAIRLINE_WIDTH)
            polylines = [_drop_repeated_points(p) for p in polylines]

        vertices, offsets = _pack_polylines(polylines)
        # miter 先端は頂点から最大 half_width * MITER_LIMIT まで伸びる。
        pad = half_width * (MITER_LIMIT if paint.stroke_join == JOIN_MITER else 1.0)
        mins = vertices.min(axis=0) - pad
        maxs = vertices.max(axis=0) + pad
        ix0 = max(0, int(math.floor(mins[0])))
        iy0 = max(0, int(math.floor(mins[1])))
        ix1 = min(self._width, int(math.ceil(maxs[0])) + 1)
        iy1 = min(self._height, int(math.ceil(maxs[1])) + 1)
        nx = ix1 - ix0
        ny = iy1 - iy0
        if nx <= 0 or ny <= 0:
            return

        ss = self._supersample if paint.anti_alias else 1
        if is_fill:
            cov = _fill_coverage_nonzero_numba(vertices, offsets, float(ix0), float(iy0), nx, ny, ss)
        else:
            cov = _stroke_coverage_numba(
                vertices,
                offsets,
                float(ix0),
                float(iy0),
                nx,
                ny,
                ss,
                float(half_width),
                _JOIN_CODES[paint.stroke_join],
                MITER_LIMIT,
            )
        if not np.any(cov > 0.0):
            return

        src = self._source_colors(paint, ctm, ix0, iy0, nx, ny)
        alpha = src[..., 3] * cov
        dst = self.pixels[iy0:iy1, ix0:ix1]
        inv = 1.0 - alpha
        out = np.empty_like(dst)
        out[..., :3] = src[..., :3] * alpha[..., None] + dst[..., :3] * inv[..., None]
        out[..., 3] = alpha + dst[..., 3] * inv
        self.pixels[iy0:iy1, ix0:ix1] = out

    def _source_colors(
        self,
        paint: Paint,
        ctm: Affine,
        ix0: int,
        iy0: int,
        nx: int,
        ny: int,
    ) -> np.ndarray:
        """画素中心での塗りソース色（unpremultiplied RGBA, shape (ny, nx, 4)）を返す。"""
        if paint.shader is None:
            assert paint.color is not None
            rgba = np.asarray(argb_to_rgba01(paint.color), dtype=np.float64)
            return np.broadcast_to(rgba, (ny, nx, 4))

        shader = paint.shader
        xs = np.arange(ix0, ix0 + nx, dtype=np.float64) + 0.5
        ys = np.arange(iy0, iy0 + ny, dtype=np.float64) + 0.5
        grid = np.stack(np.meshgrid(xs, ys), axis=-1)
        # デバイス座標 → グラデーション局所座標
        to_local = shader.matrix.then(ctm).inverse()
        local = to_local.apply(grid)
        dist = np.hypot(local[..., 0] - shader.center[0], local[..., 1] - shader.center[1])
        return shader.sample(dist / float(shader.radius))

    def to_rgba8(self) -> np.ndarray:
        """画素バッファを unpremultiplied RGBA uint8（shape (H, W, 4)）で返す。"""
        p = self.pixels.astype(np.float64)
        a = p[..., 3:4]
        rgb = np.divide(p[..., :3], a, out=np.zeros_like(p[..., :3]), where=a > 0.0)
        out = np.concatenate([rgb, a], axis=-1)
        return np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)


__all__ = ["DEFAULT_SUPERSAMPLE", "MITER_LIMIT", "RasterCanvas"]
