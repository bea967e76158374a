"""
どこで: `src/chainring/core/frame.py`。
何を: フレーム番号・fps・bpm から回転角と半径を決め、チェーンリングと 8 回の三角形描画を
     固定順の DrawItem 列に合成する（`compose_frame`）。Canvas へ流す `render_frame` も提供する。
なぜ: 1 フレームを「フレーム番号だけで決まる純粋関数」にし、ホストループ/出力先から独立させるため。

描画順（後ほど上に重なる）
--------------------------
1. チェーンリング（本体の塗り → 本体の線 → リッジ円）
2. 頂点モード Wankel 形: 頂点 0/1/2 = GREEN / BLUE / RED
3. 頂点モード直線形: 頂点 0/1/2 = YELLOW / CYAN / MAGENTA
4. 輪郭モード Wankel 形（半透明ダークグレー）
5. 輪郭モード直線形（半透明ダークグレー）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chainring.core.canvas import Canvas, check_canvas_size
from chainring.core.color import ARGB, BLUE, CYAN, GREEN, MAGENTA, RED, YELLOW
from chainring.core.primitives.chain_ring import DEFAULT_TEETH_COUNT, chain_ring
from chainring.core.primitives.triangle import triangle
from chainring.core.scene import DrawItem, replay

logger = logging.getLogger(__name__)

DEGREES_PER_BEAT = 12.0
TRIANGLE_PHASE_DEGREES = 60.0
TRIANGLE_RADIUS_PERCENT = 53
OUTLINE_GRAY: ARGB = 0x77222222

# (vertex, color, wankel) の固定列。順序そのものが合成結果を決める。
TRIANGLE_PASSES: tuple[tuple[int | None, ARGB, bool], ...] = (
    (0, GREEN, True),
    (1, BLUE, True),
    (2, RED, True),
    (0, YELLOW, False),
    (1, CYAN, False),
    (2, MAGENTA, False),
    (None, OUTLINE_GRAY, True),
    (None, OUTLINE_GRAY, False),
)


@dataclass(frozen=True, slots=True)
class FrameTiming:
    """fps/bpm から決まる 1 フレームあたりの回転角と周期長。"""

    step_degrees: float
    cycle_length: int

    def wrap(self, frame: int) -> int:
        """フレーム番号を周期内（0..cycle_length-1）へ折り返す。"""
        return int(frame) % self.cycle_length

    def rotation(self, frame: int) -> float:
        """フレーム番号に対応するリングの回転角 [deg] を返す。"""
        return self.wrap(frame) * self.step_degrees

    def frames_remaining(self, frame: int) -> int:
        """周期が一巡するまでの残りフレーム数を返す。"""
        return self.cycle_length - (self.wrap(frame) + 1)


@dataclass(frozen=True, slots=True)
class FrameScene:
    """`compose_frame()` の結果。"""

    items: tuple[DrawItem, ...]
    frames_remaining: int
    timing: FrameTiming
    rotation: float
    chain_ring_radius: int
    triangle_radius: int


def frame_timing(fps: float, bpm: float) -> FrameTiming:
    """fps/bpm から `FrameTiming` を返す。

    Notes
    -----
    1 拍あたり 12° 回転する。``step = 12*bpm/(60*fps)``, ``cycle = round(360/step)``。

    Raises
    ------
    ValueError
        fps/bpm が正でない場合。
    """
    _fps = float(fps)
    _bpm = float(bpm)
    if not _fps > 0.0:
        raise ValueError(f"fps は正の値である必要がある: got={fps!r}")
    if not _bpm > 0.0:
        raise ValueError(f"bpm は正の値である必要がある: got={bpm!r}")
    step = DEGREES_PER_BEAT * _bpm / (60.0 * _fps)
    cycle = max(1, int(round(360.0 / step)))
    return FrameTiming(step_degrees=step, cycle_length=cycle)


def compose_frame(
    frame: int,
    fps: float,
    bpm: float,
    canvas_size: tuple[int, int],
    *,
    teeth_count: int = DEFAULT_TEETH_COUNT,
) -> FrameScene:
    """1 フレーム分の DrawItem 列を固定順で合成して返す。

    Parameters
    ----------
    frame : int
        フレーム番号（0 以上）。周期長で折り返す。
    fps : float
        アニメーションの fps。
    bpm : float
        1 分あたりの拍数。
    canvas_size : tuple[int, int]
        canvas の (width, height) [px]。
    teeth_count : int, optional
        チェーンリングの歯数。

    Returns
    -------
    FrameScene
        DrawItem 列と、周期が一巡するまでの残りフレーム数など。
    """
    if int(frame) < 0:
        raise ValueError(f"frame は 0 以上である必要がある: got={frame!r}")
    width, height = check_canvas_size(*canvas_size)
    timing = frame_timing(fps, bpm)

    size = min(width, height)
    center = (float(size // 2), float(size // 2))
    chain_ring_radius = size // 2
    triangle_radius = size // 2 * TRIANGLE_RADIUS_PERCENT // 100

    rotation = timing.rotation(frame)
    triangle_rotation = TRIANGLE_PHASE_DEGREES + rotation

    items: list[DrawItem] = []
    items.extend(chain_ring(center, chain_ring_radius, rotation, teeth_count, canvas_width=width))
    for vertex, color, wankel in TRIANGLE_PASSES:
        items.extend(
            triangle(
                center,
                triangle_radius,
                triangle_rotation,
                vertex,
                color,
                wankel,
                canvas_width=width,
            )
        )

    return FrameScene(
        items=tuple(items),
        frames_remaining=timing.frames_remaining(frame),
        timing=timing,
        rotation=rotation,
        chain_ring_radius=chain_ring_radius,
        triangle_radius=triangle_radius,
    )


def render_frame(frame: int, fps: float, bpm: float, canvas: Canvas) -> int:
    """1 フレームを Canvas に描き、周期が一巡するまでの残りフレーム数を返す。

    Notes
    -----
    Canvas のクリアは呼び出し側の責務（ここでは描き足すだけ）。
    """
    scene = compose_frame(frame, fps, bpm, (canvas.width, canvas.height))
    n = replay(scene.items, canvas)
    logger.debug(
        "frame=%d rotation=%.2f draws=%d remaining=%d",
        int(frame),
        scene.rotation,
        n,
        scene.frames_remaining,
    )
    return scene.frames_remaining


__all__ = [
    "FrameScene",
    "FrameTiming",
    "OUTLINE_GRAY",
    "TRIANGLE_PASSES",
    "compose_frame",
    "frame_timing",
    "render_frame",
]
