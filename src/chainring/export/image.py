"""
どこで: `src/chainring/export/image.py`。
何を: フレームを `RasterCanvas` でラスタライズし、Pillow で PNG（1 枚）/ GIF（1 周期）に保存する。
なぜ: ウィンドウ無しで、プレビューと同じ画素を画像ファイルとして残すため。
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from chainring.core.canvas import check_canvas_size
from chainring.core.color import ARGB, WHITE
from chainring.core.frame import render_frame
from chainring.export.raster import DEFAULT_SUPERSAMPLE, RasterCanvas

logger = logging.getLogger(__name__)


def _scaled_size(canvas_size: tuple[int, int], scale: float) -> tuple[int, int]:
    s = float(scale)
    if not s > 0.0:
        raise ValueError(f"scale は正の値である必要がある: got={scale!r}")
    w, h = check_canvas_size(*canvas_size)
    return max(1, int(round(w * s))), max(1, int(round(h * s)))


def render_frame_image(
    frame: int,
    *,
    canvas_size: tuple[int, int],
    fps: float,
    bpm: float,
    background: ARGB = WHITE,
    supersample: int = DEFAULT_SUPERSAMPLE,
) -> tuple[Image.Image, int]:
    """1 フレームをラスタライズし、(RGBA 画像, 周期の残りフレーム数) を返す。"""
    canvas = RasterCanvas(*canvas_size, supersample=supersample)
    canvas.clear(background)
    remaining = render_frame(frame, fps, bpm, canvas)
    return Image.fromarray(canvas.to_rgba8(), mode="RGBA"), remaining


def export_png(
    frame: int,
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    fps: float,
    bpm: float,
    background: ARGB = WHITE,
    supersample: int = DEFAULT_SUPERSAMPLE,
    scale: float = 1.0,
) -> Path:
    """1 フレームを PNG として保存する。

    Notes
    -----
    `scale` は canvas 寸法そのものに掛ける（形状は canvas 寸法から決まるので、拡大しても崩れない）。
    """
    _path = Path(path)
    size = _scaled_size(canvas_size, scale)
    image, _remaining = render_frame_image(
        frame,
        canvas_size=size,
        fps=fps,
        bpm=bpm,
        background=background,
        supersample=supersample,
    )
    _path.parent.mkdir(parents=True, exist_ok=True)
    image.save(_path, format="PNG")
    logger.info("PNG を保存しました: %s (frame=%d, size=%dx%d)", _path, int(frame), size[0], size[1])
    return _path


def export_gif(
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    fps: float,
    bpm: float,
    background: ARGB = WHITE,
    supersample: int = DEFAULT_SUPERSAMPLE,
) -> Path:
    """フレーム 0 から周期が一巡するまでを、無限ループの GIF として保存する。

    Notes
    -----
    フレーム間隔は `1000/fps` [ms]。GIF はアルファを持てないため RGB に落とす。
    """
    _path = Path(path)
    frames: list[Image.Image] = []
    frame = 0
    while True:
        image, remaining = render_frame_image(
            frame,
            canvas_size=canvas_size,
            fps=fps,
            bpm=bpm,
            background=background,
            supersample=supersample,
        )
        frames.append(image.convert("RGB"))
        if remaining == 0:
            break
        frame += 1

    _path.parent.mkdir(parents=True, exist_ok=True)
    frames[0].save(
        _path,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=int(round(1000.0 / float(fps))),
        loop=0,
    )
    logger.info("GIF を保存しました: %s (%d frames)", _path, len(frames))
    return _path


__all__ = ["export_gif", "export_png", "render_frame_image"]
