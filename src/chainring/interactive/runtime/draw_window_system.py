# どこで: `src/chainring/interactive/runtime/draw_window_system.py`。
# 何を: フレームをラスタライズして pyglet ウィンドウへ転送し、キー入力/リサイズに応じる。
# なぜ: `run()` を「配線」に寄せ、描画責務とキー操作を独立させるため。

from __future__ import annotations

import logging

import pyglet
from pyglet.window import key

from chainring.core.frame import render_frame
from chainring.core.runtime_config import RuntimeConfig
from chainring.export.raster import RasterCanvas
from chainring.interactive.draw_window import create_draw_window
from chainring.interactive.runtime.frame_clock import FrameCounter

_logger = logging.getLogger(__name__)


class DrawWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(self, config: RuntimeConfig, *, size: tuple[int, int] | None = None) -> None:
        self._config = config
        w, h = config.window_size if size is None else size
        self.window = create_draw_window((int(w), int(h)), caption=config.window_caption)
        self._canvas = RasterCanvas(int(w), int(h), supersample=config.supersample)
        self._counter = FrameCounter(rewind_frames=config.rewind_frames)
        self.window.push_handlers(on_key_press=self._on_key_press, on_resize=self._on_resize)

    @property
    def frame(self) -> int:
        return self._counter.frame

    def _on_key_press(self, symbol: int, modifiers: int) -> None:
        if symbol == key.Q and modifiers & (key.MOD_COMMAND | key.MOD_CTRL):
            _logger.info("終了キーが押されました")
            self.window.close()
            pyglet.app.exit()
            return
        frame = self._counter.rewind()
        _logger.debug("巻き戻し: frame=%d", frame)

    def _on_resize(self, width: int, height: int) -> None:
        # 最小化などで 0 になる場合は前の canvas を保つ。
        if int(width) <= 0 or int(height) <= 0:
            return
        if (int(width), int(height)) == (self._canvas.width, self._canvas.height):
            return
        self._canvas = RasterCanvas(int(width), int(height), supersample=self._config.supersample)
        _logger.info("canvas を作り直しました: %dx%d", int(width), int(height))

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        frame = self._counter.tick()
        canvas = self._canvas
        canvas.clear(self._config.background)
        render_frame(frame, self._config.animation_fps, self._config.animation_bpm, canvas)

        w, h = canvas.width, canvas.height
        # pixels は上から下の行順なので、負の pitch で pyglet（下から上）へ渡す。
        image = pyglet.image.ImageData(w, h, "RGBA", canvas.to_rgba8().tobytes(), pitch=-w * 4)
        self.window.clear()
        image.blit(0, 0, width=self.window.width, height=self.window.height)


__all__ = ["DrawWindowSystem"]
