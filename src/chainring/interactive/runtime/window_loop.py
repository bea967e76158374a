# どこで: `src/chainring/interactive/runtime/window_loop.py`。
# 何を: pyglet のウィンドウを 1 つの app loop（`pyglet.app.run()`）で一定間隔に再描画するランナーを提供する。
# なぜ: OS 依存のイベント配送を pyglet に任せ、描画頻度だけをこちらで決めるため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import pyglet

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WindowTask:
    """pyglet window と「flip しない描画関数」を束ねる。"""

    # 注: pyglet の Window 型は環境/バージョン差があるため Any に寄せる。
    window: Any

    # 1フレーム分の描画処理（back buffer へ描くだけ）。
    # `switch_to()` / `flip()` は pyglet（`Window.draw()`）が担当する前提。
    draw_frame: Callable[[], None]


class WindowLoop:
    """ウィンドウを `frame_rate` [1/s] で再描画し続ける。"""

    def __init__(self, task: WindowTask, *, frame_rate: float) -> None:
        """ループを初期化する。

        Parameters
        ----------
        task : WindowTask
            描画したいウィンドウと描画処理。
        frame_rate : float
            再描画頻度。`<=0` の場合はスロットリングしない。
        """

        self._task = task
        self._frame_rate = float(frame_rate)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        task = self._task

        def request_exit(*_: object) -> None:
            # pyglet の on_close から呼ばれるコールバックは引数が来る場合があるため *args を受ける。
            pyglet.app.exit()

        task.window.push_handlers(on_close=request_exit)
        task.window.push_handlers(on_draw=task.draw_frame)

        # Window.draw は switch_to / on_draw / on_refresh / flip をまとめて行う。
        def draw_once(dt: float) -> None:
            # 閉じられたウィンドウへ draw すると例外になり得るため、開いているときだけ描く。
            if task.window not in pyglet.app.windows:
                return
            task.window.draw(dt)

        if self._frame_rate <= 0:
            pyglet.clock.schedule(draw_once)
        else:
            pyglet.clock.schedule_interval(draw_once, 1.0 / self._frame_rate)

        logger.info("window loop を開始します (frame_rate=%.1f)", self._frame_rate)
        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(draw_once)


__all__ = ["WindowLoop", "WindowTask"]
