# どこで: `src/chainring/interactive/run.py`。
# 何を: プレビューウィンドウを開き、閉じられるまでアニメーションを回す `run()` を提供する。
# なぜ: CLI から呼ぶ入口を 1 つにし、設定の読み込みとサブシステムの配線をここへ集めるため。

from __future__ import annotations

import logging

from chainring.core.runtime_config import runtime_config
from chainring.interactive.runtime.draw_window_system import DrawWindowSystem
from chainring.interactive.runtime.window_loop import WindowLoop, WindowTask

_logger = logging.getLogger(__name__)


def run(*, size: tuple[int, int] | None = None) -> None:
    """プレビューウィンドウを開いてアニメーションを表示する。

    Parameters
    ----------
    size : tuple[int, int] | None, optional
        ウィンドウの初期サイズ。None なら config の `window.size`。

    Notes
    -----
    - `window.frame_rate` ごとにフレーム番号を 1 つ進めて描く。
    - 任意のキーで `window.rewind_frames` だけ巻き戻す。Cmd/Ctrl+Q で終了する。
    """

    cfg = runtime_config()
    system = DrawWindowSystem(cfg, size=size)
    _logger.info(
        "ウィンドウを開きました: %dx%d (fps=%s, bpm=%s)",
        system.window.width,
        system.window.height,
        cfg.animation_fps,
        cfg.animation_bpm,
    )
    task = WindowTask(window=system.window, draw_frame=system.draw_frame)
    WindowLoop(task, frame_rate=cfg.window_frame_rate).run()


__all__ = ["run"]
