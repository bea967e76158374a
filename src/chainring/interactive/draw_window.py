# どこで: `src/chainring/interactive/draw_window.py`。
# 何を: プレビュー用の pyglet ウィンドウ生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core/export をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.window import Window


def create_draw_window(size: tuple[int, int], *, caption: str) -> Window:
    """指定サイズ・タイトルのリサイズ可能なウィンドウを生成する。"""
    w, h = size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(w),
        height=int(h),
        resizable=True,
        caption=str(caption),
    )
    return window
