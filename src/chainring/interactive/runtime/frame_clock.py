# どこで: `src/chainring/interactive/runtime/frame_clock.py`。
# 何を: ウィンドウ表示中のフレーム番号（進める/巻き戻す）を保持する。
# なぜ: フレーム番号の規則を pyglet から切り離し、ウィンドウ無しでテストできるようにするため。

from __future__ import annotations


class FrameCounter:
    """単調に進み、キー入力で巻き戻るフレーム番号。

    Notes
    -----
    `tick()` は番号を進めてから返す（最初に描くフレームは `start + 1`）。
    周期での折り返しは `compose_frame()` 側が行うため、ここでは行わない。
    """

    def __init__(self, *, start: int = 0, rewind_frames: int = 10) -> None:
        if int(start) < 0:
            raise ValueError("start は 0 以上である必要がある")
        if int(rewind_frames) < 0:
            raise ValueError("rewind_frames は 0 以上である必要がある")
        self._frame = int(start)
        self._rewind_frames = int(rewind_frames)

    @property
    def frame(self) -> int:
        """現在のフレーム番号を返す。"""

        return int(self._frame)

    def tick(self) -> int:
        """フレームを 1 つ進め、新しい番号を返す。"""

        self._frame += 1
        return int(self._frame)

    def rewind(self, n: int | None = None) -> int:
        """`n`（省略時は rewind_frames）だけ戻し、新しい番号を返す。0 未満にはならない。"""

        step = self._rewind_frames if n is None else int(n)
        self._frame = max(0, self._frame - step)
        return int(self._frame)


__all__ = ["FrameCounter"]
