# どこで: `src/chainring/__init__.py`。
# 何を: ルート `chainring` パッケージを定義する。
# なぜ: フレーム描画の入口（`render_frame` / `compose_frame`）を `chainring` から直接 import できるようにするため。

from __future__ import annotations

from chainring.core.frame import compose_frame, render_frame

__all__ = ["compose_frame", "render_frame"]
