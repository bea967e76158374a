# どこで: `src/chainring/interactive/__init__.py`。
# 何を: pyglet によるプレビューウィンドウをまとめるパッケージ定義。
# なぜ: pyglet 依存をこの層に閉じ込め、core/export をヘッドレスに保つため。

from __future__ import annotations

__all__ = []
