# どこで: `src/chainring/export/__init__.py`。
# 何を: ラスタ/SVG の Canvas 実装と、PNG/SVG/GIF の保存関数をまとめるパッケージ定義。
# なぜ: ヘッドレス出力を interactive（pyglet）から独立させるため。

from __future__ import annotations

__all__ = []
