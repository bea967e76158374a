# どこで: `src/chainring/core/__init__.py`。
# 何を: 形状・陰影・フレーム合成など、描画先に依存しない中核部分をまとめるパッケージ定義。
# なぜ: export/interactive から一方向に参照される層として分けるため。

from __future__ import annotations

__all__ = []
