# どこで: `src/chainring/core/primitives/__init__.py`。
# 何を: チェーンリング/三角形の形状生成をまとめるパッケージ定義。
# なぜ: 形状ごとの定数と生成関数を 1 モジュールずつに閉じ込めるため。

from __future__ import annotations

__all__ = []
