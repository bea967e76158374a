# どこで: `src/chainring/devtools/__init__.py`。
# 何を: CLI サブコマンドの実装をまとめるパッケージ定義。
# なぜ: `__main__.py` を振り分けだけに保つため。

from __future__ import annotations

__all__ = []
