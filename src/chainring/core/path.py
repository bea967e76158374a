"""
どこで: `src/chainring/core/path.py`。
何を: move/line/cubic/close から成る閉輪郭（contour）の集合 `Path` と、その組み立て器を定義する。
なぜ: 形状計算（primitive）を描画先（ラスタ/SVG/記録）から切り離し、値として検査できるようにするため。

概要
----
`Path` は不変値で、動詞列 `verbs` と点配列 `points`（shape (N, 2), float64）を持つ。
各動詞が消費する点の数は固定:

- `move`: 1 点（輪郭の開始）
- `line`: 1 点
- `cubic`: 3 点（制御点 2 つ + 終点）
- `close`: 0 点（輪郭を始点へ閉じる）

このプロジェクトで生成する輪郭はすべて閉じている（塗り/線の両方で閉輪郭のみを使う）。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from chainring.core.geometry import Point2D

MOVE = "move"
LINE = "line"
CUBIC = "cubic"
CLOSE = "close"

_POINTS_PER_VERB = {MOVE: 1, LINE: 1, CUBIC: 3, CLOSE: 0}

# 円を 4 本の 3 次ベジエで近似するときの制御点係数。
_CIRCLE_KAPPA = 0.5522847498307936

# 3 次ベジエ 1 本あたりの既定分割数（ラスタライズ用の折れ線化）。
DEFAULT_CUBIC_STEPS = 16


@dataclass(frozen=True, slots=True)
class Contour:
    """`Path` 内の 1 輪郭（move で始まり close で終わる）。"""

    verbs: tuple[str, ...]
    points: np.ndarray


@dataclass(frozen=True, slots=True)
class Path:
    """閉輪郭の列を表す不変パス。

    Parameters
    ----------
    verbs : tuple[str, ...]
        動詞列（`move` / `line` / `cubic` / `close`）。
    points : np.ndarray
        float64 型 shape (N, 2) の点配列。動詞ごとの消費点数の合計と一致する。

    Notes
    -----
    不変性を契約とし、配列は writeable=False で保持する。
    """

    verbs: tuple[str, ...]
    points: np.ndarray

    def __post_init__(self) -> None:
        """動詞列と点配列の整合性を検証し、不変条件を満たす形に固定する。"""
        verbs = tuple(str(v) for v in self.verbs)
        points = np.asarray(self.points, dtype=np.float64)
        if points.size == 0:
            points = points.reshape(0, 2)

        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError("points は shape (N,2) の 2 次元配列である必要がある")

        expected = 0
        for v in verbs:
            n = _POINTS_PER_VERB.get(v)
            if n is None:
                raise ValueError(f"未知の path 動詞: {v!r}")
            expected += n
        if expected != points.shape[0]:
            raise ValueError(
                f"動詞列が要求する点数と points の行数が一致しない: expected={expected}, got={points.shape[0]}"
            )

        points = points.copy()
        points.setflags(write=False)
        object.__setattr__(self, "verbs", verbs)
        object.__setattr__(self, "points", points)

    def count(self, verb: str) -> int:
        """指定した動詞の出現数を返す。"""
        return sum(1 for v in self.verbs if v == verb)

    def iter_contours(self) -> Iterator[Contour]:
        """輪郭を先頭から順に列挙する。"""
        cursor = 0
        start_verb = 0
        start_point = 0
        for i, v in enumerate(self.verbs):
            if v == MOVE and i != start_verb:
                yield Contour(self.verbs[start_verb:i], self.points[start_point:cursor])
                start_verb = i
                start_point = cursor
            cursor += _POINTS_PER_VERB[v]
            if v == CLOSE:
                yield Contour(self.verbs[start_verb : i + 1], self.points[start_point:cursor])
                start_verb = i + 1
                start_point = cursor
        if start_verb < len(self.verbs):
            yield Contour(self.verbs[start_verb:], self.points[start_point:cursor])

    def contours(self) -> list[Contour]:
        """輪郭を list で返す。"""
        return list(self.iter_contours())

    def flatten(self, *, cubic_steps: int = DEFAULT_CUBIC_STEPS) -> list[np.ndarray]:
        """各輪郭を閉じた折れ線（shape (M, 2), first == last）に変換して返す。

        Parameters
        ----------
        cubic_steps : int, optional
            3 次ベジエ 1 本あたりの分割数。

        Returns
        -------
        list[np.ndarray]
            輪郭ごとの折れ線。2 点未満の輪郭は捨てる。
        """
        steps = max(1, int(cubic_steps))
        ts = np.linspace(0.0, 1.0, num=steps + 1, dtype=np.float64)[1:]
        mt = 1.0 - ts
        # Bernstein 基底 (steps, 4)
        basis = np.stack([mt**3, 3.0 * mt**2 * ts, 3.0 * mt * ts**2, ts**3], axis=1)

        out: list[np.ndarray] = []
        for contour in self.iter_contours():
            pieces: list[np.ndarray] = []
            current: np.ndarray | None = None
            k = 0
            for v in contour.verbs:
                if v == MOVE or v == LINE:
                    current = contour.points[k]
                    pieces.append(current[None, :])
                elif v == CUBIC:
                    if current is None:
                        raise ValueError("cubic の前に move が必要")
                    ctrl = np.vstack([current[None, :], contour.points[k : k + 3]])
                    pieces.append(basis @ ctrl)
                    current = contour.points[k + 2]
                k += _POINTS_PER_VERB[v]

            if not pieces:
                continue
            poly = np.concatenate(pieces, axis=0)
            # 始点へ戻して閉じる（既に一致していても重複点は無害）。
            poly = np.concatenate([poly, poly[:1]], axis=0)
            if poly.shape[0] >= 2:
                out.append(poly)
        return out


class PathBuilder:
    """`Path` を 1 動詞ずつ組み立てる可変ビルダー。

    Examples
    --------
    >>> b = PathBuilder()
    >>> b.move_to((0.0, 0.0)); b.line_to((1.0, 0.0)); b.line_to((0.0, 1.0)); b.close()
    >>> path = b.build()
    """

    def __init__(self) -> None:
        self._verbs: list[str] = []
        self._points: list[Point2D] = []
        self._open = False

    def move_to(self, p: Point2D) -> None:
        """新しい輪郭を開始する。"""
        if self._open:
            raise ValueError("直前の輪郭が閉じていない（close してから move する）")
        self._verbs.append(MOVE)
        self._points.append((float(p[0]), float(p[1])))
        self._open = True

    def line_to(self, p: Point2D) -> None:
        """直線セグメントを追加する。"""
        self._require_open("line_to")
        self._verbs.append(LINE)
        self._points.append((float(p[0]), float(p[1])))

    def cubic_to(self, c1: Point2D, c2: Point2D, p: Point2D) -> None:
        """3 次ベジエセグメントを追加する。"""
        self._require_open("cubic_to")
        self._verbs.append(CUBIC)
        for q in (c1, c2, p):
            self._points.append((float(q[0]), float(q[1])))

    def close(self) -> None:
        """現在の輪郭を閉じる。"""
        self._require_open("close")
        self._verbs.append(CLOSE)
        self._open = False

    def move_or_line_to(self, p: Point2D, *, first: bool) -> None:
        """`first` なら move、それ以外は line を追加する。"""
        if first:
            self.move_to(p)
        else:
            self.line_to(p)

    def add_circle(self, center: Point2D, radius: float) -> None:
        """4 本の 3 次ベジエで近似した円の閉輪郭を追加する。"""
        cx, cy = float(center[0]), float(center[1])
        r = float(radius)
        k = _CIRCLE_KAPPA * r
        self.move_to((cx + r, cy))
        self.cubic_to((cx + r, cy + k), (cx + k, cy + r), (cx, cy + r))
        self.cubic_to((cx - k, cy + r), (cx - r, cy + k), (cx - r, cy))
        self.cubic_to((cx - r, cy - k), (cx - k, cy - r), (cx, cy - r))
        self.cubic_to((cx + k, cy - r), (cx + r, cy - k), (cx + r, cy))
        self.close()

    def build(self) -> Path:
        """組み立てた `Path` を返す。閉じていない輪郭が残っている場合はエラー。"""
        if self._open:
            raise ValueError("閉じていない輪郭がある（close を呼ぶ必要がある）")
        points = np.asarray(self._points, dtype=np.float64).reshape(-1, 2)
        return Path(verbs=tuple(self._verbs), points=points)

    def _require_open(self, op: str) -> None:
        if not self._open:
            raise ValueError(f"{op} の前に move_to が必要")


__all__ = [
    "CLOSE",
    "CUBIC",
    "Contour",
    "DEFAULT_CUBIC_STEPS",
    "LINE",
    "MOVE",
    "Path",
    "PathBuilder",
]
