# どこで: `src/chainring/core/output_paths.py`。
# 何を: export するフレーム画像/アニメーションの既定保存パスを決める。
# なぜ: `output/{kind}/` 配下に canvas 寸法とフレーム番号入りの名前で整理して保存するため。

from __future__ import annotations

import re
from pathlib import Path

from chainring.core.runtime_config import output_root_dir

_BASE_STEM = "chainring"


def _sanitize_run_id(run_id: str) -> str:
    """run_id をファイル名の一部として使える形に正規化して返す。"""

    return re.sub(r"[^A-Za-z0-9._-]+", "_", str(run_id))


def _run_id_suffix(run_id: str | None) -> str:
    """run_id の接尾辞（例: `_v1`）を返す。未指定なら空文字を返す。"""

    if run_id is None:
        return ""
    s = str(run_id).strip()
    if not s:
        return ""
    sanitized = _sanitize_run_id(s)
    if not sanitized:
        return ""
    return f"_{sanitized}"


def _canvas_size_suffix(canvas_size: tuple[int, int]) -> str:
    """canvas_size の接尾辞（例: `_800x800`）を返す。"""

    w, h = canvas_size
    if int(w) <= 0 or int(h) <= 0:
        raise ValueError("canvas_size は正の値である必要がある")
    return f"_{int(w)}x{int(h)}"


def frame_width(n_frames: int) -> int:
    """フレーム番号の桁数（最低 3 桁）を返す。"""

    return max(3, len(str(max(0, int(n_frames) - 1))))


def frame_output_path(
    fmt: str,
    *,
    frame: int,
    canvas_size: tuple[int, int],
    n_frames: int = 1,
    run_id: str | None = None,
    out_dir: Path | None = None,
) -> Path:
    """1 フレーム画像の保存先パスを返す。

    Notes
    -----
    パスは `{out_dir}/chainring_{W}x{H}_f{frame}{_run_id}.{fmt}`。
    `out_dir` 未指定なら `{output_root}/{fmt}/`。
    """

    ext = str(fmt).lower().strip()
    idx = int(frame)
    if idx < 0:
        raise ValueError("frame は 0 以上である必要がある")
    directory = out_dir if out_dir is not None else output_root_dir() / ext
    name = (
        f"{_BASE_STEM}{_canvas_size_suffix(canvas_size)}"
        f"_f{idx:0{frame_width(n_frames)}d}{_run_id_suffix(run_id)}.{ext}"
    )
    return Path(directory) / name


def animation_output_path(
    fmt: str,
    *,
    canvas_size: tuple[int, int],
    run_id: str | None = None,
    out_dir: Path | None = None,
) -> Path:
    """アニメーション（1 周期分）の保存先パスを返す。"""

    ext = str(fmt).lower().strip()
    directory = out_dir if out_dir is not None else output_root_dir() / ext
    name = f"{_BASE_STEM}{_canvas_size_suffix(canvas_size)}{_run_id_suffix(run_id)}.{ext}"
    return Path(directory) / name


__all__ = ["animation_output_path", "frame_output_path", "frame_width"]
