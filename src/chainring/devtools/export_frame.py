"""
どこで: `src/chainring/devtools/export_frame.py`。
何を: `python -m chainring export ...` でフレームを headless に PNG/SVG、1 周期を GIF に書き出す。
なぜ: ウィンドウ無しで特定フレームを画像として残し、見比べられるようにするため。
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from chainring.core.frame import frame_timing
from chainring.core.output_paths import animation_output_path, frame_output_path
from chainring.core.runtime_config import runtime_config, set_config_path
from chainring.export.image import export_gif, export_png
from chainring.export.svg import export_svg

_FORMATS = ("png", "svg", "gif")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m chainring export")
    p.add_argument(
        "--frame",
        nargs="+",
        type=int,
        default=None,
        help="書き出すフレーム番号（複数指定可、既定: 0）。gif では指定できない",
    )
    p.add_argument(
        "--fmt",
        choices=_FORMATS,
        default="png",
        help="出力形式（既定: png）。gif は 1 周期分のアニメーション",
    )
    p.add_argument(
        "--canvas",
        nargs=2,
        type=int,
        default=None,
        metavar=("W", "H"),
        help="canvas_size (width height)。既定: config の window.size",
    )
    p.add_argument("--fps", type=float, default=None, help="既定: config の animation.fps")
    p.add_argument("--bpm", type=float, default=None, help="既定: config の animation.bpm")
    p.add_argument(
        "--out",
        default=None,
        help="出力パス（--frame が 1 つのとき、または gif のときのみ）",
    )
    p.add_argument(
        "--out-dir",
        default=None,
        help="出力ディレクトリ（省略時: 既定の出力先）",
    )
    p.add_argument(
        "--run-id",
        default=None,
        help="既定出力パスの run_id（ファイル名 suffix）",
    )
    p.add_argument(
        "--config",
        default=None,
        help="config.yaml のパス（指定した場合は探索より優先）",
    )

    args = p.parse_args(argv)

    if args.out is not None and args.out_dir is not None:
        p.error("--out と --out-dir は同時に指定できません")
    if args.fmt == "gif" and args.frame is not None:
        p.error("gif は 1 周期分を書き出すため --frame は指定できません")
    if args.out is not None and args.frame is not None and len(args.frame) != 1:
        p.error("--out は --frame が 1 つのときだけ指定できます（複数枚は --out-dir を使ってください）")
    if args.frame is not None and any(int(f) < 0 for f in args.frame):
        p.error("--frame は 0 以上である必要があります")
    if args.canvas is not None and (args.canvas[0] <= 0 or args.canvas[1] <= 0):
        p.error("--canvas は正の値である必要があります")

    return args


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)
    cfg = runtime_config()

    canvas_w, canvas_h = cfg.window_size if args.canvas is None else args.canvas
    canvas_size = (int(canvas_w), int(canvas_h))
    fps = cfg.animation_fps if args.fps is None else float(args.fps)
    bpm = cfg.animation_bpm if args.bpm is None else float(args.bpm)
    timing = frame_timing(fps, bpm)

    out_path = None if args.out is None else Path(str(args.out))
    out_dir = None if args.out_dir is None else Path(str(args.out_dir))

    if args.fmt == "gif":
        path = out_path or animation_output_path(
            "gif", canvas_size=canvas_size, run_id=args.run_id, out_dir=out_dir
        )
        export_gif(
            path,
            canvas_size=canvas_size,
            fps=fps,
            bpm=bpm,
            background=cfg.background,
            supersample=cfg.supersample,
        )
        print(f"Saved GIF: {path} ({timing.cycle_length} frames)")
        return 0

    frames = [0] if args.frame is None else [int(f) for f in args.frame]
    for frame in frames:
        path = out_path or frame_output_path(
            args.fmt,
            frame=frame,
            canvas_size=canvas_size,
            n_frames=timing.cycle_length,
            run_id=args.run_id,
            out_dir=out_dir,
        )
        if args.fmt == "svg":
            export_svg(frame, path, canvas_size=canvas_size, fps=fps, bpm=bpm, background=cfg.background)
        else:
            export_png(
                frame,
                path,
                canvas_size=canvas_size,
                fps=fps,
                bpm=bpm,
                background=cfg.background,
                supersample=cfg.supersample,
                scale=cfg.png_scale,
            )
        print(f"Saved {args.fmt.upper()}: {path} (frame={frame})")

    return 0


__all__ = ["main"]
