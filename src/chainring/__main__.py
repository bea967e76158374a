# どこで: `src/chainring/__main__.py`。
# 何を: `python -m chainring ...` の CLI エントリポイントを提供する。
# なぜ: プレビューウィンドウと headless export を短い導線で実行できるようにするため。

from __future__ import annotations

import argparse
import logging
import sys

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="python -m chainring")
    p.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="ログレベル（既定: WARNING）",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="プレビューウィンドウでアニメーションを表示する")
    run_p.add_argument("--config", default=None, help="config.yaml のパス")
    run_p.add_argument(
        "--size",
        nargs=2,
        type=int,
        default=None,
        metavar=("W", "H"),
        help="ウィンドウの初期サイズ。既定: config の window.size",
    )
    sub.add_parser(
        "export",
        help="フレームを PNG/SVG、1 周期を GIF として書き出す",
        add_help=False,
    )

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "run":
        if rest:
            p.error(f"unrecognized arguments: {' '.join(rest)}")
        if args.size is not None and (args.size[0] <= 0 or args.size[1] <= 0):
            p.error("--size は正の値である必要があります")

        from chainring.core.runtime_config import set_config_path
        from chainring.interactive.run import run

        if args.config is not None:
            set_config_path(args.config)
        run(size=None if args.size is None else (int(args.size[0]), int(args.size[1])))
        return 0

    if args.cmd == "export":
        from chainring.devtools import export_frame

        export_argv = list(rest)
        if export_argv and export_argv[0] == "--":
            export_argv = export_argv[1:]
        return int(export_frame.main(export_argv))

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
