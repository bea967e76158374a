"""`python -m chainring export` の CLI テスト。"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from chainring.__main__ import main
from chainring.core.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """ユーザー設定を拾わないよう CWD/HOME を tmp に向ける。"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    set_config_path(None)
    yield
    set_config_path(None)


def test_export_svg_frames_to_out_dir(tmp_path: Path) -> None:
    out_dir = tmp_path / "svgs"
    code = main(
        [
            "export",
            "--fmt",
            "svg",
            "--frame",
            "0",
            "3",
            "--canvas",
            "64",
            "64",
            "--out-dir",
            str(out_dir),
        ]
    )

    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "chainring_64x64_f000.svg",
        "chainring_64x64_f003.svg",
    ]


def test_export_png_to_explicit_path(tmp_path: Path) -> None:
    out = tmp_path / "one.png"
    code = main(["--log-level", "debug", "export", "--canvas", "32", "32", "--out", str(out)])

    assert code == 0
    assert out.exists()


def test_export_uses_explicit_config(tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(
        "paths:\n  output_dir: 'rendered'\nwindow:\n  size: [24, 24]\n  frame_rate: 20\n  background: '#000000'\n",
        encoding="utf-8",
    )
    code = main(["export", "--fmt", "svg", "--config", str(cfg)])

    assert code == 0
    assert (tmp_path / "rendered" / "svg" / "chainring_24x24_f000.svg").exists()


@pytest.mark.parametrize(
    "argv",
    [
        ["export", "--out", "a.png", "--out-dir", "d"],
        ["export", "--fmt", "gif", "--frame", "1"],
        ["export", "--frame", "1", "2", "--out", "a.png"],
        ["export", "--frame", "-3"],
        ["export", "--fmt", "bmp"],
    ],
)
def test_export_argument_conflicts_exit(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2
