"""実行時設定（`chainring.core.runtime_config`）の探索・上書き・検証のテスト。"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from chainring.core.color import WHITE
from chainring.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """CWD/HOME を tmp に向け、設定キャッシュを前後で破棄する。"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    set_config_path(None)
    yield
    set_config_path(None)


def test_packaged_defaults() -> None:
    cfg = runtime_config()

    assert cfg.config_path is None
    assert cfg.animation_fps == 12.0
    assert cfg.animation_bpm == 60.0
    assert cfg.window_size == (800, 800)
    assert cfg.window_frame_rate == 20.0
    assert cfg.background == WHITE
    assert cfg.rewind_frames == 10
    assert cfg.supersample == 4
    assert cfg.png_scale == 1.0
    assert output_root_dir() == Path("data/output")


def test_runtime_config_is_cached_until_path_changes(tmp_path: Path) -> None:
    first = runtime_config()
    assert runtime_config() is first

    p = tmp_path / "other.yaml"
    p.write_text("animation:\n  fps: 30\n  bpm: 90\n", encoding="utf-8")
    set_config_path(p)

    assert runtime_config() is not first
    assert runtime_config().animation_fps == 30.0


def test_discovered_config_overrides_top_level_sections(tmp_path: Path) -> None:
    d = tmp_path / ".chainring"
    d.mkdir()
    (d / "config.yaml").write_text(
        "window:\n  size: [320, 240]\n  frame_rate: 10\n  background: '#80102030'\n",
        encoding="utf-8",
    )

    cfg = runtime_config()

    assert cfg.config_path == d / "config.yaml"
    assert cfg.window_size == (320, 240)
    assert cfg.window_frame_rate == 10.0
    assert cfg.background == 0x80102030
    # window を丸ごと置換したので caption は既定値、rewind_frames は警告付きで既定値。
    assert cfg.window_caption == "chainring"
    assert cfg.rewind_frames == 10
    # 他のトップレベルは同梱デフォルトのまま。
    assert cfg.animation_fps == 12.0


def test_explicit_config_wins_over_discovered(tmp_path: Path) -> None:
    d = tmp_path / ".chainring"
    d.mkdir()
    (d / "config.yaml").write_text("animation:\n  fps: 24\n  bpm: 60\n", encoding="utf-8")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("animation:\n  fps: 48\n  bpm: 120\n", encoding="utf-8")
    set_config_path(explicit)

    cfg = runtime_config()

    assert cfg.config_path == explicit
    assert (cfg.animation_fps, cfg.animation_bpm) == (48.0, 120.0)


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    set_config_path(tmp_path / "nope.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    ("text", "exc"),
    [
        ("version: 2\n", RuntimeError),
        ("animation: 3\n", RuntimeError),
        ("animation:\n  fps: 0\n  bpm: 60\n", ValueError),
        ("window:\n  size: [800]\n  frame_rate: 20\n  background: '#FFFFFF'\n", RuntimeError),
        ("window:\n  size: [800, 800]\n  frame_rate: 20\n  background: 'zz'\n", ValueError),
        ("- just\n- a list\n", RuntimeError),
        ("animation: [unclosed\n", RuntimeError),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, text: str, exc: type[Exception]) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text(text, encoding="utf-8")
    set_config_path(p)

    with pytest.raises(exc):
        runtime_config()
