# どこで: `src/chainring/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: ウィンドウ寸法/fps/bpm/出力先などを、コードを変えずにユーザーが指定できるようにするため。

"""実行時設定（`config.yaml`）の探索・ロード・キャッシュを担当する。

このモジュールは、以下を提供する:

- `config.yaml` を「同梱デフォルト → ユーザー設定（任意）」の順に適用して `RuntimeConfig` を構築
- 探索パス（CWD / HOME）と、明示指定（`set_config_path()`）の両方に対応
- 1 回ロードした結果をプロセス内でキャッシュ（設定を切り替える場合は `set_config_path()` で破棄）

入出力 / 副作用
----------------
- 入力: 同梱 `chainring/resource/default_config.yaml`、任意でユーザーの `config.yaml`
- 出力: `RuntimeConfig`（不変データ）
- 副作用: ファイル読み取り、YAML パース、モジュールグローバルへのキャッシュ保存

実装メモ
--------
- ユーザー設定の適用は `dict.update()`（トップレベルの浅い上書き）で行う。
  ネストした mapping は「部分的にマージ」されず「丸ごと置換」される。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from chainring.core.color import ARGB, parse_color

logger = logging.getLogger(__name__)

_REWIND_FRAMES_DEFAULT = 10


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """chainring の実行時設定。

    Attributes
    ----------
    config_path:
        実際に採用されたユーザー設定ファイルのパス。無ければ None（同梱デフォルトのみ）。
    output_dir:
        生成物（PNG/SVG/GIF）の出力先ディレクトリ。
    animation_fps:
        `render_frame()` に渡す fps（回転速度の基準）。
    animation_bpm:
        `render_frame()` に渡す bpm。
    window_size:
        描画ウィンドウの初期サイズ (w, h)。
    window_caption:
        描画ウィンドウのタイトル。
    window_frame_rate:
        ウィンドウの再描画頻度 [1/s]。
    background:
        毎フレームのクリア色（ARGB）。
    rewind_frames:
        キー入力 1 回で巻き戻すフレーム数。
    supersample:
        ラスタライズ時の 1px あたりサブサンプル数（一辺）。
    png_scale:
        `python -m chainring export` における PNG の拡大率。
    """

    config_path: Path | None
    output_dir: Path
    animation_fps: float
    animation_bpm: float
    window_size: tuple[int, int]
    window_caption: str
    window_frame_rate: float
    background: ARGB
    rewind_frames: int
    supersample: int
    png_scale: float


# `set_config_path()` で指定される「明示 config」のパス。
_EXPLICIT_CONFIG_PATH: Path | None = None
# `runtime_config()` のプロセス内キャッシュ。設定を切り替える場合は破棄する。
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    - `path` を None にすると明示指定を解除し、既定の探索に戻る。
    - 設定が変わるため、`runtime_config()` のキャッシュを破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    """既定の `config.yaml` 探索候補を返す。

    探索順（先勝ち）:
    - `./.chainring/config.yaml`
    - `~/.config/chainring/config.yaml`
    """

    return (
        Path.cwd() / ".chainring" / "config.yaml",
        Path.home() / ".config" / "chainring" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    """任意値を mapping として解釈し、dict に正規化して返す。"""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    """任意値を (x, y) の整数ペアとして解釈して返す。"""

    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return (int(seq[0]), int(seq[1]))
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    """任意値を int として解釈して返す。"""

    if value is None:
        return None
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    """任意値を float として解釈して返す。"""

    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _require_positive(value: float | int | None, *, key: str) -> float:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    if not float(value) > 0.0:
        raise ValueError(f"{key} は正の値である必要があります: got={value}")
    return float(value)


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    """YAML テキストを読み、トップレベル mapping を dict として返す。"""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """UTF-8 の YAML ファイルを読み、dict を返す。"""

    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("chainring")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except (FileNotFoundError, ModuleNotFoundError) as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="chainring/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    読み込み元の優先順位（後勝ち）:
    1) 同梱 `chainring/resource/default_config.yaml`
    2) 探索で見つかった `config.yaml`（任意）
    3) `set_config_path()` で明示指定された `config.yaml`（任意）
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        logger.info("config.yaml を読み込みます: %s", discovered_path)
        payload.update(_load_yaml_config(discovered_path))
    if explicit_path is not None:
        logger.info("config.yaml を読み込みます: %s", explicit_path)
        payload.update(_load_yaml_config(explicit_path))

    version = _as_int(payload.get("version"), key="version")
    if version is None:
        raise RuntimeError("config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir_text = paths.get("output_dir")
    if output_dir_text is None or not str(output_dir_text).strip():
        raise RuntimeError("paths.output_dir が未設定です（同梱 default_config.yaml を確認してください）")
    output_dir = Path(os.path.expandvars(os.path.expanduser(str(output_dir_text).strip())))

    animation = _as_mapping(payload.get("animation"), key="animation")
    animation_fps = _require_positive(_as_float(animation.get("fps"), key="animation.fps"), key="animation.fps")
    animation_bpm = _require_positive(_as_float(animation.get("bpm"), key="animation.bpm"), key="animation.bpm")

    window = _as_mapping(payload.get("window"), key="window")
    window_size = _as_int_pair(window.get("size"), key="window.size")
    if window_size is None:
        raise RuntimeError("window.size が未設定です（同梱 default_config.yaml を確認してください）")
    if window_size[0] <= 0 or window_size[1] <= 0:
        raise ValueError(f"window.size は正の値である必要があります: got={window_size}")
    caption = window.get("caption")
    window_caption = "chainring" if caption is None else str(caption)
    window_frame_rate = _require_positive(
        _as_float(window.get("frame_rate"), key="window.frame_rate"), key="window.frame_rate"
    )
    background_value = window.get("background")
    if background_value is None:
        raise RuntimeError("window.background が未設定です（同梱 default_config.yaml を確認してください）")
    background = parse_color(background_value, key="window.background")

    rewind_frames = _as_int(window.get("rewind_frames"), key="window.rewind_frames")
    if rewind_frames is None:
        logger.warning("window.rewind_frames が未設定のため %d を使います", _REWIND_FRAMES_DEFAULT)
        rewind_frames = _REWIND_FRAMES_DEFAULT
    if rewind_frames < 0:
        raise ValueError(f"window.rewind_frames は 0 以上である必要があります: got={rewind_frames}")

    render = _as_mapping(payload.get("render"), key="render")
    supersample = int(
        _require_positive(_as_int(render.get("supersample"), key="render.supersample"), key="render.supersample")
    )

    export = _as_mapping(payload.get("export"), key="export")
    png = _as_mapping(export.get("png"), key="export.png")
    png_scale = _require_positive(_as_float(png.get("scale"), key="export.png.scale"), key="export.png.scale")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        animation_fps=animation_fps,
        animation_bpm=animation_bpm,
        window_size=window_size,
        window_caption=window_caption,
        window_frame_rate=window_frame_rate,
        background=background,
        rewind_frames=int(rewind_frames),
        supersample=supersample,
        png_scale=png_scale,
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = [
    "RuntimeConfig",
    "output_root_dir",
    "runtime_config",
    "set_config_path",
]
