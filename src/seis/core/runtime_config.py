# どこで: `src/seis/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 出力先やキャンバス寸法、ウィンドウ配置をコードを触らずに切り替えられるようにするため。

"""実行時設定（`config.yaml`）の探索・ロード・キャッシュを担当する。

- `config.yaml` を「同梱デフォルト → ユーザー設定（任意）」の順に適用して `RuntimeConfig` を構築
- 探索パス（CWD / HOME）と、明示指定（`set_config_path()`）の両方に対応
- 1 回ロードした結果をプロセス内でキャッシュ（設定を切り替える場合は `set_config_path()` で破棄）

実装メモ
--------
- ユーザー設定の適用は `dict.update()`（トップレベルの浅い上書き）で行う。
  ネストした mapping は「部分的にマージ」されず「丸ごと置換」される。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """seis の実行時設定。

    Attributes
    ----------
    config_path:
        実際に採用されたユーザー設定ファイルのパス。無ければ None（同梱デフォルトのみ）。
    output_dir:
        SVG などの出力先ディレクトリ。
    canvas_size:
        キャンバス寸法 (w, h)。
    stroke_color:
        線色 (r, g, b)（0..1）。
    stroke_width:
        線幅（キャンバス単位）。
    background_color:
        背景色 (r, g, b)（0..1）。描画ウィンドウで使う。
    flatten_steps:
        ベジェ 1 区間あたりの平坦化分割数。
    window_pos_draw:
        描画ウィンドウの左上座標 (x, y)。
    window_pos_parameter_gui:
        パラメータ GUI ウィンドウの左上座標 (x, y)。
    parameter_gui_window_size:
        パラメータ GUI のウィンドウサイズ (w, h)。
    """

    config_path: Path | None
    output_dir: Path
    canvas_size: tuple[float, float]
    stroke_color: tuple[float, float, float]
    stroke_width: float
    background_color: tuple[float, float, float]
    flatten_steps: int
    window_pos_draw: tuple[int, int]
    window_pos_parameter_gui: tuple[int, int]
    parameter_gui_window_size: tuple[int, int]


# `set_config_path()` で指定される「明示 config」のパス。
_EXPLICIT_CONFIG_PATH: Path | None = None
# `runtime_config()` のプロセス内キャッシュ。
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    None で明示指定を解除する。設定が変わるため `runtime_config()` のキャッシュを破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    _EXPLICIT_CONFIG_PATH = None if path is None else Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    """既定の `config.yaml` 探索候補を返す（先勝ち）。"""

    return (
        Path.cwd() / ".seis" / "config.yaml",
        Path.home() / ".config" / "seis" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    """パス文字列内の `~` と環境変数を展開して返す。"""

    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    """任意値を mapping として解釈し、dict に正規化して返す。"""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_numbers(value: Any, *, key: str, count: int, cast: type) -> tuple[Any, ...] | None:
    """任意値を長さ `count` の数値タプルとして解釈して返す。"""

    if value is None:
        return None
    try:
        seq = list(value)
    except TypeError as exc:
        raise RuntimeError(f"{key} は長さ {count} の配列である必要があります: got={value!r}") from exc
    if len(seq) != count:
        raise RuntimeError(f"{key} は長さ {count} の配列である必要があります: got={value!r}")
    try:
        return tuple(cast(v) for v in seq)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値配列である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _require(value: Any, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    """YAML テキストを読み、トップレベル mapping を dict として返す。空なら `{}`。"""

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
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱 `seis/resource/default_config.yaml` をロードする。"""

    blob = (
        resources.files("seis")
        .joinpath("resource", "default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _load_yaml_text(blob, source="seis/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    読み込み元の優先順位（後勝ち）:
    1) 同梱 `seis/resource/default_config.yaml`
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
        payload.update(_load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload.update(_load_yaml_config(explicit_path))

    version = _as_int(_require(payload.get("version"), "version"), key="version")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _require(_as_optional_path(paths.get("output_dir")), "paths.output_dir")

    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    canvas_size = _require(
        _as_numbers(canvas.get("size"), key="canvas.size", count=2, cast=float),
        "canvas.size",
    )
    if any(v <= 0.0 for v in canvas_size):
        raise ValueError(f"canvas.size は正の値である必要があります: got={canvas_size}")

    style = _as_mapping(payload.get("style"), key="style")
    stroke_color = _require(
        _as_numbers(style.get("stroke_color"), key="style.stroke_color", count=3, cast=float),
        "style.stroke_color",
    )
    background_color = _require(
        _as_numbers(style.get("background_color"), key="style.background_color", count=3, cast=float),
        "style.background_color",
    )
    stroke_width = _require(_as_float(style.get("stroke_width"), key="style.stroke_width"), "style.stroke_width")
    if stroke_width <= 0.0:
        raise ValueError(f"style.stroke_width は正の値である必要があります: got={stroke_width}")

    render = _as_mapping(payload.get("render"), key="render")
    flatten_steps = _require(
        _as_int(render.get("flatten_steps"), key="render.flatten_steps"),
        "render.flatten_steps",
    )
    if flatten_steps < 1:
        raise ValueError(f"render.flatten_steps は 1 以上である必要があります: got={flatten_steps}")

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_positions = _as_mapping(ui.get("window_positions"), key="ui.window_positions")
    window_pos_draw = _require(
        _as_numbers(window_positions.get("draw"), key="ui.window_positions.draw", count=2, cast=int),
        "ui.window_positions.draw",
    )
    window_pos_parameter_gui = _require(
        _as_numbers(
            window_positions.get("parameter_gui"),
            key="ui.window_positions.parameter_gui",
            count=2,
            cast=int,
        ),
        "ui.window_positions.parameter_gui",
    )
    parameter_gui = _as_mapping(ui.get("parameter_gui"), key="ui.parameter_gui")
    parameter_gui_window_size = _require(
        _as_numbers(
            parameter_gui.get("window_size"),
            key="ui.parameter_gui.window_size",
            count=2,
            cast=int,
        ),
        "ui.parameter_gui.window_size",
    )

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        canvas_size=(float(canvas_size[0]), float(canvas_size[1])),
        stroke_color=(float(stroke_color[0]), float(stroke_color[1]), float(stroke_color[2])),
        stroke_width=float(stroke_width),
        background_color=(
            float(background_color[0]),
            float(background_color[1]),
            float(background_color[2]),
        ),
        flatten_steps=int(flatten_steps),
        window_pos_draw=(int(window_pos_draw[0]), int(window_pos_draw[1])),
        window_pos_parameter_gui=(int(window_pos_parameter_gui[0]), int(window_pos_parameter_gui[1])),
        parameter_gui_window_size=(
            int(parameter_gui_window_size[0]),
            int(parameter_gui_window_size[1]),
        ),
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
