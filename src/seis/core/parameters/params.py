"""
どこで: `src/seis/core/parameters/params.py`。
何を: スケッチの全パラメータ（SeisParams）と UI メタ、グループ、正規化（クランプ）を定義する。
なぜ: 描画入力を GUI の配線から切り離し、純粋関数へそのまま渡せる不変データにするため。
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from .meta import ParamMeta

_logger = logging.getLogger(__name__)

NOISE_FUNCTION_CHOICES = ("nf1", "nf2", "nf3", "nf4")


@dataclass(frozen=True, slots=True)
class LayerSettings:
    """ノイズレイヤ 1 枚分の設定。"""

    multiplier: float
    sharpness: float
    opacity: float


@dataclass(frozen=True, slots=True)
class SeisParams:
    """1 回の描画で不変なパラメータ集合。

    変更は `dataclasses.replace()`（または `with_changes()`）で新しい値を作って行う。
    フィールド順は export ファイル名の JSON の並びになる。
    """

    n_seis: int = 100000
    l1_multiplier: float = 3.0
    l1_sharpness: float = 0.7
    l1_opacity: float = 0.88
    l2_multiplier: float = 0.5
    l2_sharpness: float = 0.7
    l2_opacity: float = 0.0
    l3_multiplier: float = 0.2
    l3_sharpness: float = 0.0
    l3_opacity: float = 0.7
    amp: float = 3.0
    n_noise: int = 2
    seis_smooth: float = 50.0
    noise_function: str = "nf3"
    noise_ratio: float = 1.0
    theta_increment: float = 585.0
    n_vertices: int = 600
    seed: float = 1000.0
    radius: float = 2.5
    fade_origin: bool = False
    fade_edge: bool = True
    fade_dist: float = 260.0
    inner_hole: float = 0.0
    stride: int = 2
    draw_original_path: bool = False

    def layer(self, index: int) -> LayerSettings:
        """レイヤ番号（1..3）の設定を返す。"""

        i = int(index)
        if i not in (1, 2, 3):
            raise ValueError(f"layer index は 1..3 である必要があります: got={index!r}")
        return LayerSettings(
            multiplier=float(getattr(self, f"l{i}_multiplier")),
            sharpness=float(getattr(self, f"l{i}_sharpness")),
            opacity=float(getattr(self, f"l{i}_opacity")),
        )

    def with_changes(self, **changes: Any) -> SeisParams:
        """変更を適用し、正規化した新しい SeisParams を返す。"""

        return sanitize_params(replace(self, **changes))


seis_meta: dict[str, ParamMeta] = {
    "n_seis": ParamMeta(kind="int", ui_min=0, ui_max=120000),
    "amp": ParamMeta(kind="float", ui_min=0.0, ui_max=20.0),
    "fade_origin": ParamMeta(kind="bool"),
    "fade_edge": ParamMeta(kind="bool"),
    "fade_dist": ParamMeta(kind="float", ui_min=0.0, ui_max=1000.0),
    "seis_smooth": ParamMeta(kind="float", ui_min=0.0, ui_max=200.0),
    "stride": ParamMeta(kind="int", ui_min=1, ui_max=16),
    "draw_original_path": ParamMeta(kind="bool"),
    "l1_multiplier": ParamMeta(kind="float", ui_min=0.0, ui_max=6.0),
    "l1_sharpness": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "l1_opacity": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "l2_multiplier": ParamMeta(kind="float", ui_min=0.0, ui_max=6.0),
    "l2_sharpness": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "l2_opacity": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "l3_multiplier": ParamMeta(kind="float", ui_min=0.0, ui_max=6.0),
    "l3_sharpness": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "l3_opacity": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "seed": ParamMeta(kind="float", ui_min=0.0, ui_max=2000.0),
    "noise_function": ParamMeta(kind="choice", choices=NOISE_FUNCTION_CHOICES),
    "n_noise": ParamMeta(kind="int", ui_min=1, ui_max=3),
    "noise_ratio": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "theta_increment": ParamMeta(kind="float", ui_min=0.0, ui_max=2000.0),
    "n_vertices": ParamMeta(kind="int", ui_min=0, ui_max=2000),
    "radius": ParamMeta(kind="float", ui_min=2.0, ui_max=10.0),
    "inner_hole": ParamMeta(kind="float", ui_min=0.0, ui_max=0.99),
}

# GUI の折りたたみ見出し（表示順）と所属パラメータ。
PARAM_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "seis",
        (
            "n_seis",
            "amp",
            "fade_origin",
            "fade_edge",
            "fade_dist",
            "seis_smooth",
            "stride",
            "draw_original_path",
        ),
    ),
    ("l1", ("l1_multiplier", "l1_sharpness", "l1_opacity")),
    ("l2", ("l2_multiplier", "l2_sharpness", "l2_opacity")),
    ("l3", ("l3_multiplier", "l3_sharpness", "l3_opacity")),
    ("noise", ("seed", "noise_function", "n_noise", "noise_ratio")),
    ("shape", ("theta_increment", "n_vertices", "radius", "inner_hole")),
)

PARAM_NAMES: tuple[str, ...] = tuple(f.name for f in fields(SeisParams))

_DEFAULTS = SeisParams()

_TRUE_TEXTS = {"1", "true", "yes", "on"}
_FALSE_TEXTS = {"0", "false", "no", "off"}


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and float(value) in (0.0, 1.0):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_TEXTS:
            return True
        if s in _FALSE_TEXTS:
            return False
    return None


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return v


def coerce_param_value(name: str, value: Any) -> Any:
    """1 パラメータ分の値を meta に従って正規化して返す。

    数値はレンジへクランプし、int は丸める。解釈できない値は既定値に置き換える。
    値を変更した場合は warning をログに出す。
    """

    meta = seis_meta[name]
    default = getattr(_DEFAULTS, name)

    if meta.kind == "bool":
        b = _coerce_bool(value)
        if b is None:
            _logger.warning("%s: bool として解釈できないため既定値 %r を使います: got=%r", name, default, value)
            return default
        return b

    if meta.kind == "choice":
        s = str(value).strip()
        if s not in (meta.choices or ()):
            _logger.warning("%s: 未知の選択肢のため既定値 %r を使います: got=%r", name, default, value)
            return default
        return s

    v = _coerce_number(value)
    if v is None:
        _logger.warning("%s: 数値として解釈できないため既定値 %r を使います: got=%r", name, default, value)
        return default

    lo = meta.ui_min
    hi = meta.ui_max
    clamped = v
    if lo is not None and clamped < float(lo):
        clamped = float(lo)
    if hi is not None and clamped > float(hi):
        clamped = float(hi)
    if clamped != v:
        _logger.warning("%s: レンジ [%s, %s] の外なのでクランプします: %r -> %r", name, lo, hi, value, clamped)

    if meta.kind == "int":
        return int(round(clamped))
    return float(clamped)


def sanitize_params(params: SeisParams) -> SeisParams:
    """全フィールドを正規化した SeisParams を返す。変更が無ければ同じインスタンスを返す。"""

    changes: dict[str, Any] = {}
    for name in PARAM_NAMES:
        raw = getattr(params, name)
        value = coerce_param_value(name, raw)
        if type(value) is not type(raw) or value != raw:
            changes[name] = value
    if not changes:
        return params
    return replace(params, **changes)


def params_from_mapping(
    values: Mapping[str, Any],
    *,
    base: SeisParams | None = None,
) -> SeisParams:
    """dict から SeisParams を構築する。未知キーは warning を出して無視する。"""

    start = _DEFAULTS if base is None else base
    known: dict[str, Any] = {}
    for key, value in values.items():
        name = str(key)
        if name not in seis_meta:
            _logger.warning("未知のパラメータを無視します: %s", name)
            continue
        known[name] = coerce_param_value(name, value)
    return sanitize_params(replace(start, **known))


def parse_assignment(text: str) -> tuple[str, str]:
    """`"name=value"` を `(name, value)` に分解する。"""

    name, sep, value = str(text).partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"name=value 形式で指定してください: {text!r}")
    return name, value.strip()


__all__ = [
    "LayerSettings",
    "NOISE_FUNCTION_CHOICES",
    "PARAM_GROUPS",
    "PARAM_NAMES",
    "SeisParams",
    "coerce_param_value",
    "params_from_mapping",
    "parse_assignment",
    "sanitize_params",
    "seis_meta",
]
