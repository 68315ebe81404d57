"""パスを等弧長でサンプルし、ノイズ由来の振幅で法線方向へ左右交互にずらす effect。"""

from __future__ import annotations

import numpy as np

from seis.core.bezier_path import (
    DEFAULT_FLATTEN_STEPS,
    BezierPath,
    empty_path,
    path_length,
    sample_at,
    smooth_geometric,
)
from seis.core.noise import NoiseSource
from seis.core.numeric import fade_factor
from seis.core.parameters import SeisParams
from seis.core.shaping import shape_amplitude

# 中心から縁までの距離を何倍して縁側フェードに使うか（縁は中心より緩やかにフェードさせる）。
_EDGE_FADE_DISTANCE_SCALE = 2.0


def alternation_signs(count: int, *, stride: int = 2) -> np.ndarray:
    """i 番目の変位の向き（+1/-1）を返す。

    `i % stride < stride / 2` なら +1。stride=2 で 1 点ごと、stride=4 で 2 点ずつ左右が入れ替わる。
    """
    n = max(int(count), 0)
    s = max(int(stride), 1)
    i = np.arange(n)
    return np.where((i % s) < (s / 2.0), 1.0, -1.0)


def fade_amplitudes(
    amp: np.ndarray,
    points: np.ndarray,
    *,
    params: SeisParams,
    canvas_size: tuple[float, float],
) -> np.ndarray:
    """中心/縁からの距離に応じた ease-out-cubic フェードを振幅へ掛けて返す。"""
    out = np.asarray(amp, dtype=np.float64)
    if not (params.fade_origin or params.fade_edge):
        return out

    w, h = float(canvas_size[0]), float(canvas_size[1])
    center = np.array([w * 0.5, h * 0.5], dtype=np.float64)
    d = np.linalg.norm(np.asarray(points, dtype=np.float64).reshape(-1, 2) - center, axis=1)

    if params.fade_origin:
        out = out * fade_factor(d, params.fade_dist)
    if params.fade_edge:
        edge_radius = h / max(float(params.radius), 1e-6)
        out = out * fade_factor((edge_radius - d) * _EDGE_FADE_DISTANCE_SCALE, params.fade_dist)
    return out


def seisify(
    path: BezierPath,
    count: int,
    *,
    noise: NoiseSource,
    params: SeisParams,
    canvas_size: tuple[float, float],
    stride: int | None = None,
    flatten_steps: int = DEFAULT_FLATTEN_STEPS,
) -> BezierPath:
    """入力パスを地震計の記録のような揺れ線に変換する。

    Parameters
    ----------
    path : BezierPath
        変位の基準となるパス。
    count : int
        出力点数 N。i 番目の点は弧長 `i / N * length` の位置から作る。
    noise : NoiseSource
        振幅シェーピングに使うノイズ源。
    params : SeisParams
        シェーピング/フェードのパラメータ。
    canvas_size : tuple[float, float]
        キャンバス寸法 (w, h)。フェードの中心と縁半径に使う。
    stride : int | None
        左右交互の周期。None なら `params.stride`。
    flatten_steps : int
        弧長計算のためのベジェ平坦化分割数。

    Returns
    -------
    BezierPath
        N 点の変位済みパス（geometric 平滑化済み）。N=0 なら空パス。
    """
    n = max(int(count), 0)
    if n == 0:
        return empty_path()

    length = path_length(path, steps=flatten_steps)
    offsets = np.arange(n, dtype=np.float64) / float(n) * length
    points, normals = sample_at(path, offsets, steps=flatten_steps)
    if len(path) == 0:
        w, h = float(canvas_size[0]), float(canvas_size[1])
        points[:] = (w * 0.5, h * 0.5)

    amp = shape_amplitude(points, noise=noise, params=params)
    amp = fade_amplitudes(amp, points, params=params, canvas_size=canvas_size)

    signs = alternation_signs(n, stride=params.stride if stride is None else stride)
    displaced = points + normals * (amp * signs)[:, None]
    return smooth_geometric(BezierPath(points=displaced))


__all__ = ["alternation_signs", "fade_amplitudes", "seisify"]
