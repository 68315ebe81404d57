# どこで: `src/seis/core/numeric.py`。
# 何を: レンジ写像（map）・クランプ・ease-out-cubic フェードの数値プリミティブを提供する。
# なぜ: float とベクトル化済み numpy 配列の両方から同じ式で呼べるようにするため。

from __future__ import annotations

from typing import Any

import numpy as np

ArrayLike = Any


def _as_result(value: np.ndarray) -> float | np.ndarray:
    """0 次元配列は float に戻し、それ以外は配列のまま返す。"""

    if value.ndim == 0:
        return float(value)
    return value


def map_range(
    value: ArrayLike,
    in_min: ArrayLike,
    in_max: ArrayLike,
    out_min: float,
    out_max: float,
) -> float | np.ndarray:
    """`[in_min, in_max]` を `[out_min, out_max]` へアフィン写像する。

    Parameters
    ----------
    value : float or np.ndarray
        写像する値。
    in_min, in_max : float or np.ndarray
        入力レンジ。要素ごとに異なってよい（ブロードキャストする）。
    out_min, out_max : float
        出力レンジ。

    Returns
    -------
    float or np.ndarray
        写像後の値。クランプはしない（呼び出し側で `clamp()` する）。

    Notes
    -----
    入力レンジ幅が 0 の要素は、`in_min` を閾値とするハードな二値化として扱う
    （`value > in_min` なら `out_max`、それ以外は `out_min`）。
    """

    v = np.asarray(value, dtype=np.float64)
    lo = np.asarray(in_min, dtype=np.float64)
    hi = np.asarray(in_max, dtype=np.float64)
    o0 = float(out_min)
    o1 = float(out_max)

    span = hi - lo
    degenerate = span == 0.0
    safe_span = np.where(degenerate, 1.0, span)
    out = (v - lo) * (o1 - o0) / safe_span + o0
    if np.any(degenerate):
        out = np.where(degenerate, np.where(v > lo, o1, o0), out)
    return _as_result(np.asarray(out, dtype=np.float64))


def clamp(value: ArrayLike, lo: ArrayLike, hi: ArrayLike) -> float | np.ndarray:
    """`min(max(value, lo), hi)` を返す。`lo > hi` の場合は `hi` が勝つ。"""

    v = np.asarray(value, dtype=np.float64)
    out = np.minimum(np.maximum(v, lo), hi)
    return _as_result(np.asarray(out, dtype=np.float64))


def ease_out_cubic(t: ArrayLike) -> float | np.ndarray:
    """`(t - 1)^3 + 1`。t=0 で 0、t=1 で 1。"""

    v = np.asarray(t, dtype=np.float64) - 1.0
    return _as_result(v * v * v + 1.0)


def fade_factor(distance: ArrayLike, fade_dist: float) -> float | np.ndarray:
    """距離からフェード係数（0..1）を返す。

    `clamp01(distance / fade_dist)` に ease-out-cubic を適用する。
    `fade_dist <= 0` はフェード無効（常に 1）として扱う。
    """

    d = np.asarray(distance, dtype=np.float64)
    fd = float(fade_dist)
    if not fd > 0.0:
        return _as_result(np.ones_like(d))
    t = clamp(np.minimum(d, fd), 0.0, fd)
    t = map_range(t, 0.0, fd, 0.0, 1.0)
    return ease_out_cubic(t)


__all__ = ["clamp", "ease_out_cubic", "fade_factor", "map_range"]
