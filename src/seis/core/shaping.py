"""
どこで: `src/seis/core/shaping.py`。
何を: 3 枚のノイズレイヤ（l1/l2/l3）を合成し、サンプル点ごとの変位振幅を返す関数群（nf1〜nf4）。
なぜ: 閾値付きノイズの重ね合わせで「筆圧の揺らぎ」を作る部分を、描画やパス操作から独立させるため。

各関数は shape (N, 2) の点列を受け取り、shape (N,) の振幅配列を返す（ベクトル化）。
レイヤごとの一時値 `a` は次のレイヤへ持ち越して加算する（前レイヤの反転値が下駄になる）。
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from seis.core.noise import NoiseSource
from seis.core.numeric import clamp, map_range
from seis.core.parameters import SeisParams

NoiseFunction = Callable[[np.ndarray, NoiseSource, SeisParams], np.ndarray]

_NOISE_FUNCTIONS: dict[str, NoiseFunction] = {}


def noise_function(name: str) -> Callable[[NoiseFunction], NoiseFunction]:
    """振幅シェーピング関数を名前で登録するデコレータ。"""

    def decorator(func: NoiseFunction) -> NoiseFunction:
        _NOISE_FUNCTIONS[str(name)] = func
        return func

    return decorator


def noise_function_names() -> tuple[str, ...]:
    """登録済みのシェーピング関数名を返す。"""
    return tuple(_NOISE_FUNCTIONS)


def layer_noise(points: np.ndarray, noise: NoiseSource, params: SeisParams, index: int) -> np.ndarray:
    """レイヤ `index` の空間周波数で点列のノイズ値を返す。

    座標は `x / seis_smooth * multiplier` でスケールする。
    `seis_smooth <= 0` の場合は原点（定数ノイズ）をサンプルする。
    """
    p = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    layer = params.layer(index)
    smooth = float(params.seis_smooth)
    if smooth > 0.0:
        xs = p[:, 0] / smooth * layer.multiplier
        ys = p[:, 1] / smooth * layer.multiplier
    else:
        xs = np.zeros(p.shape[0], dtype=np.float64)
        ys = np.zeros(p.shape[0], dtype=np.float64)
    return noise.sample_array(xs, ys, 0.0)


def _threshold_step(
    a: np.ndarray,
    n: np.ndarray,
    *,
    in_min: float,
    sharpness: float | np.ndarray,
    floor: float | np.ndarray,
) -> np.ndarray:
    """`a += map(n, in_min, 1 - sharpness, 0, 1)` → abs → 下限 floor でクランプ。"""
    a = a + map_range(n, in_min, 1.0 - np.asarray(sharpness, dtype=np.float64), 0.0, 1.0)
    a = np.abs(a)
    return np.asarray(clamp(a, floor, 1.0), dtype=np.float64).reshape(-1)


def _subtract_layer(
    amp: np.ndarray,
    a: np.ndarray,
    n: np.ndarray,
    *,
    in_min: float,
    sharpness: float | np.ndarray,
    floor: float | np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    a = _threshold_step(a, n, in_min=in_min, sharpness=sharpness, floor=floor)
    a = 1.0 - a
    amp = np.asarray(clamp(amp - a, 0.0, 1.0), dtype=np.float64).reshape(-1)
    return amp, a


@noise_function("nf3")
def nf3(points: np.ndarray, noise: NoiseSource, params: SeisParams) -> np.ndarray:
    """l1 → l2 → l3 の順に閾値ノイズの反転値を振幅 1 から差し引く。"""
    count = int(np.asarray(points).reshape(-1, 2).shape[0])
    amp = np.ones(count, dtype=np.float64)
    a = np.zeros(count, dtype=np.float64)

    for index, in_min in ((1, 0.0), (2, 0.0), (3, -1.0)):
        layer = params.layer(index)
        n = layer_noise(points, noise, params, index)
        amp, a = _subtract_layer(
            amp, a, n, in_min=in_min, sharpness=layer.sharpness, floor=layer.opacity
        )

    return amp * float(params.amp)


def _layer2_driven(
    points: np.ndarray,
    noise: NoiseSource,
    params: SeisParams,
    *,
    floor_from_layer2: bool,
) -> np.ndarray:
    count = int(np.asarray(points).reshape(-1, 2).shape[0])
    amp = np.ones(count, dtype=np.float64)

    l2 = params.layer(2)
    a1 = _threshold_step(
        np.zeros(count, dtype=np.float64),
        layer_noise(points, noise, params, 2),
        in_min=0.0,
        sharpness=l2.sharpness,
        floor=l2.opacity,
    )
    a1 = 1.0 - a1

    # l1 は l2 由来の a1 を閾値（と nf2 では下限）に使う。
    floor: float | np.ndarray = a1 if floor_from_layer2 else 0.0
    amp, a = _subtract_layer(
        amp,
        np.zeros(count, dtype=np.float64),
        layer_noise(points, noise, params, 1),
        in_min=0.0,
        sharpness=a1,
        floor=floor,
    )

    l3 = params.layer(3)
    amp, _a = _subtract_layer(
        amp,
        a,
        layer_noise(points, noise, params, 3),
        in_min=-1.0,
        sharpness=l3.sharpness,
        floor=l3.opacity,
    )
    return amp * float(params.amp)


@noise_function("nf1")
def nf1(points: np.ndarray, noise: NoiseSource, params: SeisParams) -> np.ndarray:
    """l2 で l1 の閾値を変調する（l1 の下限は 0）。"""
    return _layer2_driven(points, noise, params, floor_from_layer2=False)


@noise_function("nf2")
def nf2(points: np.ndarray, noise: NoiseSource, params: SeisParams) -> np.ndarray:
    """l2 で l1 の閾値と下限を変調する。"""
    return _layer2_driven(points, noise, params, floor_from_layer2=True)


@noise_function("nf4")
def nf4(points: np.ndarray, noise: NoiseSource, params: SeisParams) -> np.ndarray:
    """先頭 `n_noise` 枚のレイヤを加算する。k 枚目の寄与は `noise_ratio**k` 倍。"""
    count = int(np.asarray(points).reshape(-1, 2).shape[0])
    amp = np.zeros(count, dtype=np.float64)
    a = np.zeros(count, dtype=np.float64)
    n_layers = min(max(int(params.n_noise), 1), 3)
    ratio = float(params.noise_ratio)

    for k in range(n_layers):
        index = k + 1
        layer = params.layer(index)
        a = _threshold_step(
            a,
            layer_noise(points, noise, params, index),
            in_min=0.0,
            sharpness=layer.sharpness,
            floor=layer.opacity,
        )
        amp = amp + (ratio**k) * a

    return amp * float(params.amp)


def shape_amplitude(
    points: np.ndarray,
    *,
    noise: NoiseSource,
    params: SeisParams,
    name: str | None = None,
) -> np.ndarray:
    """`name`（既定は `params.noise_function`）のシェーピング関数で振幅を返す。"""
    key = str(params.noise_function if name is None else name)
    func = _NOISE_FUNCTIONS.get(key)
    if func is None:
        raise ValueError(
            f"未知の noise_function です: {key!r}（候補: {', '.join(noise_function_names())}）"
        )
    return func(points, noise, params)


__all__ = [
    "layer_noise",
    "nf1",
    "nf2",
    "nf3",
    "nf4",
    "noise_function",
    "noise_function_names",
    "shape_amplitude",
]
