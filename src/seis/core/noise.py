"""
どこで: `src/seis/core/noise.py`。
何を: 3D コヒーレントノイズ源の抽象（NoiseSource）と OpenSimplex 実装を提供する。
なぜ: 振幅シェーピング側をノイズ生成アルゴリズムから切り離し、テストで決定的なスタブへ差し替えられるようにするため。
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

import numpy as np
from opensimplex import OpenSimplex  # type: ignore[import-untyped]


class NoiseSource(ABC):
    """`sample(x, y, z) -> [-1, 1]` を満たすノイズ源。

    Notes
    -----
    サブクラスは `sample()` だけ実装すればよい。
    `sample_array()` は既定で要素ごとに `sample()` を呼ぶ。
    """

    @abstractmethod
    def sample(self, x: float, y: float, z: float) -> float:
        """1 点のノイズ値を返す。"""

    def sample_array(self, xs: np.ndarray, ys: np.ndarray, z: float = 0.0) -> np.ndarray:
        """点列 (xs[i], ys[i], z) のノイズ値を float64 配列で返す。"""

        x = np.asarray(xs, dtype=np.float64).ravel()
        y = np.asarray(ys, dtype=np.float64).ravel()
        if x.shape != y.shape:
            raise ValueError(f"xs と ys の形状が一致しません: {x.shape} != {y.shape}")
        z_f = float(z)
        out = np.fromiter(
            (self.sample(float(a), float(b), z_f) for a, b in zip(x, y)),
            dtype=np.float64,
            count=int(x.shape[0]),
        )
        return out


def time_seed() -> int:
    """現在時刻（ミリ秒）由来のシードを返す。"""

    return int(time.time() * 1000.0)


class OpenSimplexNoise(NoiseSource):
    """`opensimplex` による 3D OpenSimplex ノイズ。

    Parameters
    ----------
    seed : int | None
        ノイズのシード。None の場合は現在時刻から決める。
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = int(time_seed() if seed is None else seed)
        self._gen = OpenSimplex(seed=self.seed)

    def sample(self, x: float, y: float, z: float) -> float:
        value = float(self._gen.noise3(float(x), float(y), float(z)))
        # 実装によっては ±1 をわずかに超えるため契約範囲へ丸める。
        return min(max(value, -1.0), 1.0)

    def reseeded(self, seed: int | None = None) -> OpenSimplexNoise:
        """新しいシードで独立したインスタンスを返す（self は変更しない）。"""

        if seed is None:
            seed = time_seed()
            if seed == self.seed:
                seed += 1
        return OpenSimplexNoise(seed=int(seed))

    def __repr__(self) -> str:
        return f"OpenSimplexNoise(seed={self.seed})"


def reseed(noise: NoiseSource, seed: int | None = None) -> NoiseSource:
    """ノイズ源を再シードした新しいインスタンスを返す。

    `reseeded()` を持たないノイズ源（テスト用スタブなど）は新しい OpenSimplex に置き換える。
    """

    reseeded = getattr(noise, "reseeded", None)
    if callable(reseeded):
        return reseeded(seed)
    return OpenSimplexNoise(seed=seed)


__all__ = ["NoiseSource", "OpenSimplexNoise", "reseed", "time_seed"]
