# src/seis/core/bezier_path.py
# アンカー点 + ベジェハンドルで表す開いた 2D パスのモデルと幾何クエリ。
# 平滑化（geometric）・平坦化・弧長位置での点/法線の解決を提供する。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[import-untyped]

DEFAULT_FLATTEN_STEPS = 8
GEOMETRIC_SMOOTH_FACTOR = 0.4


@dataclass(frozen=True, slots=True)
class BezierPath:
    """アンカー点列と各アンカーの in/out ハンドルで表す開いたパス。

    Parameters
    ----------
    points : np.ndarray
        float64 型 shape (N, 2) のアンカー座標。
    handles_in : np.ndarray | None
        shape (N, 2) の入りハンドル（アンカーからの相対ベクトル）。None なら 0。
    handles_out : np.ndarray | None
        shape (N, 2) の出ハンドル（アンカーからの相対ベクトル）。None なら 0。

    Notes
    -----
    アンカー i と i+1 の間の曲線は、制御点
    `(p[i], p[i] + out[i], p[i+1] + in[i+1], p[i+1])` の 3 次ベジェとする。
    不変性を契約とし、配列は writeable=False で保持する。
    """

    points: np.ndarray
    handles_in: np.ndarray | None = None
    handles_out: np.ndarray | None = None

    def __post_init__(self) -> None:
        """配列形状を検証し、float64 の読み取り専用配列に固定する。"""
        points = np.array(self.points, dtype=np.float64, copy=True)
        if points.ndim == 1 and points.size == 0:
            points = points.reshape(0, 2)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"points は shape (N,2) の配列である必要がある: shape={points.shape}")

        arrays = [points]
        for name in ("handles_in", "handles_out"):
            raw = getattr(self, name)
            if raw is None:
                h = np.zeros_like(points)
            else:
                h = np.array(raw, dtype=np.float64, copy=True)
                if h.ndim == 1 and h.size == 0:
                    h = h.reshape(0, 2)
                if h.shape != points.shape:
                    raise ValueError(
                        f"{name} は points と同じ shape である必要がある: "
                        f"{h.shape} != {points.shape}"
                    )
            arrays.append(h)

        for a in arrays:
            a.setflags(write=False)

        object.__setattr__(self, "points", arrays[0])
        object.__setattr__(self, "handles_in", arrays[1])
        object.__setattr__(self, "handles_out", arrays[2])

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def n_curves(self) -> int:
        """アンカー間の曲線数（N-1、空なら 0）。"""
        return max(len(self) - 1, 0)


def empty_path() -> BezierPath:
    """空のパスを返す。"""
    return BezierPath(points=np.zeros((0, 2), dtype=np.float64))


def smooth_geometric(path: BezierPath, *, factor: float = GEOMETRIC_SMOOTH_FACTOR) -> BezierPath:
    """前後のアンカーから接線方向のハンドルを付けて滑らかにする。

    両隣を持つ内部アンカーだけを対象にし、端点のハンドルは変更しない。
    ハンドル長は前後の区間長の比で配分する。

    Parameters
    ----------
    path : BezierPath
        入力パス。
    factor : float, default 0.4
        ハンドル長の係数。

    Returns
    -------
    BezierPath
        ハンドルを更新したパス（アンカーは同一）。
    """
    n = len(path)
    if n < 3:
        return path

    p = path.points
    prev = p[:-2]
    cur = p[1:-1]
    nxt = p[2:]

    d1 = np.linalg.norm(cur - prev, axis=1)
    d2 = np.linalg.norm(nxt - cur, axis=1)
    total = d1 + d2
    t = float(factor)
    # 前後とも同一点に重なるアンカーはハンドル 0 のままにする。
    k = np.where(total > 0.0, t * d1 / np.where(total > 0.0, total, 1.0), 0.0)
    k_out = np.where(total > 0.0, k - t, 0.0)
    vector = prev - nxt

    handles_in = np.array(path.handles_in, copy=True)
    handles_out = np.array(path.handles_out, copy=True)
    handles_in[1:-1] = vector * k[:, None]
    handles_out[1:-1] = vector * k_out[:, None]
    return BezierPath(points=p, handles_in=handles_in, handles_out=handles_out)


def remove_last_segment(path: BezierPath) -> BezierPath:
    """末尾のアンカー（とその曲線）を取り除いたパスを返す。"""
    if len(path) == 0:
        return path
    return BezierPath(
        points=path.points[:-1],
        handles_in=path.handles_in[:-1],
        handles_out=path.handles_out[:-1],
    )


def flatten(path: BezierPath, *, steps: int = DEFAULT_FLATTEN_STEPS) -> np.ndarray:
    """各ベジェ曲線を `steps` 分割して折れ線化し、shape (M, 2) で返す。

    M は `n_curves * steps + 1`（空パスは 0、1 点パスは 1）。
    """
    n = len(path)
    if n == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if n == 1:
        return np.array(path.points, dtype=np.float64, copy=True)

    steps_i = max(int(steps), 1)
    p = path.points
    p0 = p[:-1]
    p1 = p[:-1] + path.handles_out[:-1]
    p2 = p[1:] + path.handles_in[1:]
    p3 = p[1:]

    t = np.linspace(0.0, 1.0, steps_i, endpoint=False)[None, :, None]
    mt = 1.0 - t
    # (n_curves, steps, 2)
    pts = (
        (mt * mt * mt) * p0[:, None, :]
        + (3.0 * mt * mt * t) * p1[:, None, :]
        + (3.0 * mt * t * t) * p2[:, None, :]
        + (t * t * t) * p3[:, None, :]
    )
    out = np.concatenate([pts.reshape(-1, 2), p[-1:]], axis=0)
    return out


def _cumulative_lengths(vertices: np.ndarray) -> np.ndarray:
    if vertices.shape[0] == 0:
        return np.zeros((0,), dtype=np.float64)
    seg = np.linalg.norm(np.diff(vertices, axis=0), axis=1)
    return np.concatenate([[0.0], np.cumsum(seg)])


def path_length(path: BezierPath, *, steps: int = DEFAULT_FLATTEN_STEPS) -> float:
    """平坦化した折れ線としての全長を返す。"""
    cum = _cumulative_lengths(flatten(path, steps=steps))
    if cum.shape[0] == 0:
        return 0.0
    return float(cum[-1])


def _segment_tangents(vertices: np.ndarray) -> np.ndarray:
    """各区間の単位接線を返す。長さ 0 の区間は近傍の接線を引き継ぐ。"""
    d = np.diff(vertices, axis=0)
    length = np.linalg.norm(d, axis=1)
    valid = length > 0.0
    tangents = np.zeros_like(d)
    tangents[valid] = d[valid] / length[valid, None]
    if not np.any(valid):
        return tangents

    # 前方 → 後方の順に、直近の有効な接線で埋める。
    idx = np.where(valid, np.arange(valid.shape[0]), -1)
    idx = np.maximum.accumulate(idx)
    first_valid = int(np.argmax(valid))
    idx[idx < 0] = first_valid
    return tangents[idx]


@njit(cache=True)
def _sample_polyline_njit(
    vertices: np.ndarray,
    cum: np.ndarray,
    tangents: np.ndarray,
    offsets: np.ndarray,
    out_points: np.ndarray,
    out_normals: np.ndarray,
) -> None:
    n_seg = vertices.shape[0] - 1
    total = cum[n_seg]
    for i in range(offsets.shape[0]):
        o = offsets[i]
        if o < 0.0:
            o = 0.0
        elif o > total:
            o = total

        j = np.searchsorted(cum, o, side="right") - 1
        if j < 0:
            j = 0
        elif j > n_seg - 1:
            j = n_seg - 1

        seg_len = cum[j + 1] - cum[j]
        t = 0.0
        if seg_len > 0.0:
            t = (o - cum[j]) / seg_len

        out_points[i, 0] = vertices[j, 0] + t * (vertices[j + 1, 0] - vertices[j, 0])
        out_points[i, 1] = vertices[j, 1] + t * (vertices[j + 1, 1] - vertices[j, 1])
        # 接線 (tx, ty) を -90° 回転した (ty, -tx) を法線とする。
        out_normals[i, 0] = tangents[j, 1]
        out_normals[i, 1] = -tangents[j, 0]


def sample_at(
    path: BezierPath,
    offsets: np.ndarray,
    *,
    steps: int = DEFAULT_FLATTEN_STEPS,
) -> tuple[np.ndarray, np.ndarray]:
    """弧長位置 `offsets` の点と単位法線を返す。

    Parameters
    ----------
    path : BezierPath
        対象パス。
    offsets : np.ndarray
        先頭からの弧長。範囲外は [0, length] にクランプする。
    steps : int
        平坦化の分割数。

    Returns
    -------
    (points, normals) : tuple[np.ndarray, np.ndarray]
        いずれも shape (K, 2) の float64 配列。平坦化した折れ線上で線形補間する。
        長さ 0 のパスでは法線は 0 ベクトルになる。
    """
    offs = np.ascontiguousarray(np.asarray(offsets, dtype=np.float64).ravel())
    k = int(offs.shape[0])
    points = np.zeros((k, 2), dtype=np.float64)
    normals = np.zeros((k, 2), dtype=np.float64)
    if k == 0:
        return points, normals

    vertices = flatten(path, steps=steps)
    if vertices.shape[0] == 0:
        return points, normals
    if vertices.shape[0] == 1:
        points[:] = vertices[0]
        return points, normals

    vertices = np.ascontiguousarray(vertices)
    cum = _cumulative_lengths(vertices)
    tangents = np.ascontiguousarray(_segment_tangents(vertices))
    _sample_polyline_njit(vertices, cum, tangents, offs, points, normals)
    return points, normals


__all__ = [
    "BezierPath",
    "DEFAULT_FLATTEN_STEPS",
    "empty_path",
    "flatten",
    "path_length",
    "remove_last_segment",
    "sample_at",
    "smooth_geometric",
]
