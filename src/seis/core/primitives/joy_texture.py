"""
どこで: `src/seis/core/primitives/joy_texture.py`。ベースパス（joy texture）の生成。
何を: 半径と角度を同時に線形に増やす極座標列から、キャンバス中心の渦巻きパスを構築する。
なぜ: seisify で揺らす前の「元の線」を、パラメータだけから毎回作り直せるようにするため。
"""

from __future__ import annotations

import numpy as np

from seis.core.bezier_path import BezierPath, remove_last_segment, smooth_geometric

# radius（キャンバス寸法の除数）の下限。0 除算を避ける。
_MIN_RADIUS_DIVISOR = 1e-6


def polar_coords(n_vertices: int, *, inner_hole: float = 0.0) -> np.ndarray:
    """`(r, theta)` の列を shape (n+1, 2) で返す。

    Parameters
    ----------
    n_vertices : int
        分割数 n。r と theta は `inner_hole` から 1 まで `(1 - inner_hole) / n` 刻みで増える。
    inner_hole : float, default 0.0
        中心の穴の半径（r と theta の開始値）。

    Returns
    -------
    np.ndarray
        shape (n+1, 2)。最後の要素は常に `(1, 1)`。
        n <= 0 の場合は `(1, 1)` の 1 要素だけを返す。
    """
    n = int(n_vertices)
    if n <= 0:
        return np.ones((1, 2), dtype=np.float64)

    start = float(inner_hole)
    step = (1.0 - start) / float(n)
    values = start + np.arange(n, dtype=np.float64) * step
    values = np.concatenate([values, [1.0]])
    return np.stack([values, values], axis=1)


def position_texture(
    r: np.ndarray,
    theta: np.ndarray,
    *,
    canvas_size: tuple[float, float],
    radius: float,
    theta_increment: float,
) -> np.ndarray:
    """極座標 `(r, theta)` をキャンバス座標へ写して shape (K, 2) で返す。

    `min(w, h) / radius` をスケール、キャンバス中心を原点とし、角度は
    `theta * theta_increment` [rad] とする。
    """
    w, h = float(canvas_size[0]), float(canvas_size[1])
    divisor = max(float(radius), _MIN_RADIUS_DIVISOR)
    scale = min(w, h) / divisor
    cx, cy = w * 0.5, h * 0.5

    r_a = np.asarray(r, dtype=np.float64)
    angle = np.asarray(theta, dtype=np.float64) * float(theta_increment)
    x = r_a * np.cos(angle) * scale + cx
    y = r_a * np.sin(angle) * scale + cy
    return np.stack([x, y], axis=-1)


def joy_texture(
    *,
    n_vertices: int = 600,
    theta_increment: float = 585.0,
    radius: float = 2.5,
    inner_hole: float = 0.0,
    canvas_size: tuple[float, float] = (1000.0, 1000.0),
) -> BezierPath:
    """渦巻き状のベースパスを生成する。

    極座標列をキャンバスへ写し、geometric 平滑化を掛けたあと末尾の曲線を取り除く
    （末尾アンカーは片側のハンドルしか持たず、形が崩れるため）。

    Parameters
    ----------
    n_vertices : int, default 600
        頂点の分割数。
    theta_increment : float, default 585.0
        角度の倍率。
    radius : float, default 2.5
        キャンバス寸法の除数（大きいほど小さく描く）。
    inner_hole : float, default 0.0
        中心の穴の半径（0..1）。
    canvas_size : tuple[float, float]
        キャンバス寸法 (w, h)。

    Returns
    -------
    BezierPath
        平滑化済みのベースパス。2 点未満の場合は平滑化せずにそのまま返す。
    """
    coords = polar_coords(n_vertices, inner_hole=inner_hole)
    points = position_texture(
        coords[:, 0],
        coords[:, 1],
        canvas_size=canvas_size,
        radius=radius,
        theta_increment=theta_increment,
    )
    path = BezierPath(points=points)
    if len(path) < 2:
        return path
    return remove_last_segment(smooth_geometric(path))


__all__ = ["joy_texture", "polar_coords", "position_texture"]
