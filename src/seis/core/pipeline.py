"""
どこで: `src/seis/core/pipeline.py`。
何を: SeisParams とノイズ源から 1 枚分のシーン（描画順に並んだパス列）を作る。
なぜ: interactive（GL 描画）と export（ヘッドレス SVG 出力）で共通のパイプラインを共有するため。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from seis.core.bezier_path import DEFAULT_FLATTEN_STEPS, BezierPath
from seis.core.effects.seisify import seisify
from seis.core.noise import NoiseSource
from seis.core.parameters import SeisParams, sanitize_params
from seis.core.primitives.joy_texture import joy_texture

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeisScene:
    """描画/出力のための 1 枚分の結果。

    Attributes
    ----------
    canvas_size:
        キャンバス寸法 (w, h)。
    base:
        変位前のベースパス。
    displaced:
        seisify 済みのパス。
    paths:
        描画順（奥 → 手前）のパス列。変位パスが最奥で、
        `draw_original_path` が有効な場合のみベースパスをその手前に重ねる。
    """

    canvas_size: tuple[float, float]
    base: BezierPath
    displaced: BezierPath
    paths: tuple[BezierPath, ...]


def render_scene(
    params: SeisParams,
    noise: NoiseSource,
    *,
    canvas_size: tuple[float, float],
    flatten_steps: int = DEFAULT_FLATTEN_STEPS,
) -> SeisScene:
    """パラメータからシーンを毎回ゼロから組み立てて返す。

    Parameters
    ----------
    params : SeisParams
        描画パラメータ。レンジ外の値はここで正規化する。
    noise : NoiseSource
        振幅シェーピングに使うノイズ源。
    canvas_size : tuple[float, float]
        キャンバス寸法 (w, h)。
    flatten_steps : int
        ベジェ平坦化の分割数。

    Returns
    -------
    SeisScene
        描画順のパス列を持つシーン。
    """

    p = sanitize_params(params)
    size = (float(canvas_size[0]), float(canvas_size[1]))

    t0 = time.perf_counter()
    base = joy_texture(
        n_vertices=p.n_vertices,
        theta_increment=p.theta_increment,
        radius=p.radius,
        inner_hole=p.inner_hole,
        canvas_size=size,
    )
    t1 = time.perf_counter()
    displaced = seisify(
        base,
        p.n_seis,
        noise=noise,
        params=p,
        canvas_size=size,
        flatten_steps=flatten_steps,
    )
    t2 = time.perf_counter()

    _logger.debug(
        "render: base=%d anchors (%.1f ms), seisify=%d samples via %s (%.1f ms)",
        len(base),
        (t1 - t0) * 1000.0,
        len(displaced),
        p.noise_function,
        (t2 - t1) * 1000.0,
    )

    paths: tuple[BezierPath, ...] = (displaced, base) if p.draw_original_path else (displaced,)
    return SeisScene(canvas_size=size, base=base, displaced=displaced, paths=paths)


__all__ = ["SeisScene", "render_scene"]
