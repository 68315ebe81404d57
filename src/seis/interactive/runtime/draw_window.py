"""
どこで: `src/seis/interactive/runtime/draw_window.py`。
何を: SeisScene を GL_LINES の頂点列へ変換し、pyglet ウィンドウへ描く。
なぜ: 頂点生成（純粋関数）と GL リソース管理を分け、前者だけをヘッドレスで検証できるようにするため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from seis.core.bezier_path import DEFAULT_FLATTEN_STEPS, flatten
from seis.core.pipeline import SeisScene


def line_vertices(scene: SeisScene, *, steps: int = DEFAULT_FLATTEN_STEPS) -> np.ndarray:
    """シーンの全パスを GL_LINES 用の頂点列 shape (2K, 3) float32 にして返す。

    キャンバス座標（y 下向き）を GL のウィンドウ座標（y 上向き）へ反転し、z は 0。
    描画順（奥 → 手前）を保つ。
    """
    _w, h = scene.canvas_size
    chunks: list[np.ndarray] = []
    for path in scene.paths:
        poly = flatten(path, steps=steps)
        if poly.shape[0] < 2:
            continue
        starts = poly[:-1]
        ends = poly[1:]
        pairs = np.empty((starts.shape[0] * 2, 2), dtype=np.float64)
        pairs[0::2] = starts
        pairs[1::2] = ends
        chunks.append(pairs)

    if not chunks:
        return np.zeros((0, 3), dtype=np.float32)

    xy = np.concatenate(chunks, axis=0)
    out = np.zeros((xy.shape[0], 3), dtype=np.float32)
    out[:, 0] = xy[:, 0]
    out[:, 1] = float(h) - xy[:, 1]
    return out


class DrawWindow:
    """シーンを描く pyglet ウィンドウ。"""

    def __init__(
        self,
        window: Any,
        *,
        stroke_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
        background_color: tuple[float, float, float] = (1.0, 1.0, 1.0),
        flatten_steps: int = DEFAULT_FLATTEN_STEPS,
    ) -> None:
        import pyglet

        self._pyglet = pyglet
        self._window = window
        self._stroke_color = tuple(float(c) for c in stroke_color)
        self._background_color = tuple(float(c) for c in background_color)
        self._flatten_steps = int(flatten_steps)
        self._program = pyglet.graphics.get_default_shader()
        self._batch = pyglet.graphics.Batch()
        self._vertex_list: Any | None = None

    @property
    def window(self) -> Any:
        return self._window

    def set_scene(self, scene: SeisScene) -> None:
        """頂点列を作り直す。"""
        if self._vertex_list is not None:
            self._vertex_list.delete()
            self._vertex_list = None

        vertices = line_vertices(scene, steps=self._flatten_steps)
        count = int(vertices.shape[0])
        if count == 0:
            return

        r, g, b = self._stroke_color
        colors = np.tile(np.array([r, g, b, 1.0], dtype=np.float32), (count, 1))
        self._vertex_list = self._program.vertex_list(
            count,
            self._pyglet.gl.GL_LINES,
            batch=self._batch,
            position=("f", vertices.ravel().tolist()),
            colors=("f", colors.ravel().tolist()),
        )

    def draw(self) -> None:
        r, g, b = self._background_color
        self._pyglet.gl.glClearColor(r, g, b, 1.0)
        self._window.clear()
        self._batch.draw()


__all__ = ["DrawWindow", "line_vertices"]
