"""描画ウィンドウ用の頂点生成（GL_LINES + y 反転）のテスト。"""

from __future__ import annotations

import numpy as np

from seis.core.bezier_path import BezierPath, empty_path
from seis.core.pipeline import SeisScene
from seis.interactive.runtime.draw_window import line_vertices


def _scene(*paths: BezierPath) -> SeisScene:
    return SeisScene(canvas_size=(100.0, 50.0), base=paths[-1], displaced=paths[0], paths=paths)


def test_line_vertices_pairs_segments_and_flips_y() -> None:
    path = BezierPath(points=np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 20.0]]))
    out = line_vertices(_scene(path), steps=1)
    assert out.dtype == np.float32
    np.testing.assert_allclose(
        out,
        [
            [0.0, 50.0, 0.0],
            [10.0, 50.0, 0.0],
            [10.0, 50.0, 0.0],
            [10.0, 30.0, 0.0],
        ],
    )


def test_line_vertices_counts_flattened_segments_for_all_paths() -> None:
    a = BezierPath(points=np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 20.0]]))
    b = BezierPath(points=np.array([[5.0, 5.0], [6.0, 6.0]]))
    out = line_vertices(_scene(a, b), steps=4)
    assert out.shape == ((2 * 4 + 1 * 4) * 2, 3)


def test_line_vertices_skips_degenerate_paths() -> None:
    single = BezierPath(points=np.array([[1.0, 1.0]]))
    out = line_vertices(_scene(empty_path(), single))
    assert out.shape == (0, 3)
