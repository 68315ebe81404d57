"""core.bezier_path（パスモデル・geometric 平滑化・平坦化・弧長サンプリング）のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from seis.core.bezier_path import (
    BezierPath,
    empty_path,
    flatten,
    path_length,
    remove_last_segment,
    sample_at,
    smooth_geometric,
)


def _line(*points: tuple[float, float]) -> BezierPath:
    return BezierPath(points=np.array(points, dtype=np.float64))


def test_bezier_path_normalizes_arrays_and_freezes_them() -> None:
    path = _line((0, 0), (1, 2))
    assert path.points.dtype == np.float64
    assert path.handles_in.shape == (2, 2)
    np.testing.assert_array_equal(path.handles_out, 0.0)
    assert len(path) == 2
    assert path.n_curves == 1
    with pytest.raises(ValueError):
        path.points[0, 0] = 5.0


def test_bezier_path_rejects_bad_shapes() -> None:
    with pytest.raises(ValueError):
        BezierPath(points=np.zeros((3, 3)))
    with pytest.raises(ValueError):
        BezierPath(points=np.zeros((3, 2)), handles_in=np.zeros((2, 2)))


def test_empty_path() -> None:
    path = empty_path()
    assert len(path) == 0
    assert path.n_curves == 0
    assert flatten(path).shape == (0, 2)
    assert path_length(path) == 0.0


def test_smooth_geometric_sets_interior_handles_by_segment_ratio() -> None:
    path = smooth_geometric(_line((0, 0), (1, 0), (3, 0)))
    np.testing.assert_allclose(path.handles_in[1], [-0.4, 0.0])
    np.testing.assert_allclose(path.handles_out[1], [0.8, 0.0])
    # 端点は変更しない。
    np.testing.assert_array_equal(path.handles_in[0], [0.0, 0.0])
    np.testing.assert_array_equal(path.handles_out[-1], [0.0, 0.0])
    np.testing.assert_array_equal(path.points, [[0, 0], [1, 0], [3, 0]])


def test_smooth_geometric_keeps_coincident_anchor_handles_zero() -> None:
    path = smooth_geometric(_line((2, 2), (2, 2), (2, 2)))
    assert np.all(np.isfinite(path.handles_in))
    np.testing.assert_array_equal(path.handles_in, 0.0)
    np.testing.assert_array_equal(path.handles_out, 0.0)


def test_smooth_geometric_short_paths_unchanged() -> None:
    path = _line((0, 0), (1, 1))
    assert smooth_geometric(path) is path


def test_remove_last_segment() -> None:
    path = remove_last_segment(smooth_geometric(_line((0, 0), (1, 0), (3, 0))))
    assert len(path) == 2
    np.testing.assert_allclose(path.handles_out[1], [0.8, 0.0])
    assert len(remove_last_segment(empty_path())) == 0


def test_flatten_counts_and_endpoints() -> None:
    path = _line((0, 0), (4, 0), (4, 4))
    out = flatten(path, steps=8)
    assert out.shape == (2 * 8 + 1, 2)
    np.testing.assert_allclose(out[0], [0, 0])
    np.testing.assert_allclose(out[8], [4, 0])
    np.testing.assert_allclose(out[-1], [4, 4])
    assert flatten(_line((1, 2)), steps=8).shape == (1, 2)


def test_path_length_of_straight_segments() -> None:
    assert path_length(_line((0, 0), (3, 4))) == pytest.approx(5.0)
    assert path_length(_line((0, 0), (3, 0), (3, 2))) == pytest.approx(5.0)


def test_sample_at_interpolates_and_returns_clockwise_normal() -> None:
    path = _line((0, 0), (10, 0))
    points, normals = sample_at(path, np.array([0.0, 2.5, 10.0]))
    np.testing.assert_allclose(points, [[0, 0], [2.5, 0], [10, 0]], atol=1e-12)
    np.testing.assert_allclose(normals, [[0, -1], [0, -1], [0, -1]], atol=1e-12)


def test_sample_at_clamps_offsets_outside_path() -> None:
    path = _line((0, 0), (0, 10))
    points, normals = sample_at(path, np.array([-3.0, 42.0]))
    np.testing.assert_allclose(points, [[0, 0], [0, 10]], atol=1e-12)
    np.testing.assert_allclose(normals, [[1, 0], [1, 0]], atol=1e-12)


def test_sample_at_unit_normals_on_curved_path() -> None:
    path = smooth_geometric(_line((0, 0), (5, 3), (9, -2), (14, 1)))
    offsets = np.linspace(0.0, path_length(path), 50)
    _points, normals = sample_at(path, offsets)
    np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-9)


def test_sample_at_zero_length_path_has_zero_normals() -> None:
    points, normals = sample_at(_line((3, 3), (3, 3)), np.array([0.0, 1.0]))
    np.testing.assert_allclose(points, [[3, 3], [3, 3]])
    np.testing.assert_array_equal(normals, 0.0)

    points, normals = sample_at(_line((7, 1)), np.array([0.0]))
    np.testing.assert_allclose(points, [[7, 1]])
    np.testing.assert_array_equal(normals, 0.0)
