"""core.numeric（map / clamp / ease-out-cubic フェード）のテスト。"""

from __future__ import annotations

import numpy as np

from seis.core.numeric import clamp, ease_out_cubic, fade_factor, map_range


def test_map_range_is_affine_and_unclamped() -> None:
    assert map_range(0.5, 0.0, 1.0, 0.0, 10.0) == 5.0
    assert map_range(2.0, 0.0, 1.0, 0.0, 10.0) == 20.0
    assert map_range(-1.0, -1.0, 1.0, 0.0, 1.0) == 0.0
    assert isinstance(map_range(0.25, 0.0, 1.0, 0.0, 1.0), float)


def test_map_range_broadcasts_per_element_input_range() -> None:
    out = map_range(np.array([0.5, 0.5]), 0.0, np.array([1.0, 0.5]), 0.0, 1.0)
    np.testing.assert_allclose(out, [0.5, 1.0])


def test_map_range_zero_width_span_is_hard_threshold() -> None:
    out = map_range(np.array([-0.1, 0.0, 0.1]), 0.0, 0.0, 0.0, 1.0)
    assert np.all(np.isfinite(out))
    np.testing.assert_array_equal(out, [0.0, 0.0, 1.0])


def test_clamp_scalar_and_array() -> None:
    assert clamp(1.5, 0.0, 1.0) == 1.0
    assert clamp(-0.5, 0.0, 1.0) == 0.0
    np.testing.assert_array_equal(clamp(np.array([0.2, 2.0]), np.array([0.5, 0.0]), 1.0), [0.5, 1.0])


def test_ease_out_cubic_endpoints_and_monotonic() -> None:
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(1.0) == 1.0
    assert ease_out_cubic(0.5) == 0.875
    t = np.linspace(0.0, 1.0, 33)
    assert np.all(np.diff(ease_out_cubic(t)) > 0.0)


def test_fade_factor_ramps_to_one_at_fade_distance() -> None:
    out = fade_factor(np.array([0.0, 130.0, 260.0, 1000.0]), 260.0)
    np.testing.assert_allclose(out, [0.0, 0.875, 1.0, 1.0])


def test_fade_factor_negative_distance_is_zero() -> None:
    assert fade_factor(-5.0, 100.0) == 0.0


def test_fade_factor_disabled_when_fade_dist_not_positive() -> None:
    np.testing.assert_array_equal(fade_factor(np.array([0.0, 5.0]), 0.0), [1.0, 1.0])
