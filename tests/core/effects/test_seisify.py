"""seisify effect（弧長サンプリング + 法線方向の左右交互変位）のテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from seis.core.bezier_path import BezierPath, empty_path
from seis.core.effects.seisify import alternation_signs, fade_amplitudes, seisify
from seis.core.noise import NoiseSource
from seis.core.parameters import SeisParams
from seis.core.primitives.joy_texture import joy_texture


class _ConstantNoise(NoiseSource):
    def __init__(self, value: float) -> None:
        self.value = float(value)

    def sample(self, x: float, y: float, z: float) -> float:
        return self.value


_NO_FADE = SeisParams(fade_origin=False, fade_edge=False)
_CANVAS = (800.0, 800.0)


def _line() -> BezierPath:
    return BezierPath(points=np.array([[0.0, 0.0], [100.0, 0.0]]))


@pytest.mark.parametrize("count", [0, 1, 600, 100000])
def test_output_length_equals_requested_count(count: int) -> None:
    base = joy_texture(n_vertices=600, canvas_size=_CANVAS)
    out = seisify(base, count, noise=_ConstantNoise(0.5), params=SeisParams(), canvas_size=_CANVAS)
    assert len(out) == count


def test_zero_count_returns_empty_path() -> None:
    out = seisify(_line(), 0, noise=_ConstantNoise(0.5), params=_NO_FADE, canvas_size=_CANVAS)
    assert len(out) == 0


def test_alternation_signs() -> None:
    np.testing.assert_array_equal(alternation_signs(5), [1, -1, 1, -1, 1])
    np.testing.assert_array_equal(alternation_signs(8, stride=4), [1, 1, -1, -1, 1, 1, -1, -1])
    np.testing.assert_array_equal(alternation_signs(3, stride=1), [1, 1, 1])
    assert alternation_signs(0).shape == (0,)


def test_displacement_alternates_along_normal() -> None:
    out = seisify(_line(), 4, noise=_ConstantNoise(0.5), params=_NO_FADE, canvas_size=_CANVAS)
    np.testing.assert_allclose(
        out.points,
        [[0.0, -2.25], [25.0, 2.25], [50.0, -2.25], [75.0, 2.25]],
        atol=1e-9,
    )


def test_stride_override_groups_sides() -> None:
    out = seisify(
        _line(), 4, noise=_ConstantNoise(0.5), params=_NO_FADE, canvas_size=_CANVAS, stride=4
    )
    np.testing.assert_allclose(out.points[:, 1], [-2.25, -2.25, 2.25, 2.25], atol=1e-9)


def test_output_is_geometrically_smoothed() -> None:
    out = seisify(_line(), 6, noise=_ConstantNoise(0.5), params=_NO_FADE, canvas_size=_CANVAS)
    assert np.all(np.linalg.norm(out.handles_in[1:-1], axis=1) > 0.0)
    np.testing.assert_array_equal(out.handles_in[0], [0.0, 0.0])


def test_empty_base_path_collapses_to_canvas_center() -> None:
    out = seisify(empty_path(), 3, noise=_ConstantNoise(0.5), params=_NO_FADE, canvas_size=_CANVAS)
    np.testing.assert_allclose(out.points, [[400.0, 400.0]] * 3)


def test_fade_origin_silences_center() -> None:
    p = SeisParams(fade_origin=True, fade_edge=False, fade_dist=100.0)
    amp = fade_amplitudes(
        np.array([3.0, 3.0, 3.0]),
        np.array([[400.0, 400.0], [450.0, 400.0], [400.0, 600.0]]),
        params=p,
        canvas_size=_CANVAS,
    )
    np.testing.assert_allclose(amp, [0.0, 3.0 * 0.875, 3.0])


def test_fade_edge_uses_doubled_distance_to_edge_radius() -> None:
    # edge_radius = 800 / 2 = 400。(400 - d) * 2 を fade 距離として使う。
    p = SeisParams(fade_origin=False, fade_edge=True, fade_dist=100.0, radius=2.0)
    amp = fade_amplitudes(
        np.array([1.0, 1.0, 1.0, 1.0]),
        np.array([[400.0, 400.0], [400.0, 775.0], [400.0, 800.0], [400.0, 900.0]]),
        params=p,
        canvas_size=_CANVAS,
    )
    np.testing.assert_allclose(amp, [1.0, 0.875, 0.0, 0.0])


def test_fade_disabled_returns_amplitude_unchanged() -> None:
    amp = np.array([1.0, 2.0])
    out = fade_amplitudes(amp, np.zeros((2, 2)), params=_NO_FADE, canvas_size=_CANVAS)
    np.testing.assert_array_equal(out, amp)


def _reference_spiral(
    n: int, *, theta_increment: float, scale: float, center: float
) -> list[tuple[float, float]]:
    """極座標 `r = theta = i / n` を `r*cos(theta*inc)*scale + center` で写した n+1 点。"""
    out = []
    for i in range(n + 1):
        r = i / n
        angle = r * theta_increment
        out.append((r * math.cos(angle) * scale + center, r * math.sin(angle) * scale + center))
    return out


def _reference_handles(
    points: list[tuple[float, float]],
) -> tuple[list[tuple[float, float]], list[tuple[float, float]]]:
    """内部アンカーに `(prev - next) * k` / `(prev - next) * (k - 0.4)` を付ける。"""
    h_in = [(0.0, 0.0)] * len(points)
    h_out = [(0.0, 0.0)] * len(points)
    for i in range(1, len(points) - 1):
        (px, py), (cx, cy), (nx, ny) = points[i - 1], points[i], points[i + 1]
        d1 = math.hypot(cx - px, cy - py)
        d2 = math.hypot(nx - cx, ny - cy)
        k = 0.4 * d1 / (d1 + d2)
        vx, vy = px - nx, py - ny
        h_in[i] = (vx * k, vy * k)
        h_out[i] = (vx * (k - 0.4), vy * (k - 0.4))
    return h_in, h_out


def _reference_flatten(
    points: list[tuple[float, float]],
    h_in: list[tuple[float, float]],
    h_out: list[tuple[float, float]],
    steps: int,
) -> list[tuple[float, float]]:
    out = []
    for i in range(len(points) - 1):
        p0 = points[i]
        p1 = (p0[0] + h_out[i][0], p0[1] + h_out[i][1])
        p3 = points[i + 1]
        p2 = (p3[0] + h_in[i + 1][0], p3[1] + h_in[i + 1][1])
        for s in range(steps):
            t = s / steps
            mt = 1.0 - t
            a, b, c, d = mt**3, 3 * mt * mt * t, 3 * mt * t * t, t**3
            out.append(
                (
                    a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                    a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
                )
            )
    out.append(points[-1])
    return out


def test_end_to_end_four_point_curve_with_constant_noise() -> None:
    # 定数ノイズ 0.5 + 既定レイヤ設定の nf3:
    #   l1: a = clamp(|0 + map(0.5, 0, 0.3)|, 0.88, 1) = 1 → a = 0, amp = 1
    #   l2: a = clamp(|0 + map(0.5, 0, 0.3)|, 0.0, 1) = 1 → a = 0, amp = 1
    #   l3: a = clamp(|0 + map(0.5, -1, 1)|, 0.7, 1) = 0.75 → a = 0.25, amp = 0.75
    # よって振幅は 0.75 * amp(3) = 2.25。フェードは無効。
    params = SeisParams(
        n_vertices=4,
        radius=2.0,
        theta_increment=360.0,
        n_seis=4,
        fade_origin=False,
        fade_edge=False,
    )
    base = joy_texture(
        n_vertices=params.n_vertices,
        theta_increment=params.theta_increment,
        radius=params.radius,
        canvas_size=_CANVAS,
    )

    # scale = 800 / 2 = 400, center = (400, 400)
    raw = _reference_spiral(4, theta_increment=360.0, scale=400.0, center=400.0)
    assert raw[0] == (400.0, 400.0)
    h_in, h_out = _reference_handles(raw)
    assert len(base) == 4
    np.testing.assert_allclose(base.points, raw[:4], atol=1e-9)
    np.testing.assert_allclose(base.handles_in, h_in[:4], atol=1e-9)
    np.testing.assert_allclose(base.handles_out, h_out[:4], atol=1e-9)

    # 弧長: 1 曲線 8 分割の折れ線上で i/N * length を線形補間し、法線は (ty, -tx)。
    poly = _reference_flatten(raw[:4], h_in[:4], h_out[:4], steps=8)
    seg = [math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(poly[:-1], poly[1:])]
    cum = [0.0]
    for length in seg:
        cum.append(cum[-1] + length)
    total = cum[-1]

    expected = []
    for i, sign in enumerate((1.0, -1.0, 1.0, -1.0)):
        offset = i / 4 * total
        j = max(m for m in range(len(seg)) if cum[m] <= offset)
        t = (offset - cum[j]) / seg[j]
        (ax, ay), (bx, by) = poly[j], poly[j + 1]
        tx, ty = (bx - ax) / seg[j], (by - ay) / seg[j]
        px, py = ax + t * (bx - ax), ay + t * (by - ay)
        expected.append((px + ty * 2.25 * sign, py - tx * 2.25 * sign))

    out = seisify(base, params.n_seis, noise=_ConstantNoise(0.5), params=params, canvas_size=_CANVAS)
    assert len(out) == 4
    np.testing.assert_allclose(out.points, expected, atol=1e-9)

    # 先頭サンプルは中心から最初の折れ線区間に直交する向きへ 2.25 だけずれる。
    assert math.hypot(out.points[0, 0] - 400.0, out.points[0, 1] - 400.0) == pytest.approx(2.25)

    out_in, out_out = _reference_handles(expected)
    np.testing.assert_allclose(out.handles_in, out_in, atol=1e-9)
    np.testing.assert_allclose(out.handles_out, out_out, atol=1e-9)
