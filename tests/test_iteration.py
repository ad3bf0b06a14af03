import math

import numpy as np
import pytest

from fractal_explorer.iteration import (
    FractalKind,
    escape_counts,
    iterate,
    iterate_smooth,
    starting_points,
)
from fractal_explorer.viewport import map_viewport


def test_origin_never_escapes():
    assert iterate(0j, 0j, 100) == 100


def test_far_point_escapes_after_one_step():
    assert iterate(0j, complex(-2.25, -3.5), 100) == 1


def test_orbit_on_the_radius_keeps_iterating():
    # 0 -> 1 -> 2 -> 5: |2|^2 == 4 still counts as bounded
    assert iterate(0j, 1 + 0j, 100) == 3


def test_escape_check_precedes_first_step():
    assert iterate(3 + 0j, 0j, 50) == 0


@pytest.mark.parametrize("z0", [0j, 0.5 + 0.5j, 3 + 0j])
def test_zero_iteration_bound(z0):
    assert iterate(z0, 0.25 + 0j, 0) == 0
    assert iterate_smooth(z0, 0.25 + 0j, 0) == 0.0


def test_smooth_value_of_escaped_orbit():
    expected = 3 + 1 - math.log(math.log(5.0)) / math.log(2.0)
    assert iterate_smooth(0j, 1 + 0j, 100) == pytest.approx(expected)


def test_smooth_value_of_bounded_orbit():
    assert iterate_smooth(0j, -1 + 0j, 64) == 64.0


def test_smooth_value_escaping_at_start_is_finite():
    value = iterate_smooth(3 + 4j, 0j, 10)
    assert math.isfinite(value)


def test_starting_points_per_family():
    xs = np.array([[1.0, 2.0]])
    ys = np.array([[3.0, 4.0]])

    zx, zy, cx, cy = starting_points(FractalKind.MANDELBROT, xs, ys, (0.5, -0.5))
    assert not zx.any() and not zy.any()
    assert np.array_equal(cx, xs) and np.array_equal(cy, ys)

    zx, zy, cx, cy = starting_points(FractalKind.JULIA, xs, ys, (0.5, -0.5))
    assert np.array_equal(zx, xs) and np.array_equal(zy, ys)
    assert np.all(cx == 0.5) and np.all(cy == -0.5)


def test_kind_toggle_is_an_involution():
    for kind in FractalKind:
        assert kind.toggled().toggled() is kind
        assert kind.toggled() is not kind


def _scalar_grid(kind, xs, ys, constant, max_iterations, fn):
    zx, zy, cx, cy = starting_points(kind, xs, ys, constant)
    out = np.empty(xs.shape, dtype=np.float64)
    for index in np.ndindex(xs.shape):
        out[index] = fn(complex(zx[index], zy[index]), complex(cx[index], cy[index]), max_iterations)
    return out


@pytest.mark.parametrize("kind", list(FractalKind))
def test_vectorized_counts_match_scalar_loop(kind):
    xs, ys = map_viewport(24, 16, (-0.5, 0.0), 0.8).grid(24, 16)
    constant = (-0.5251993, -0.5251993)

    counts = escape_counts(*starting_points(kind, xs, ys, constant), 60)
    expected = _scalar_grid(kind, xs, ys, constant, 60, iterate)

    assert counts.dtype == np.int32
    assert np.array_equal(counts, expected.astype(np.int32))


@pytest.mark.parametrize("kind", list(FractalKind))
def test_vectorized_smooth_matches_scalar(kind):
    xs, ys = map_viewport(20, 12, (-0.5, 0.0), 1.0).grid(20, 12)
    constant = (0.285, 0.01)

    smooth = escape_counts(*starting_points(kind, xs, ys, constant), 40, smooth=True)
    expected = _scalar_grid(kind, xs, ys, constant, 40, iterate_smooth)

    assert np.allclose(smooth, expected, rtol=1e-9, atol=1e-9)


def test_vectorized_zero_iteration_bound():
    zx = np.array([[0.0, 3.0]])
    zy = np.zeros((1, 2))
    counts = escape_counts(zx, zy, zy, zy, 0)
    assert counts.tolist() == [[0, 0]]


def test_kernel_returns_one_array_per_mode():
    xs, ys = map_viewport(6, 4, (-0.5, 0.0), 1.0).grid(6, 4)
    grids = starting_points(FractalKind.MANDELBROT, xs, ys, (0.0, 0.0))

    counts = escape_counts(*grids, 30)
    smooth = escape_counts(*grids, 30, smooth=True)

    assert isinstance(counts, np.ndarray) and counts.shape == (4, 6) and counts.dtype == np.int32
    assert isinstance(smooth, np.ndarray) and smooth.shape == (4, 6) and smooth.dtype == np.float64
