"""Escape-time iteration for the quadratic map ``z -> z**2 + c``."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

import numpy as np
import tensorflow as tf

ESCAPE_RADIUS_SQ = 4.0
LOG2 = math.log(2.0)


class FractalKind(Enum):
    MANDELBROT = "mandelbrot"
    JULIA = "julia"

    def toggled(self) -> "FractalKind":
        return FractalKind.JULIA if self is FractalKind.MANDELBROT else FractalKind.MANDELBROT


def _orbit(z0: complex, c: complex, max_iterations: int) -> tuple[int, float, float]:
    zx, zy = z0.real, z0.imag
    cx, cy = c.real, c.imag
    i = 0
    while zx * zx + zy * zy <= ESCAPE_RADIUS_SQ and i < max_iterations:
        tmp = zx * zx - zy * zy + cx
        zy = 2.0 * zx * zy + cy
        zx = tmp
        i += 1
    return i, zx, zy


def iterate(z0: complex, c: complex, max_iterations: int) -> int:
    """Number of steps before the orbit of ``z0`` leaves radius 2.

    Returns ``max_iterations`` when the orbit never escapes. The escape test
    runs before each step, so a starting point already outside the radius
    yields 0.
    """

    n, _, _ = _orbit(z0, c, max_iterations)
    return n


def iterate_smooth(z0: complex, c: complex, max_iterations: int) -> float:
    """Continuous escape value ``n + 1 - log2(log|z_n|)``.

    Non-escaping orbits return ``float(max_iterations)``.
    """

    n, zx, zy = _orbit(z0, c, max_iterations)
    if n >= max_iterations:
        return float(max_iterations)
    magnitude = math.sqrt(zx * zx + zy * zy)
    return n + 1.0 - math.log(math.log(magnitude)) / LOG2


def starting_points(
    kind: FractalKind,
    xs: np.ndarray,
    ys: np.ndarray,
    julia_constant: tuple[float, float],
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Select ``(zx, zy, cx, cy)`` grids for the given fractal family."""

    if kind is FractalKind.MANDELBROT:
        zeros = np.zeros_like(xs)
        return zeros, zeros, xs, ys
    real, imag = julia_constant
    return xs, ys, np.full_like(xs, real), np.full_like(ys, imag)


@tf.function(reduce_retracing=True)
def _escape_run(
    zx: tf.Tensor, zy: tf.Tensor, cx: tf.Tensor, cy: tf.Tensor, max_iterations: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Iterate every point with a TensorFlow while loop until all escape."""

    radius_sq = tf.constant(ESCAPE_RADIUS_SQ, dtype=tf.float64)
    two = tf.constant(2.0, dtype=tf.float64)
    i = tf.constant(0, dtype=tf.int32)
    ns = tf.zeros_like(zx, dtype=tf.int32)
    active = zx * zx + zy * zy <= radius_sq

    def cond(i, zx, zy, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zx, zy, ns, active):
        zx_new = zx * zx - zy * zy + cx
        zy_new = two * zx * zy + cy
        zx = tf.where(active, zx_new, zx)
        zy = tf.where(active, zy_new, zy)
        ns = ns + tf.cast(active, tf.int32)
        active = tf.logical_and(active, zx * zx + zy * zy <= radius_sq)
        return i + 1, zx, zy, ns, active

    _, zx, zy, ns, _ = tf.while_loop(cond, body, (i, zx, zy, ns, active))
    return zx, zy, ns


@tf.function(reduce_retracing=True)
def _smooth_values(zx: tf.Tensor, zy: tf.Tensor, ns: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    escaped = tf.less(ns, max_iterations)
    magnitude = tf.sqrt(zx * zx + zy * zy)
    # only escaped points reach log; the rest get a harmless stand-in
    magnitude = tf.where(escaped, magnitude, tf.ones_like(magnitude) * math.e ** math.e)
    log2 = tf.constant(LOG2, dtype=tf.float64)
    smooth = tf.cast(ns, tf.float64) + 1.0 - tf.math.log(tf.math.log(magnitude)) / log2
    return tf.where(escaped, smooth, tf.cast(max_iterations, tf.float64))


def escape_counts(
    zx: np.ndarray,
    zy: np.ndarray,
    cx: np.ndarray,
    cy: np.ndarray,
    max_iterations: int,
    *,
    smooth: bool = False,
    device: Optional[str] = None,
) -> np.ndarray:
    """Vectorized :func:`iterate` (or :func:`iterate_smooth`) over whole grids.

    Returns ``int32`` counts, or ``float64`` smoothed values when ``smooth``
    is set, with the shape of the inputs.
    """

    limit = tf.constant(max_iterations, dtype=tf.int32)
    with tf.device(device if device is not None else "/CPU:0"):
        tensors = [tf.convert_to_tensor(a, dtype=tf.float64) for a in (zx, zy, cx, cy)]
        zx_t, zy_t, ns = _escape_run(*tensors, limit)
        if smooth:
            return _smooth_values(zx_t, zy_t, ns, limit).numpy()
        return ns.numpy()
