"""Mapping between pixel grids and regions of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

BASE_SPAN = 3.5


class InvalidGeometryError(ValueError):
    """Raised for empty pixel grids or a non-positive zoom scale."""


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane covered by a pixel grid."""

    plane_width: float
    plane_height: float
    left: float
    top: float

    def pixel_to_plane(self, width: int, height: int, x: int, y: int) -> tuple[float, float]:
        return (
            self.left + x * self.plane_width / width,
            self.top + y * self.plane_height / height,
        )

    def grid(
        self,
        width: int,
        height: int,
        row_start: int = 0,
        row_stop: Optional[int] = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Plane coordinates of every pixel in rows ``[row_start, row_stop)``.

        Returns two ``(rows, width)`` float64 arrays. Each element is computed
        with the same expression as :meth:`pixel_to_plane`.
        """

        row_stop = height if row_stop is None else row_stop
        cols = np.arange(width, dtype=np.float64)
        rows = np.arange(row_start, row_stop, dtype=np.float64)
        xs = self.left + cols * self.plane_width / width
        ys = self.top + rows * self.plane_height / height
        return np.meshgrid(xs, ys)


def map_viewport(width: int, height: int, center: tuple[float, float], scale: float) -> Viewport:
    """Return the plane region seen by a ``width`` x ``height`` grid.

    The horizontal span is ``3.5 / scale``; the vertical span follows from
    the grid's aspect ratio so pixels stay square.
    """

    if width <= 0 or height <= 0:
        raise InvalidGeometryError(f"Pixel grid must be non-empty, got {width}x{height}")
    if scale <= 0:
        raise InvalidGeometryError(f"Zoom scale must be positive, got {scale}")

    aspect = width / height
    plane_width = BASE_SPAN / scale
    plane_height = plane_width / aspect
    center_x, center_y = center
    return Viewport(
        plane_width=plane_width,
        plane_height=plane_height,
        left=center_x - plane_width / 2.0,
        top=center_y - plane_height / 2.0,
    )
