"""Frame rendering with a dirty-flag cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .iteration import escape_counts, starting_points
from .palettes import colorize
from .state import ViewState
from .viewport import map_viewport


@dataclass
class RenderCacheState:
    """Bookkeeping that decides whether the last buffer can be reused."""

    dirty: bool = True
    last_dimensions: Optional[tuple[int, int]] = None

    def is_fresh(self, rows: int, cols: int) -> bool:
        return not self.dirty and self.last_dimensions == (rows, cols)


def render_values(
    view: ViewState,
    rows: int,
    cols: int,
    *,
    smooth: bool = False,
    row_start: int = 0,
    row_stop: Optional[int] = None,
    device: Optional[str] = None,
) -> np.ndarray:
    """Escape values for rows ``[row_start, row_stop)`` of a ``rows`` x ``cols`` grid."""

    viewport = map_viewport(cols, rows, view.center, view.scale)
    xs, ys = viewport.grid(cols, rows, row_start, row_stop)
    zx, zy, cx, cy = starting_points(view.kind, xs, ys, view.julia_constant)
    return escape_counts(zx, zy, cx, cy, view.max_iterations, smooth=smooth, device=device)


def render_counts(view: ViewState, rows: int, cols: int, *, device: Optional[str] = None) -> np.ndarray:
    return render_values(view, rows, cols, device=device)


def render_colors(view: ViewState, rows: int, cols: int, *, device: Optional[str] = None) -> np.ndarray:
    """Compute a ``(rows, cols, 3)`` color buffer from scratch."""

    counts = render_counts(view, rows, cols, device=device)
    return colorize(view.palette, counts, view.max_iterations)


class FrameRenderer:
    """Keeps the most recent color buffer until it is invalidated or resized."""

    def __init__(self, device: Optional[str] = None) -> None:
        self.device = device
        self.cache = RenderCacheState()
        self.buffer: Optional[np.ndarray] = None
        self.generation = 0

    def invalidate(self) -> None:
        self.cache.dirty = True

    def render(self, view: ViewState, rows: int, cols: int) -> np.ndarray:
        if self.buffer is not None and self.cache.is_fresh(rows, cols):
            return self.buffer

        self.buffer = render_colors(view, rows, cols, device=self.device)
        self.cache.dirty = False
        self.cache.last_dimensions = (rows, cols)
        self.generation += 1
        return self.buffer
