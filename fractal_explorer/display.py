"""Pack double-height color buffers into half-block terminal cells."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from rich.color import Color
from rich.segment import Segment
from rich.style import Style

HALF_BLOCK = "▀"


class Cell(NamedTuple):
    glyph: str
    fg: tuple[int, int, int]
    bg: tuple[int, int, int]


def pack_cells(buffer: np.ndarray) -> list[list[Cell]]:
    """Fold pairs of buffer rows into one row of cells.

    The upper pixel colors the glyph and the lower pixel the background.
    Display column ``x`` shows buffer column ``(x + 1) % width``.
    """

    rows, width = buffer.shape[:2]
    if rows % 2:
        raise ValueError(f"Buffer height must be even, got {rows}")

    shifted = np.roll(buffer, -1, axis=1)
    cells: list[list[Cell]] = []
    for y in range(rows // 2):
        top = shifted[2 * y].tolist()
        bottom = shifted[2 * y + 1].tolist()
        cells.append([Cell(HALF_BLOCK, tuple(fg), tuple(bg)) for fg, bg in zip(top, bottom)])
    return cells


def cells_to_segments(row: list[Cell]) -> list[Segment]:
    return [
        Segment(
            cell.glyph,
            Style(color=Color.from_rgb(*cell.fg), bgcolor=Color.from_rgb(*cell.bg)),
        )
        for cell in row
    ]
