"""Palette registry and the escape-time coloring policy."""

from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np

RGB = tuple[int, int, int]


class NamedColor(Enum):
    """Terminal colors with a fixed RGB equivalent."""

    BLACK = (0, 0, 0)
    RED = (255, 0, 0)
    GREEN = (0, 255, 0)
    YELLOW = (255, 255, 0)
    BLUE = (0, 0, 255)
    MAGENTA = (255, 0, 255)
    CYAN = (0, 255, 255)
    GRAY = (128, 128, 128)
    DARK_GRAY = (64, 64, 64)
    LIGHT_RED = (255, 128, 128)
    LIGHT_GREEN = (128, 255, 128)
    LIGHT_YELLOW = (255, 255, 128)
    LIGHT_BLUE = (128, 128, 255)
    LIGHT_MAGENTA = (255, 128, 255)
    LIGHT_CYAN = (128, 255, 255)
    WHITE = (255, 255, 255)


INSIDE_COLOR = NamedColor.BLACK


def to_rgb(color: Union[NamedColor, RGB]) -> RGB:
    if isinstance(color, NamedColor):
        return color.value
    r, g, b = color
    return int(r), int(g), int(b)


class Palette(Enum):
    """Ordered set of gradients; the value is the registry index."""

    DEFAULT = 0
    FIRE = 1
    RAINBOW = 2
    OCEAN = 3
    GRAYSCALE = 4
    ELECTRIC = 5

    @property
    def label(self) -> str:
        return self.name.lower()

    def next(self) -> "Palette":
        members = list(Palette)
        return members[(self.value + 1) % len(members)]


def _channels(palette: Palette, t: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    if palette is Palette.DEFAULT:
        return (
            9.0 * (1.0 - t) * t * t * t * 255.0,
            15.0 * (1.0 - t) ** 2 * t * t * 255.0,
            8.5 * (1.0 - t) ** 3 * t * 255.0,
        )
    if palette is Palette.FIRE:
        return 255.0 * t, 255.0 * np.sqrt(t) * (1.0 - t), 64.0 * (1.0 - t)
    if palette is Palette.RAINBOW:
        return (
            127.5 * (1.0 + np.sin(6.0 * t)),
            127.5 * (1.0 + np.sin(6.0 * t + 2.0)),
            127.5 * (1.0 + np.sin(6.0 * t + 4.0)),
        )
    if palette is Palette.OCEAN:
        return 20.0 * (1.0 - t), 80.0 + 120.0 * t, 200.0 + 55.0 * t
    if palette is Palette.GRAYSCALE:
        shade = 255.0 * t
        return shade, shade, shade
    if palette is Palette.ELECTRIC:
        return 100.0 * (1.0 - t), 200.0 * t, 255.0 * np.minimum(t * 1.2, 1.0)
    raise ValueError(f"Unknown palette {palette!r}")


def palette_color(palette: Palette, t) -> np.ndarray:
    """Map fractions ``t`` in [0, 1] to ``uint8`` RGB.

    ``t`` may be a scalar or an array; the result has one extra trailing
    axis of length 3. Values outside [0, 1] are clamped first, and channels
    truncate toward zero before saturating to 0..255.
    """

    t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    rgb = np.stack(_channels(palette, t), axis=-1)
    return np.uint8(np.clip(np.trunc(rgb), 0, 255))


def colorize(palette: Palette, values: np.ndarray, max_iterations: int) -> np.ndarray:
    """Color escape values; anything equal to ``max_iterations`` is black."""

    values = np.asarray(values)
    inside = values == max_iterations
    if max_iterations > 0:
        t = values.astype(np.float64) / float(max_iterations)
    else:
        t = np.zeros(values.shape, dtype=np.float64)
    rgb = palette_color(palette, t)
    rgb[inside] = INSIDE_COLOR.value
    return rgb
