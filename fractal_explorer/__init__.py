"""Public API for the Mandelbrot/Julia explorer."""

from .display import Cell, pack_cells
from .export import (
    EXPORT_HEIGHT,
    EXPORT_WIDTH,
    ExportError,
    ExportRequest,
    SnapshotExporter,
    record_animation,
    render_snapshot,
    write_image,
)
from .iteration import FractalKind, escape_counts, iterate, iterate_smooth
from .palettes import NamedColor, Palette, colorize, palette_color, to_rgb
from .renderer import FrameRenderer, RenderCacheState, render_colors, render_counts
from .session import ExplorerSession
from .state import Action, Transition, ViewState, transition
from .viewport import InvalidGeometryError, Viewport, map_viewport

__all__ = [
    "Action",
    "Cell",
    "EXPORT_HEIGHT",
    "EXPORT_WIDTH",
    "ExplorerSession",
    "ExportError",
    "ExportRequest",
    "FractalKind",
    "FrameRenderer",
    "InvalidGeometryError",
    "NamedColor",
    "Palette",
    "RenderCacheState",
    "SnapshotExporter",
    "Transition",
    "ViewState",
    "Viewport",
    "colorize",
    "escape_counts",
    "iterate",
    "iterate_smooth",
    "map_viewport",
    "pack_cells",
    "palette_color",
    "record_animation",
    "render_colors",
    "render_counts",
    "render_snapshot",
    "to_rgb",
    "transition",
    "write_image",
]
