"""High-resolution still and animation export."""

from __future__ import annotations

import itertools
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import imageio
import numpy as np
import PIL.Image

from .iteration import FractalKind
from .palettes import Palette, colorize
from .renderer import render_values
from .state import ViewState, animation_constant

EXPORT_WIDTH = 3840
EXPORT_HEIGHT = 2160
BAND_ROWS = 270


class ExportError(OSError):
    """Raised when an exported image cannot be written."""


@dataclass(frozen=True)
class ExportRequest:
    """Everything an export needs, captured when it was triggered."""

    view: ViewState
    palette: Palette
    path: Path
    width: int = EXPORT_WIDTH
    height: int = EXPORT_HEIGHT
    image_format: str = "png"

    @classmethod
    def capture(cls, view: ViewState, path: Path, **kwargs) -> "ExportRequest":
        return cls(view=view, palette=view.palette, path=path, **kwargs)


def render_snapshot(
    view: ViewState,
    width: int = EXPORT_WIDTH,
    height: int = EXPORT_HEIGHT,
    *,
    palette: Optional[Palette] = None,
    band_rows: int = BAND_ROWS,
    device: Optional[str] = None,
) -> np.ndarray:
    """Render ``view`` with smoothed coloring into a ``(height, width, 3)`` array.

    Rows are computed in bands of ``band_rows`` so peak memory stays bounded
    at large resolutions.
    """

    palette = view.palette if palette is None else palette
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    for start in range(0, height, band_rows):
        stop = min(start + band_rows, height)
        values = render_values(
            view, height, width, smooth=True, row_start=start, row_stop=stop, device=device
        )
        pixels[start:stop] = colorize(palette, values, view.max_iterations)
    return pixels


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(pixels: np.ndarray, output_path: Path, image_format: str = "png") -> Path:
    """Encode ``pixels`` to ``output_path``; any failure becomes :class:`ExportError`."""

    pil_format = _pil_format_name(image_format)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        PIL.Image.fromarray(pixels).save(str(output_path), format=pil_format)
    except (OSError, KeyError, ValueError) as exc:
        raise ExportError(f"Could not write {output_path}: {exc}") from exc
    return output_path


def run_export(request: ExportRequest, *, device: Optional[str] = None) -> Path:
    pixels = render_snapshot(
        request.view, request.width, request.height, palette=request.palette, device=device
    )
    return write_image(pixels, request.path, request.image_format)


class SnapshotExporter:
    """Run exports on a background worker, one future per request.

    Requests only carry frozen values, so the interactive session can keep
    changing its own view while an export is in flight.
    """

    def __init__(
        self,
        output_dir: Path = Path("."),
        image_format: str = "png",
        width: int = EXPORT_WIDTH,
        height: int = EXPORT_HEIGHT,
        *,
        max_workers: int = 1,
        device: Optional[str] = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.image_format = image_format.lower().lstrip(".") or "png"
        self.width = width
        self.height = height
        self.device = device
        self._sequence = itertools.count()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="snapshot")

    def next_path(self) -> Path:
        stamp = time.strftime("%Y%m%d_%H%M%S")
        index = next(self._sequence)
        return self.output_dir / f"fractal_{stamp}_{index:03d}.{self.image_format}"

    def request(self, view: ViewState, path: Optional[Path] = None) -> ExportRequest:
        return ExportRequest.capture(
            view,
            path if path is not None else self.next_path(),
            width=self.width,
            height=self.height,
            image_format=self.image_format,
        )

    def submit_request(self, request: ExportRequest) -> "Future[Path]":
        return self._executor.submit(run_export, request, device=self.device)

    def submit(self, view: ViewState) -> "Future[Path]":
        return self.submit_request(self.request(view))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SnapshotExporter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


def record_animation(
    view: ViewState,
    output_path: Path,
    frames: int,
    width: int = 640,
    height: int = 360,
    *,
    duration: float = 0.1,
    device: Optional[str] = None,
) -> Path:
    """Write the rotating Julia-constant animation to a GIF."""

    julia = replace(view, kind=FractalKind.JULIA)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        writer = imageio.get_writer(str(output_path), mode="I", duration=duration, loop=0)
    except (OSError, ValueError) as exc:
        raise ExportError(f"Could not write {output_path}: {exc}") from exc
    try:
        for frame in range(frames):
            frame_view = replace(julia, julia_constant=animation_constant(frame))
            writer.append_data(render_snapshot(frame_view, width, height, device=device))
    finally:
        writer.close()
    return output_path
