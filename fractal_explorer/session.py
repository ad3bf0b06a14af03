"""Interactive session: the live view plus the renderer and exporter it drives."""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import Optional

import numpy as np

from .display import Cell, pack_cells
from .export import SnapshotExporter
from .iteration import FractalKind
from .renderer import FrameRenderer
from .state import Action, Transition, ViewState, animate, transition


class ExplorerSession:
    """Owns the mutable view; every change goes through :meth:`_apply`."""

    def __init__(
        self,
        view: Optional[ViewState] = None,
        renderer: Optional[FrameRenderer] = None,
        exporter: Optional[SnapshotExporter] = None,
        *,
        animating: bool = True,
    ) -> None:
        self.view = view if view is not None else ViewState()
        self.renderer = renderer if renderer is not None else FrameRenderer()
        self.exporter = exporter
        self.animating = animating
        self.frame_counter = 0
        self.running = True

    def _apply(self, step: Transition) -> bool:
        self.view = step.view
        if step.redraw:
            self.renderer.invalidate()
        return step.redraw

    def handle(self, action: Action) -> Optional["Future[Path]"]:
        """Apply a user action; returns the export future for :attr:`Action.EXPORT`."""

        if action is Action.QUIT:
            self.running = False
        elif action is Action.TOGGLE_ANIMATION:
            self.animating = not self.animating
        elif action is Action.EXPORT:
            return self.request_export()
        else:
            self._apply(transition(self.view, action))
        return None

    def tick(self) -> bool:
        """Advance the Julia animation by one frame; True if a redraw is due."""

        if not self.animating or self.view.kind is not FractalKind.JULIA:
            return False
        redraw = self._apply(animate(self.view, self.frame_counter))
        self.frame_counter += 1
        return redraw

    def request_export(self) -> "Future[Path]":
        if self.exporter is None:
            raise RuntimeError("No exporter configured for this session")
        return self.exporter.submit(self.view)

    def frame(self, rows: int, cols: int) -> np.ndarray:
        """Color buffer for a ``rows`` x ``cols`` cell grid, at double height."""

        return self.renderer.render(self.view, rows * 2, cols)

    def cells(self, rows: int, cols: int) -> list[list[Cell]]:
        return pack_cells(self.frame(rows, cols))

    def status_line(self) -> str:
        view = self.view
        return (
            f"Fractal explorer // Set: {view.kind.name.title()} | Palette: {view.palette.value} "
            f"({view.palette.label}) | Zoom: {view.scale:.2f}x | Iter: {view.max_iterations} // "
            "+/- zoom | wasd move | r/f iterations | space palettes | enter sets | p animate | g save | q quit"
        )
