"""Textual front end: draws the session into the terminal and feeds it key presses."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from pathlib import Path

from textual import events
from textual.app import App, ComposeResult
from textual.strip import Strip
from textual.widget import Widget
from textual.widgets import Static

from .display import cells_to_segments
from .session import ExplorerSession
from .state import Action

FRAME_INTERVAL = 1 / 60

KEY_BINDINGS: dict[str, Action] = {
    "q": Action.QUIT,
    "plus": Action.ZOOM_IN,
    "equals_sign": Action.ZOOM_IN,
    "minus": Action.ZOOM_OUT,
    "r": Action.MORE_ITERATIONS,
    "f": Action.FEWER_ITERATIONS,
    "a": Action.PAN_LEFT,
    "left": Action.PAN_LEFT,
    "d": Action.PAN_RIGHT,
    "right": Action.PAN_RIGHT,
    "w": Action.PAN_UP,
    "up": Action.PAN_UP,
    "s": Action.PAN_DOWN,
    "down": Action.PAN_DOWN,
    "space": Action.NEXT_PALETTE,
    "enter": Action.TOGGLE_FRACTAL,
    "g": Action.EXPORT,
    "p": Action.TOGGLE_ANIMATION,
}


class FractalView(Widget):
    """Half-block rendering of the session's current frame."""

    DEFAULT_CSS = """
    FractalView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, session: ExplorerSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self._strips: list[Strip] = []
        self._strip_key: tuple[int, int, int] | None = None

    def _update_strips(self) -> None:
        width, height = self.size
        self.session.frame(height, width)
        key = (self.session.renderer.generation, width, height)
        if key == self._strip_key:
            return
        self._strips = [
            Strip(cells_to_segments(row), cell_length=width)
            for row in self.session.cells(height, width)
        ]
        self._strip_key = key

    def render_line(self, y: int) -> Strip:
        width, height = self.size
        if width == 0 or height == 0:
            return Strip.blank(width)
        self._update_strips()
        if y >= len(self._strips):
            return Strip.blank(width)
        return self._strips[y]


class ExplorerApp(App):
    """Interactive Mandelbrot/Julia explorer."""

    CSS = """
    #status {
        height: 1;
        width: 1fr;
        content-align: center middle;
    }
    """

    def __init__(self, session: ExplorerSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static(self.session.status_line(), id="status")
        yield FractalView(self.session, id="fractal")

    def on_mount(self) -> None:
        self.set_interval(FRAME_INTERVAL, self._advance_animation)

    def _redraw(self) -> None:
        self.query_one("#status", Static).update(self.session.status_line())
        self.query_one(FractalView).refresh()

    def _advance_animation(self) -> None:
        if self.session.tick():
            self.query_one(FractalView).refresh()

    def on_key(self, event: events.Key) -> None:
        action = KEY_BINDINGS.get(event.key)
        if action is None:
            return
        event.stop()

        future = self.session.handle(action)
        if not self.session.running:
            self.exit()
            return
        if future is not None:
            self.notify("Rendering snapshot...")
            self.run_worker(self._watch_export(future), group="exports")
        self._redraw()

    async def _watch_export(self, future: "Future[Path]") -> None:
        try:
            path = await asyncio.wrap_future(future)
        except Exception as exc:
            self.log.error(f"Export failed: {exc!r}")
            self.notify(f"Export failed: {exc}", severity="error")
            return
        self.log.info(f"Export written to {path}")
        self.notify(f"Saved {path}")
