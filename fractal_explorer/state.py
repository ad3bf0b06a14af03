"""View parameters and the transitions that input and animation apply to them."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum, auto

from .iteration import FractalKind
from .palettes import Palette

ZOOM_STEP = 1.1
PAN_STEP = 0.1
ANIMATION_RADIUS = 0.7885
ANIMATION_SPEED = 0.02


@dataclass(frozen=True)
class ViewState:
    """Everything that determines the pixels of a frame."""

    center: tuple[float, float] = (-0.5, 0.0)
    scale: float = 1.0
    max_iterations: int = 100
    kind: FractalKind = FractalKind.MANDELBROT
    julia_constant: tuple[float, float] = (-0.5251993, -0.5251993)
    palette: Palette = Palette.DEFAULT

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {self.max_iterations}")


class Action(Enum):
    QUIT = auto()
    ZOOM_IN = auto()
    ZOOM_OUT = auto()
    MORE_ITERATIONS = auto()
    FEWER_ITERATIONS = auto()
    PAN_LEFT = auto()
    PAN_RIGHT = auto()
    PAN_UP = auto()
    PAN_DOWN = auto()
    NEXT_PALETTE = auto()
    TOGGLE_FRACTAL = auto()
    EXPORT = auto()
    TOGGLE_ANIMATION = auto()


@dataclass(frozen=True)
class Transition:
    view: ViewState
    redraw: bool


def _pan(view: ViewState, dx: float, dy: float) -> ViewState:
    step = PAN_STEP / view.scale
    x, y = view.center
    return replace(view, center=(x + dx * step, y + dy * step))


def apply_action(view: ViewState, action: Action) -> ViewState:
    if action is Action.ZOOM_IN:
        return replace(view, scale=view.scale * ZOOM_STEP)
    if action is Action.ZOOM_OUT:
        return replace(view, scale=view.scale / ZOOM_STEP)
    if action is Action.MORE_ITERATIONS:
        return replace(view, max_iterations=view.max_iterations + 1)
    if action is Action.FEWER_ITERATIONS:
        return replace(view, max_iterations=max(view.max_iterations - 1, 0))
    if action is Action.PAN_LEFT:
        return _pan(view, -1.0, 0.0)
    if action is Action.PAN_RIGHT:
        return _pan(view, 1.0, 0.0)
    if action is Action.PAN_UP:
        return _pan(view, 0.0, -1.0)
    if action is Action.PAN_DOWN:
        return _pan(view, 0.0, 1.0)
    if action is Action.NEXT_PALETTE:
        return replace(view, palette=view.palette.next())
    if action is Action.TOGGLE_FRACTAL:
        return replace(view, kind=view.kind.toggled())
    # quit, export and animation toggling leave the view untouched
    return view


def transition(view: ViewState, action: Action) -> Transition:
    """Apply ``action`` and report whether the cached frame is now stale."""

    new_view = apply_action(view, action)
    return Transition(view=new_view, redraw=new_view != view)


def animation_constant(frame: int) -> tuple[float, float]:
    t = frame * ANIMATION_SPEED
    return ANIMATION_RADIUS * math.cos(t), ANIMATION_RADIUS * math.sin(t)


def animate(view: ViewState, frame: int) -> Transition:
    """Move the Julia constant along its circle for animation ``frame``."""

    new_view = replace(view, julia_constant=animation_constant(frame))
    return Transition(view=new_view, redraw=new_view != view)
