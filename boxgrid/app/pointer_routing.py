"""Renderer-side pointer routing: pixel/cell conversion, hit testing, event routing."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from boxgrid.app.editor import LayoutEditor
from boxgrid.app.interaction import InteractionOutcome, PointerTarget
from boxgrid.core.models import GRID_SIZE, Box, Footprint, GridCell, ResizeHandle

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 1

# Corners first so they win over the edge handles next to them.
_HANDLE_ANCHORS: tuple[tuple[ResizeHandle, float, float], ...] = (
    (ResizeHandle.NW, 0.0, 0.0),
    (ResizeHandle.NE, 1.0, 0.0),
    (ResizeHandle.SW, 0.0, 1.0),
    (ResizeHandle.SE, 1.0, 1.0),
    (ResizeHandle.N, 0.5, 0.0),
    (ResizeHandle.S, 0.5, 1.0),
    (ResizeHandle.W, 0.0, 0.5),
    (ResizeHandle.E, 1.0, 0.5),
)


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Raw pointer event in canvas coordinates."""

    event_type: str
    x: float
    y: float
    button: int = PRIMARY_BUTTON


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """Raw key event."""

    event_type: str
    value: str


@dataclass(frozen=True, slots=True)
class ScreenRect:
    """Axis-aligned rectangle in pixels."""

    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        """Return whether a point is inside the rectangle."""
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h


@dataclass(frozen=True, slots=True)
class GridViewport:
    """Placement of the grid on screen."""

    origin_x: float = 0.0
    origin_y: float = 0.0
    cell_size: float = 26.0
    grid_size: int = GRID_SIZE

    def screen_to_cell(self, px: float, py: float, *, clamp: bool = False) -> GridCell | None:
        """Convert a screen point to a cell; with ``clamp`` points outside snap to the edge."""
        col = int((px - self.origin_x) // self.cell_size)
        row = int((py - self.origin_y) // self.cell_size)
        if clamp:
            return GridCell(x=min(max(col, 0), self.grid_size - 1), y=min(max(row, 0), self.grid_size - 1))
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            return None
        return GridCell(x=col, y=row)

    def rect_to_screen(self, rect: Footprint) -> ScreenRect:
        """Pixel rectangle covered by a grid rectangle."""
        return ScreenRect(
            x=self.origin_x + rect.x * self.cell_size,
            y=self.origin_y + rect.y * self.cell_size,
            w=rect.w * self.cell_size,
            h=rect.h * self.cell_size,
        )


def handle_at(area: ScreenRect, px: float, py: float, radius: float) -> ResizeHandle | None:
    """Return the resize handle of ``area`` under the point, if any."""
    for handle, fx, fy in _HANDLE_ANCHORS:
        hx = area.x + area.w * fx
        hy = area.y + area.h * fy
        if abs(px - hx) <= radius and abs(py - hy) <= radius:
            return handle
    return None


def hit_test(
    viewport: GridViewport,
    boxes: Sequence[Box],
    px: float,
    py: float,
    handle_radius: float,
) -> PointerTarget | None:
    """Resolve what a press at ``(px, py)`` targets; None outside the grid."""
    for box in reversed(boxes):
        area = viewport.rect_to_screen(box)
        handle = handle_at(area, px, py, handle_radius)
        if handle is not None:
            return PointerTarget.resize_handle(box.id, handle)
        if area.contains(px, py):
            return PointerTarget.body(box.id)
    if viewport.screen_to_cell(px, py) is not None:
        return PointerTarget.empty()
    return None


class PointerRouter:
    """Translate raw canvas events into layout editor calls."""

    def __init__(self, editor: LayoutEditor, viewport: GridViewport | None = None) -> None:
        self._editor = editor
        self._viewport = viewport or GridViewport()

    @property
    def viewport(self) -> GridViewport:
        return self._viewport

    def handle_pointer(self, event: PointerEvent) -> InteractionOutcome | None:
        """Route a pointer event; None when nothing consumed it."""
        kind = event.event_type.strip().lower()
        if kind == "pointer_down":
            return self._pointer_down(event)
        cell = self._viewport.screen_to_cell(event.x, event.y, clamp=True)
        if kind == "pointer_move":
            return self._editor.on_pointer_move(event.x, event.y, cell)
        if kind == "pointer_up":
            return self._editor.on_pointer_up(event.x, event.y, cell)
        return None

    def handle_key(self, event: KeyEvent) -> InteractionOutcome | None:
        if event.event_type.strip().lower() != "key_down":
            return None
        return self._editor.on_key(event.value)

    def _pointer_down(self, event: PointerEvent) -> InteractionOutcome | None:
        if event.button != PRIMARY_BUTTON:
            return None
        if self._editor.is_interacting:
            logger.debug("pointer_down_ignored reason=gesture_active")
            return None
        target = hit_test(
            self._viewport,
            self._editor.layout.boxes,
            event.x,
            event.y,
            self._editor.settings.handle_radius_px,
        )
        if target is None:
            return None
        cell = self._viewport.screen_to_cell(event.x, event.y, clamp=True)
        return self._editor.on_pointer_down(target, event.x, event.y, cell)
