"""Grid geometry: overlap, occupancy, free-space search and box arithmetic."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import replace

import numpy as np

from boxgrid.core.models import (
    GRID_SIZE,
    MAX_INDEX,
    MIN_BOX_SIZE,
    MIN_DIMENSION,
    Box,
    Footprint,
    GridCell,
    Rect,
    ResizeHandle,
)


def clamp(value: int, low: int, high: int) -> int:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


def boxes_overlap(a: Footprint, b: Footprint) -> bool:
    """Return whether two rectangles overlap; touching edges do not count."""
    return not (
        a.x + a.w <= b.x
        or b.x + b.w <= a.x
        or a.y + a.h <= b.y
        or b.y + b.h <= a.y
    )


def occupancy_grid(boxes: Iterable[Footprint]) -> np.ndarray:
    """Build the ``[y, x]`` boolean occupancy matrix for ``boxes``."""
    grid = np.zeros((GRID_SIZE, GRID_SIZE), dtype=bool)
    for box in boxes:
        x0, x1 = max(0, box.x), min(GRID_SIZE, box.x + box.w)
        y0, y1 = max(0, box.y), min(GRID_SIZE, box.y + box.h)
        if x1 > x0 and y1 > y0:
            grid[y0:y1, x0:x1] = True
    return grid


def find_free_position(width: int, height: int, existing: Iterable[Footprint]) -> GridCell | None:
    """Return the topmost, then leftmost, corner where a ``width x height`` box fits."""
    if not (MIN_DIMENSION <= width <= GRID_SIZE and MIN_DIMENSION <= height <= GRID_SIZE):
        return None
    grid = occupancy_grid(existing)
    for y in range(GRID_SIZE - height + 1):
        for x in range(GRID_SIZE - width + 1):
            if not grid[y : y + height, x : x + width].any():
                return GridCell(x=x, y=y)
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_box(box: Box) -> Box:
    """Round and clamp box geometry into the grid."""
    x = clamp(_round_half_up(box.x), 0, MAX_INDEX)
    y = clamp(_round_half_up(box.y), 0, MAX_INDEX)
    w = clamp(_round_half_up(box.w), MIN_DIMENSION, GRID_SIZE)
    h = clamp(_round_half_up(box.h), MIN_DIMENSION, GRID_SIZE)
    # Shrink only after clamping so x/y keep their rounded values.
    if x + w > GRID_SIZE:
        w = GRID_SIZE - x
    if y + h > GRID_SIZE:
        h = GRID_SIZE - y
    return replace(box, x=x, y=y, w=w, h=h)


def move_rect(origin: Footprint, dx: int, dy: int) -> Rect:
    """Translate ``origin`` by a cell delta, keeping it fully inside the grid."""
    return Rect(
        x=clamp(origin.x + dx, 0, GRID_SIZE - origin.w),
        y=clamp(origin.y + dy, 0, GRID_SIZE - origin.h),
        w=origin.w,
        h=origin.h,
    )


def _drag_near_edge(start: int, size: int, delta: int, min_size: int) -> tuple[int, int]:
    # Far edge stays put; never shrink a box that is already under min_size.
    shift = clamp(delta, -start, max(0, size - min_size))
    return start + shift, size - shift


def _drag_far_edge(start: int, size: int, delta: int, min_size: int) -> int:
    return clamp(size + delta, min(min_size, size), GRID_SIZE - start)


def resize_rect(
    origin: Footprint,
    handle: ResizeHandle,
    dx: int,
    dy: int,
    min_size: int = MIN_BOX_SIZE,
) -> Rect:
    """Apply a cumulative drag delta on ``handle`` to the original geometry."""
    x, y, w, h = origin.x, origin.y, origin.w, origin.h
    if handle.moves_left:
        x, w = _drag_near_edge(origin.x, origin.w, dx, min_size)
    elif handle.moves_right:
        w = _drag_far_edge(origin.x, origin.w, dx, min_size)
    if handle.moves_top:
        y, h = _drag_near_edge(origin.y, origin.h, dy, min_size)
    elif handle.moves_bottom:
        h = _drag_far_edge(origin.y, origin.h, dy, min_size)
    return Rect(x=x, y=y, w=w, h=h)


def span_rect(anchor: GridCell, current: GridCell) -> Rect:
    """Rectangle covering both cells, inclusive, clamped to the grid."""
    ax, ay = clamp(anchor.x, 0, MAX_INDEX), clamp(anchor.y, 0, MAX_INDEX)
    cx, cy = clamp(current.x, 0, MAX_INDEX), clamp(current.y, 0, MAX_INDEX)
    x, y = min(ax, cx), min(ay, cy)
    return Rect(
        x=x,
        y=y,
        w=min(abs(cx - ax) + 1, GRID_SIZE - x),
        h=min(abs(cy - ay) + 1, GRID_SIZE - y),
    )


def within_grid(rect: Footprint) -> bool:
    """Return whether ``rect`` satisfies every grid bound."""
    return (
        0 <= rect.x <= MAX_INDEX
        and 0 <= rect.y <= MAX_INDEX
        and MIN_DIMENSION <= rect.w <= GRID_SIZE
        and MIN_DIMENSION <= rect.h <= GRID_SIZE
        and rect.x + rect.w <= GRID_SIZE
        and rect.y + rect.h <= GRID_SIZE
    )
