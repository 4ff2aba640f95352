"""Core domain models shared by the engine and the interaction layer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Protocol

GRID_SIZE = 24
MAX_INDEX = GRID_SIZE - 1
MIN_DIMENSION = 1
MIN_BOX_SIZE = 2


class Footprint(Protocol):
    """Anything with grid geometry."""

    @property
    def x(self) -> int: ...

    @property
    def y(self) -> int: ...

    @property
    def w(self) -> int: ...

    @property
    def h(self) -> int: ...


class ResizeHandle(StrEnum):
    """Resize handles around a box."""

    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def moves_top(self) -> bool:
        return "n" in self.value

    @property
    def moves_bottom(self) -> bool:
        return "s" in self.value

    @property
    def moves_left(self) -> bool:
        return "w" in self.value

    @property
    def moves_right(self) -> bool:
        return "e" in self.value


@dataclass(frozen=True, slots=True)
class GridCell:
    """Grid cell coordinate, also used as a top-left corner."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Rect:
    """Title-less box geometry."""

    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True, slots=True)
class Box:
    """A titled rectangle placed on the grid."""

    id: str
    title: str
    x: int
    y: int
    w: int
    h: int

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    def with_rect(self, rect: Rect) -> Box:
        """Return a copy of this box moved/resized to ``rect``."""
        return replace(self, x=rect.x, y=rect.y, w=rect.w, h=rect.h)


@dataclass(frozen=True, slots=True)
class Layout:
    """Named, ordered collection of boxes."""

    name: str
    boxes: tuple[Box, ...] = ()

    def box_by_id(self, box_id: str) -> Box | None:
        """Find a box by id."""
        for box in self.boxes:
            if box.id == box_id:
                return box
        return None

    def with_box(self, box: Box) -> Layout:
        """Replace the box sharing ``box.id``, keeping its position in order."""
        return replace(self, boxes=tuple(box if b.id == box.id else b for b in self.boxes))

    def adding(self, box: Box) -> Layout:
        return replace(self, boxes=(*self.boxes, box))

    def without(self, box_id: str) -> Layout:
        return replace(self, boxes=tuple(b for b in self.boxes if b.id != box_id))


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation pass."""

    is_valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        return cls(is_valid=not errors, errors=tuple(errors))


@dataclass(frozen=True, slots=True)
class CollisionInfo:
    """A single overlapping pair."""

    a: Footprint
    b: Box
    message: str


@dataclass(frozen=True, slots=True)
class CollisionResult:
    """Aggregated collision scan result."""

    has_collisions: bool
    collisions: tuple[CollisionInfo, ...] = ()

    @classmethod
    def from_collisions(cls, collisions: list[CollisionInfo]) -> CollisionResult:
        return cls(has_collisions=bool(collisions), collisions=tuple(collisions))
