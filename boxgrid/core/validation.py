"""Layout and box validation plus collision scans."""

from __future__ import annotations

from collections.abc import Sequence

from boxgrid.core.geometry import boxes_overlap
from boxgrid.core.models import (
    GRID_SIZE,
    MAX_INDEX,
    MIN_DIMENSION,
    Box,
    CollisionInfo,
    CollisionResult,
    Footprint,
    Layout,
    ValidationResult,
)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: object) -> bool:
    if not _is_number(value):
        return False
    if isinstance(value, float):
        return value.is_integer()
    return True


def _in_range(value: object, low: int, high: int) -> bool:
    return _is_integer(value) and low <= value <= high  # type: ignore[operator]


def _has_numeric_geometry(box: Box) -> bool:
    return all(_is_number(value) for value in (box.x, box.y, box.w, box.h))


def validate_box(box: Box, index: int | None = None) -> ValidationResult:
    """Validate a single box; ``index`` is 0-based and shown 1-based."""
    prefix = f"Box {index + 1}" if index is not None else "Box"
    errors: list[str] = []

    if not isinstance(box.id, str) or not box.id:
        errors.append(f"{prefix}: id is required and must not be empty")
    if not isinstance(box.title, str) or not box.title.strip():
        errors.append(f"{prefix}: title is required and must not be empty")

    if not _in_range(box.x, 0, MAX_INDEX):
        errors.append(f"{prefix}: x must be an integer between 0 and {MAX_INDEX} (got {box.x!r})")
    if not _in_range(box.y, 0, MAX_INDEX):
        errors.append(f"{prefix}: y must be an integer between 0 and {MAX_INDEX} (got {box.y!r})")
    if not _in_range(box.w, MIN_DIMENSION, GRID_SIZE):
        errors.append(
            f"{prefix}: w must be an integer between {MIN_DIMENSION} and {GRID_SIZE} (got {box.w!r})"
        )
    if not _in_range(box.h, MIN_DIMENSION, GRID_SIZE):
        errors.append(
            f"{prefix}: h must be an integer between {MIN_DIMENSION} and {GRID_SIZE} (got {box.h!r})"
        )

    if _is_number(box.x) and _is_number(box.w) and box.x + box.w > GRID_SIZE:
        errors.append(
            f"{prefix}: horizontal overflow (x={box.x} + w={box.w} > {GRID_SIZE})"
        )
    if _is_number(box.y) and _is_number(box.h) and box.y + box.h > GRID_SIZE:
        errors.append(
            f"{prefix}: vertical overflow (y={box.y} + h={box.h} > {GRID_SIZE})"
        )

    return ValidationResult.from_errors(errors)


def validate_layout(layout: Layout) -> ValidationResult:
    """Validate a whole layout; every failure is reported, in a stable order."""
    errors: list[str] = []
    if not isinstance(layout.name, str) or not layout.name:
        errors.append("Layout name is required")

    boxes = layout.boxes
    if not isinstance(boxes, (list, tuple)):
        errors.append("Layout boxes must be a list")
        return ValidationResult.from_errors(errors)

    errors.extend(_duplicate_title_errors(boxes))
    errors.extend(_duplicate_id_errors(boxes))
    for index, box in enumerate(boxes):
        errors.extend(validate_box(box, index).errors)

    scannable = [box for box in boxes if _has_numeric_geometry(box)]
    errors.extend(info.message for info in detect_collisions(scannable).collisions)
    return ValidationResult.from_errors(errors)


def detect_collisions(boxes: Sequence[Box]) -> CollisionResult:
    """Report every overlapping pair, ``i < j`` in ascending order."""
    collisions: list[CollisionInfo] = []
    for i, a in enumerate(boxes):
        for b in boxes[i + 1 :]:
            if boxes_overlap(a, b):
                collisions.append(
                    CollisionInfo(a=a, b=b, message=f'Collision between "{a.title}" and "{b.title}"')
                )
    return CollisionResult.from_collisions(collisions)


def would_collide(
    candidate: Footprint,
    existing: Sequence[Box],
    exclude_id: str | None = None,
) -> CollisionResult:
    """Check ``candidate`` against ``existing``, skipping the box ``exclude_id``."""
    collisions: list[CollisionInfo] = []
    for box in existing:
        if exclude_id is not None and box.id == exclude_id:
            continue
        if boxes_overlap(candidate, box):
            collisions.append(CollisionInfo(a=candidate, b=box, message=f'Collides with "{box.title}"'))
    return CollisionResult.from_collisions(collisions)


def _duplicate_title_errors(boxes: Sequence[Box]) -> list[str]:
    seen: set[str] = set()
    errors: list[str] = []
    for box in boxes:
        if not isinstance(box.title, str):
            continue
        key = box.title.strip().lower()
        if key in seen:
            errors.append(f'Duplicate title: "{box.title}"')
        seen.add(key)
    return errors


def _duplicate_id_errors(boxes: Sequence[Box]) -> list[str]:
    seen: set[str] = set()
    errors: list[str] = []
    for box in boxes:
        if box.id in seen:
            errors.append(f'Duplicate id: "{box.id}"')
        seen.add(box.id)
    return errors
