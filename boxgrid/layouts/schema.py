"""Layout JSON payload conversion with structural checks."""

from __future__ import annotations

import math

from boxgrid.core.models import Box, Layout

_GEOMETRY_KEYS = ("x", "y", "w", "h")


def layout_to_payload(layout: Layout) -> dict[str, object]:
    """Convert a layout to its JSON-serializable payload."""
    return {
        "name": layout.name,
        "boxes": [
            {"id": box.id, "title": box.title, "x": box.x, "y": box.y, "w": box.w, "h": box.h}
            for box in layout.boxes
        ],
    }


def payload_to_layout(payload: object) -> Layout:
    """Convert a loaded payload into a layout.

    Only the shape is checked here; grid bounds, uniqueness and collisions are
    left to ``validate_layout``.
    """
    if not isinstance(payload, dict):
        raise ValueError("Layout payload must be an object.")
    name = payload.get("name")
    if not isinstance(name, str):
        raise ValueError("Layout name must be a string.")
    raw_boxes = payload.get("boxes")
    if not isinstance(raw_boxes, list):
        raise ValueError("Layout boxes must be a list.")

    boxes: list[Box] = []
    for index, item in enumerate(raw_boxes, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Box {index} must be an object.")
        try:
            box_id = item["id"]
            title = item["title"]
            if not isinstance(box_id, str) or not isinstance(title, str):
                raise TypeError("id and title must be strings")
            x, y, w, h = (_coordinate(item[key]) for key in _GEOMETRY_KEYS)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed box {index} in layout payload.") from exc
        boxes.append(Box(id=box_id, title=title, x=x, y=y, w=w, h=h))
    return Layout(name=name, boxes=tuple(boxes))


def _coordinate(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"coordinate must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise TypeError(f"coordinate must be a finite number, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    # Fractional values pass through so validation can report them.
    return value  # type: ignore[return-value]
