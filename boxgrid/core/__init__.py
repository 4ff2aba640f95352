"""Grid geometry, validation and value types."""

from boxgrid.core.geometry import boxes_overlap, find_free_position, normalize_box, occupancy_grid
from boxgrid.core.validation import detect_collisions, validate_box, validate_layout, would_collide

__all__ = [
    "boxes_overlap",
    "detect_collisions",
    "find_free_position",
    "normalize_box",
    "occupancy_grid",
    "validate_box",
    "validate_layout",
    "would_collide",
]
