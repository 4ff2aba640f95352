"""Grid box layout engine and pointer interaction core."""

from boxgrid.app.editor import LayoutEditor
from boxgrid.app.interaction import InteractionMachine, PointerTarget
from boxgrid.core.models import GRID_SIZE, Box, GridCell, Layout, Rect, ResizeHandle

__all__ = [
    "GRID_SIZE",
    "Box",
    "GridCell",
    "InteractionMachine",
    "Layout",
    "LayoutEditor",
    "PointerTarget",
    "Rect",
    "ResizeHandle",
]
