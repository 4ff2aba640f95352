"""Collaborator ports used by the layout editor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from boxgrid.core.models import Layout


@runtime_checkable
class LayoutPersistence(Protocol):
    """Receives validated layouts after commits and explicit saves."""

    def save_layout(self, layout: Layout) -> None:
        """Persist a layout that already passed ``validate_layout``."""


__all__ = ["LayoutPersistence"]
