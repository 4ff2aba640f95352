"""Layout editor service: owns the current layout and applies gesture commits."""

from __future__ import annotations

import logging
from dataclasses import replace

from boxgrid.app.interaction import (
    Commit,
    GestureKind,
    InteractionMachine,
    InteractionOutcome,
    PointerTarget,
    TargetKind,
)
from boxgrid.app.ports import LayoutPersistence
from boxgrid.core.geometry import find_free_position
from boxgrid.core.models import Box, GridCell, Layout, Rect, ValidationResult
from boxgrid.core.naming import UNTITLED, generate_box_id, next_box_title, title_key
from boxgrid.core.validation import validate_layout
from boxgrid.infra.config import EditorSettings

logger = logging.getLogger(__name__)


class LayoutEditor:
    """Single-selection layout editor driven by renderer events."""

    def __init__(
        self,
        layout: Layout,
        *,
        settings: EditorSettings | None = None,
        persistence: LayoutPersistence | None = None,
    ) -> None:
        self._settings = settings or EditorSettings()
        self._layout = layout
        self._persistence = persistence
        self._machine = InteractionMachine(self._settings)
        self._selected_box_id: str | None = None

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    @property
    def selected_box_id(self) -> str | None:
        return self._selected_box_id

    @property
    def is_interacting(self) -> bool:
        return self._machine.is_active

    def select(self, box_id: str | None) -> bool:
        """Select a box by id, or clear selection with None."""
        if box_id is not None and self._layout.box_by_id(box_id) is None:
            return False
        self._selected_box_id = box_id
        return True

    def on_pointer_down(
        self, target: PointerTarget, x: float, y: float, cell: GridCell | None
    ) -> InteractionOutcome:
        outcome = self._machine.on_pointer_down(target, x, y, cell, self._layout.boxes)
        if outcome.handled:
            if target.kind is TargetKind.EMPTY:
                self._selected_box_id = None
            elif target.box_id is not None:
                self._selected_box_id = target.box_id
        return outcome

    def on_pointer_move(self, x: float, y: float, cell: GridCell | None) -> InteractionOutcome:
        return self._machine.on_pointer_move(x, y, cell, self._layout.boxes)

    def on_pointer_up(self, x: float, y: float, cell: GridCell | None) -> InteractionOutcome:
        outcome = self._machine.on_pointer_up(x, y, cell, self._layout.boxes)
        if outcome.clicked_box_id is not None:
            self._selected_box_id = outcome.clicked_box_id
        if outcome.commit is not None:
            self._apply_commit(outcome.commit)
        return outcome

    def on_key(self, key: str) -> InteractionOutcome:
        return self._machine.on_key(key)

    def add_box(
        self,
        width: int | None = None,
        height: int | None = None,
        title: str | None = None,
    ) -> Box | None:
        """Add a box at the first free position; None when the grid has no room."""
        w = width if width is not None else self._settings.default_box_width
        h = height if height is not None else self._settings.default_box_height
        position = find_free_position(w, h, self._layout.boxes)
        if position is None:
            logger.info("add_box_no_space w=%d h=%d", w, h)
            return None
        if title is not None and title.strip() and not self._title_available(title.strip()):
            logger.info("add_box_duplicate_title title=%s", title)
            return None
        box = self._insert_box(Rect(position.x, position.y, w, h), title)
        logger.info("box_added box=%s rect=%s", box.id, box.rect)
        return box

    def delete_box(self, box_id: str) -> bool:
        """Remove a box by id."""
        if self._machine.is_active or self._layout.box_by_id(box_id) is None:
            return False
        self._layout = self._layout.without(box_id)
        if self._selected_box_id == box_id:
            self._selected_box_id = None
        logger.info("box_deleted box=%s", box_id)
        self._persist()
        return True

    def delete_selected(self) -> bool:
        if self._selected_box_id is None:
            return False
        return self.delete_box(self._selected_box_id)

    def rename_box(self, box_id: str, title: str) -> bool:
        """Retitle a box; blank titles become ``Untitled``, duplicates are rejected."""
        box = self._layout.box_by_id(box_id)
        if box is None:
            return False
        cleaned = title.strip() or UNTITLED
        if not self._title_available(cleaned, ignore_id=box_id):
            logger.info("rename_rejected box=%s title=%s", box_id, cleaned)
            return False
        if cleaned == box.title:
            return True
        self._layout = self._layout.with_box(replace(box, title=cleaned))
        logger.info("box_renamed box=%s title=%s", box_id, cleaned)
        self._persist()
        return True

    def save(self) -> ValidationResult:
        """Validate the layout and hand it to persistence when valid."""
        return self._persist(explicit=True)

    def _apply_commit(self, commit: Commit) -> None:
        if commit.kind is GestureKind.CREATE:
            created = self._insert_box(commit.rect, None)
            logger.info("box_created box=%s rect=%s", created.id, commit.rect)
            return
        assert commit.box_id is not None
        box = self._layout.box_by_id(commit.box_id)
        if box is None:
            logger.warning("commit_for_unknown_box box=%s", commit.box_id)
            return
        self._layout = self._layout.with_box(box.with_rect(commit.rect))
        logger.info("box_committed kind=%s box=%s rect=%s", commit.kind.value, box.id, commit.rect)
        self._persist()

    def _insert_box(self, rect: Rect, title: str | None) -> Box:
        boxes = self._layout.boxes
        box = Box(
            id=generate_box_id(self._layout.name, boxes),
            title=title.strip() if title and title.strip() else next_box_title(boxes),
            x=rect.x,
            y=rect.y,
            w=rect.w,
            h=rect.h,
        )
        self._layout = self._layout.adding(box)
        self._selected_box_id = box.id
        self._persist()
        return box

    def _title_available(self, title: str, ignore_id: str | None = None) -> bool:
        key = title_key(title)
        return all(box.id == ignore_id or title_key(box.title) != key for box in self._layout.boxes)

    def _persist(self, explicit: bool = False) -> ValidationResult:
        result = validate_layout(self._layout)
        if not result.is_valid:
            logger.warning("layout_save_rejected errors=%s", list(result.errors))
            return result
        if self._persistence is not None:
            self._persistence.save_layout(self._layout)
        elif explicit:
            logger.debug("layout_save_skipped reason=no_persistence")
        return result
