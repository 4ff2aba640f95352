"""Pointer interaction state machine for move, resize and create gestures.

The machine is a total function ``(state, event) -> outcome`` over immutable
state variants. Only one gesture is live at a time; its session is the only
mutable state of the core and lives from pointer-down to pointer-up/Escape.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from boxgrid.core.geometry import move_rect, resize_rect, span_rect, within_grid
from boxgrid.core.models import Box, GridCell, Rect, ResizeHandle
from boxgrid.core.validation import would_collide
from boxgrid.infra.config import EditorSettings

logger = logging.getLogger(__name__)

ESCAPE_KEY = "escape"


class GestureKind(StrEnum):
    """Kind of pointer gesture."""

    MOVE = "move"
    RESIZE = "resize"
    CREATE = "create"


class TargetKind(StrEnum):
    """What a pointer-down landed on."""

    BODY = "body"
    HANDLE = "handle"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class PointerTarget:
    """Hit-test result handed over by the renderer."""

    kind: TargetKind
    box_id: str | None = None
    handle: ResizeHandle | None = None

    @classmethod
    def body(cls, box_id: str) -> PointerTarget:
        return cls(TargetKind.BODY, box_id=box_id)

    @classmethod
    def resize_handle(cls, box_id: str, handle: ResizeHandle) -> PointerTarget:
        return cls(TargetKind.HANDLE, box_id=box_id, handle=handle)

    @classmethod
    def empty(cls) -> PointerTarget:
        return cls(TargetKind.EMPTY)


@dataclass(frozen=True, slots=True)
class PointerDown:
    target: PointerTarget
    x: float
    y: float
    cell: GridCell | None


@dataclass(frozen=True, slots=True)
class PointerMove:
    x: float
    y: float
    cell: GridCell | None


@dataclass(frozen=True, slots=True)
class PointerUp:
    x: float
    y: float
    cell: GridCell | None


@dataclass(frozen=True, slots=True)
class KeyPress:
    key: str


InteractionEvent = PointerDown | PointerMove | PointerUp | KeyPress


@dataclass(frozen=True, slots=True)
class InteractionSession:
    """Per-gesture data; ``last_valid`` is the last collision-free proposal."""

    kind: GestureKind
    origin: Box | None
    anchor: GridCell
    last_valid: Rect | None = None
    handle: ResizeHandle | None = None
    preview: Rect | None = None


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class PendingStart:
    """Pressed on a box body; not a drag until the pointer travels far enough."""

    box: Box
    anchor: GridCell
    press_x: float
    press_y: float


@dataclass(frozen=True, slots=True)
class ActiveMove:
    session: InteractionSession


@dataclass(frozen=True, slots=True)
class ActiveResize:
    session: InteractionSession


@dataclass(frozen=True, slots=True)
class ActiveCreate:
    session: InteractionSession


ActiveState = ActiveMove | ActiveResize | ActiveCreate
InteractionState = Idle | PendingStart | ActiveMove | ActiveResize | ActiveCreate

IDLE = Idle()


@dataclass(frozen=True, slots=True)
class Proposal:
    """Visual state for the renderer after a tick.

    For move/resize a non-legal proposal carries the held rectangle, not the
    rejected candidate. For create it carries the live preview.
    """

    kind: GestureKind
    box_id: str | None
    rect: Rect
    legal: bool


@dataclass(frozen=True, slots=True)
class Commit:
    """Final mutation produced by a gesture."""

    kind: GestureKind
    box_id: str | None
    rect: Rect


@dataclass(frozen=True, slots=True)
class InteractionOutcome:
    """Outcome of a single event."""

    handled: bool
    state: InteractionState
    proposal: Proposal | None = None
    commit: Commit | None = None
    restore: Box | None = None
    cancelled: bool = False
    clicked_box_id: str | None = None


def transition(
    state: InteractionState,
    event: InteractionEvent,
    boxes: Sequence[Box],
    settings: EditorSettings,
) -> InteractionOutcome:
    """Advance ``state`` by one event."""
    if isinstance(event, PointerDown):
        return _on_pointer_down(state, event, boxes)
    if isinstance(event, PointerMove):
        return _on_pointer_move(state, event, boxes, settings)
    if isinstance(event, PointerUp):
        return _on_pointer_up(state, event, boxes, settings)
    if isinstance(event, KeyPress):
        return _on_key(state, event)
    raise TypeError(f"unsupported interaction event: {event!r}")


def _unhandled(state: InteractionState) -> InteractionOutcome:
    return InteractionOutcome(handled=False, state=state)


def _find_box(boxes: Sequence[Box], box_id: str | None) -> Box | None:
    if box_id is None:
        return None
    for box in boxes:
        if box.id == box_id:
            return box
    return None


def _on_pointer_down(
    state: InteractionState, event: PointerDown, boxes: Sequence[Box]
) -> InteractionOutcome:
    if not isinstance(state, Idle) or event.cell is None:
        return _unhandled(state)
    target = event.target

    if target.kind is TargetKind.EMPTY:
        preview = span_rect(event.cell, event.cell)
        session = InteractionSession(GestureKind.CREATE, origin=None, anchor=event.cell, preview=preview)
        logger.debug("gesture_start kind=create cell=(%d, %d)", event.cell.x, event.cell.y)
        return InteractionOutcome(
            handled=True,
            state=ActiveCreate(session),
            proposal=Proposal(
                GestureKind.CREATE,
                None,
                preview,
                legal=not would_collide(preview, boxes).has_collisions,
            ),
        )

    box = _find_box(boxes, target.box_id)
    if box is None:
        return _unhandled(state)

    if target.kind is TargetKind.HANDLE:
        if target.handle is None:
            return _unhandled(state)
        session = InteractionSession(
            GestureKind.RESIZE, origin=box, anchor=event.cell, handle=target.handle
        )
        logger.debug("gesture_start kind=resize box=%s handle=%s", box.id, target.handle.value)
        return InteractionOutcome(
            handled=True,
            state=ActiveResize(session),
            proposal=Proposal(GestureKind.RESIZE, box.id, box.rect, legal=True),
        )

    return InteractionOutcome(
        handled=True,
        state=PendingStart(box=box, anchor=event.cell, press_x=event.x, press_y=event.y),
    )


def _on_pointer_move(
    state: InteractionState,
    event: PointerMove,
    boxes: Sequence[Box],
    settings: EditorSettings,
) -> InteractionOutcome:
    if isinstance(state, Idle):
        return _unhandled(state)

    if isinstance(state, PendingStart):
        distance = math.hypot(event.x - state.press_x, event.y - state.press_y)
        if distance < settings.drag_threshold_px:
            return InteractionOutcome(handled=True, state=state)
        session = InteractionSession(GestureKind.MOVE, origin=state.box, anchor=state.anchor)
        logger.debug("gesture_start kind=move box=%s distance=%.1f", state.box.id, distance)
        state = ActiveMove(session)

    if event.cell is None:
        return InteractionOutcome(handled=True, state=state)

    if isinstance(state, ActiveCreate):
        return _create_tick(state.session, event.cell, boxes)

    session = state.session
    assert session.origin is not None
    dx = event.cell.x - session.anchor.x
    dy = event.cell.y - session.anchor.y
    if isinstance(state, ActiveMove):
        return _hold_or_advance(ActiveMove, session, move_rect(session.origin, dx, dy), boxes)
    assert session.handle is not None
    candidate = resize_rect(session.origin, session.handle, dx, dy, settings.min_box_size)
    return _hold_or_advance(ActiveResize, session, candidate, boxes)


def _hold_or_advance(
    state_type: type[ActiveMove] | type[ActiveResize],
    session: InteractionSession,
    candidate: Rect,
    boxes: Sequence[Box],
) -> InteractionOutcome:
    origin = session.origin
    assert origin is not None
    if would_collide(candidate, boxes, exclude_id=origin.id).has_collisions:
        held = session.last_valid if session.last_valid is not None else origin.rect
        return InteractionOutcome(
            handled=True,
            state=state_type(session),
            proposal=Proposal(session.kind, origin.id, held, legal=False),
        )
    return InteractionOutcome(
        handled=True,
        state=state_type(replace(session, last_valid=candidate)),
        proposal=Proposal(session.kind, origin.id, candidate, legal=True),
    )


def _create_tick(session: InteractionSession, cell: GridCell, boxes: Sequence[Box]) -> InteractionOutcome:
    preview = span_rect(session.anchor, cell)
    legal = not would_collide(preview, boxes).has_collisions
    return InteractionOutcome(
        handled=True,
        state=ActiveCreate(replace(session, preview=preview)),
        proposal=Proposal(GestureKind.CREATE, None, preview, legal=legal),
    )


def _on_pointer_up(
    state: InteractionState,
    event: PointerUp,
    boxes: Sequence[Box],
    settings: EditorSettings,
) -> InteractionOutcome:
    if isinstance(state, Idle):
        return _unhandled(state)

    if isinstance(state, PendingStart):
        return InteractionOutcome(handled=True, state=IDLE, clicked_box_id=state.box.id)

    session = state.session
    if isinstance(state, ActiveCreate):
        preview = span_rect(session.anchor, event.cell) if event.cell is not None else session.preview
        if preview is None or not _creatable(preview, boxes, settings):
            logger.debug("gesture_discard kind=create rect=%s", preview)
            return InteractionOutcome(handled=True, state=IDLE)
        logger.debug("gesture_commit kind=create rect=%s", preview)
        return InteractionOutcome(
            handled=True,
            state=IDLE,
            commit=Commit(GestureKind.CREATE, None, preview),
        )

    origin = session.origin
    assert origin is not None
    final = session.last_valid
    if final is None or final == origin.rect:
        return InteractionOutcome(handled=True, state=IDLE)
    logger.debug("gesture_commit kind=%s box=%s rect=%s", session.kind.value, origin.id, final)
    return InteractionOutcome(
        handled=True,
        state=IDLE,
        commit=Commit(session.kind, origin.id, final),
    )


def _creatable(rect: Rect, boxes: Sequence[Box], settings: EditorSettings) -> bool:
    if not within_grid(rect) or rect.w < settings.min_box_size or rect.h < settings.min_box_size:
        return False
    return not would_collide(rect, boxes).has_collisions


def _on_key(state: InteractionState, event: KeyPress) -> InteractionOutcome:
    if event.key.strip().lower() != ESCAPE_KEY:
        return _unhandled(state)
    if isinstance(state, Idle):
        return _unhandled(state)
    if isinstance(state, PendingStart):
        return InteractionOutcome(handled=True, state=IDLE)
    origin = state.session.origin
    logger.debug("gesture_cancel kind=%s box=%s", state.session.kind.value, origin.id if origin else None)
    return InteractionOutcome(handled=True, state=IDLE, restore=origin, cancelled=True)


class InteractionMachine:
    """Holds the current interaction state and applies events to it."""

    def __init__(self, settings: EditorSettings | None = None) -> None:
        self._settings = settings or EditorSettings()
        self._state: InteractionState = IDLE

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, (ActiveMove, ActiveResize, ActiveCreate))

    def dispatch(self, event: InteractionEvent, boxes: Sequence[Box]) -> InteractionOutcome:
        """Apply one event and keep the resulting state."""
        outcome = transition(self._state, event, boxes, self._settings)
        self._state = outcome.state
        return outcome

    def on_pointer_down(
        self,
        target: PointerTarget,
        x: float,
        y: float,
        cell: GridCell | None,
        boxes: Sequence[Box],
    ) -> InteractionOutcome:
        return self.dispatch(PointerDown(target, x, y, cell), boxes)

    def on_pointer_move(
        self, x: float, y: float, cell: GridCell | None, boxes: Sequence[Box]
    ) -> InteractionOutcome:
        return self.dispatch(PointerMove(x, y, cell), boxes)

    def on_pointer_up(
        self, x: float, y: float, cell: GridCell | None, boxes: Sequence[Box]
    ) -> InteractionOutcome:
        return self.dispatch(PointerUp(x, y, cell), boxes)

    def on_key(self, key: str) -> InteractionOutcome:
        return self.dispatch(KeyPress(key), ())

    def reset(self) -> None:
        """Drop any live gesture without producing an outcome."""
        self._state = IDLE
