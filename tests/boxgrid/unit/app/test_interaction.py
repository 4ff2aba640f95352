import pytest

from boxgrid.app.interaction import (
    IDLE,
    ActiveCreate,
    ActiveMove,
    ActiveResize,
    GestureKind,
    InteractionMachine,
    InteractionSession,
    PendingStart,
    PointerTarget,
    PointerUp,
    Proposal,
    transition,
)
from boxgrid.core.models import Box, GridCell, Rect, ResizeHandle
from boxgrid.infra.config import EditorSettings

CELL = 26.0


def _px(cell: int) -> float:
    return cell * CELL + CELL / 2


def _layout_boxes() -> tuple[Box, ...]:
    return (
        Box(id="a", title="A", x=0, y=0, w=4, h=4),
        Box(id="b", title="B", x=6, y=0, w=4, h=4),
    )


def _press_body(machine: InteractionMachine, boxes: tuple[Box, ...], cell: GridCell) -> None:
    outcome = machine.on_pointer_down(PointerTarget.body("a"), _px(cell.x), _px(cell.y), cell, boxes)
    assert outcome.handled
    assert isinstance(outcome.state, PendingStart)


def _move(machine: InteractionMachine, boxes: tuple[Box, ...], cell: GridCell):
    return machine.on_pointer_move(_px(cell.x), _px(cell.y), cell, boxes)


def test_small_move_stays_pending_and_release_is_a_click() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))

    outcome = machine.on_pointer_move(_px(1) + 3, _px(1), GridCell(1, 1), boxes)
    assert isinstance(outcome.state, PendingStart)
    assert outcome.proposal is None

    released = machine.on_pointer_up(_px(1) + 3, _px(1), GridCell(1, 1), boxes)
    assert released.clicked_box_id == "a"
    assert released.commit is None
    assert released.state == IDLE


def test_crossing_threshold_starts_move_and_applies_tick() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))

    outcome = _move(machine, boxes, GridCell(1, 2))
    assert isinstance(outcome.state, ActiveMove)
    assert outcome.proposal is not None
    assert outcome.proposal.rect == Rect(0, 1, 4, 4)
    assert outcome.proposal.legal
    assert machine.is_active


def test_threshold_distance_counts_as_drag() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine(EditorSettings(drag_threshold_px=5.0))
    _press_body(machine, boxes, GridCell(1, 1))
    outcome = machine.on_pointer_move(_px(1) + 3, _px(1) + 4, GridCell(1, 1), boxes)
    assert isinstance(outcome.state, ActiveMove)


def test_move_freezes_on_collision_then_unsticks() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))

    first = _move(machine, boxes, GridCell(2, 1))
    assert first.proposal.rect == Rect(1, 0, 4, 4)
    second = _move(machine, boxes, GridCell(3, 1))
    assert second.proposal.rect == Rect(2, 0, 4, 4)
    assert second.proposal.legal

    frozen = _move(machine, boxes, GridCell(4, 1))
    assert not frozen.proposal.legal
    assert frozen.proposal.rect == Rect(2, 0, 4, 4)

    unstuck = _move(machine, boxes, GridCell(2, 5))
    assert unstuck.proposal.legal
    assert unstuck.proposal.rect == Rect(1, 4, 4, 4)

    released = machine.on_pointer_up(_px(2), _px(5), GridCell(2, 5), boxes)
    assert released.commit is not None
    assert released.commit.kind is GestureKind.MOVE
    assert released.commit.box_id == "a"
    assert released.commit.rect == Rect(1, 4, 4, 4)
    assert not machine.is_active


def test_release_while_frozen_commits_last_valid() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))
    _move(machine, boxes, GridCell(3, 1))
    _move(machine, boxes, GridCell(5, 1))

    released = machine.on_pointer_up(_px(5), _px(1), GridCell(5, 1), boxes)
    assert released.commit.rect == Rect(2, 0, 4, 4)


def test_move_back_to_origin_commits_nothing() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))
    _move(machine, boxes, GridCell(2, 2))
    _move(machine, boxes, GridCell(1, 1))

    released = machine.on_pointer_up(_px(1), _px(1), GridCell(1, 1), boxes)
    assert released.handled
    assert released.commit is None


def test_move_with_first_tick_colliding_holds_origin() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))

    outcome = _move(machine, boxes, GridCell(6, 1))
    assert not outcome.proposal.legal
    assert outcome.proposal.rect == Rect(0, 0, 4, 4)
    assert machine.on_pointer_up(_px(6), _px(1), GridCell(6, 1), boxes).commit is None


def test_resize_freezes_and_commits_last_legal_rect() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    down = machine.on_pointer_down(
        PointerTarget.resize_handle("a", ResizeHandle.E), _px(3), _px(1), GridCell(3, 1), boxes
    )
    assert isinstance(down.state, ActiveResize)
    assert down.proposal.rect == Rect(0, 0, 4, 4)

    grown = _move(machine, boxes, GridCell(5, 1))
    assert grown.proposal == Proposal(GestureKind.RESIZE, "a", Rect(0, 0, 6, 4), True)
    frozen = _move(machine, boxes, GridCell(6, 1))
    assert not frozen.proposal.legal
    assert frozen.proposal.rect == Rect(0, 0, 6, 4)

    released = machine.on_pointer_up(_px(6), _px(1), GridCell(6, 1), boxes)
    assert released.commit.kind is GestureKind.RESIZE
    assert released.commit.rect == Rect(0, 0, 6, 4)


def test_escape_mid_resize_restores_origin() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    machine.on_pointer_down(
        PointerTarget.resize_handle("a", ResizeHandle.SE), _px(3), _px(3), GridCell(3, 3), boxes
    )
    _move(machine, boxes, GridCell(5, 8))

    cancelled = machine.on_key("Escape")
    assert cancelled.cancelled
    assert cancelled.restore == boxes[0]
    assert cancelled.commit is None
    assert cancelled.state == IDLE
    assert not machine.is_active


def test_escape_while_pending_returns_to_idle() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))
    outcome = machine.on_key("escape")
    assert outcome.handled
    assert not outcome.cancelled
    assert machine.state == IDLE


def test_other_keys_and_idle_escape_are_unhandled() -> None:
    machine = InteractionMachine()
    assert not machine.on_key("Escape").handled
    _press_body(machine, _layout_boxes(), GridCell(1, 1))
    assert not machine.on_key("Delete").handled
    assert isinstance(machine.state, PendingStart)


def test_create_drag_previews_and_commits() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    down = machine.on_pointer_down(PointerTarget.empty(), _px(10), _px(10), GridCell(10, 10), boxes)
    assert isinstance(down.state, ActiveCreate)
    assert down.proposal.rect == Rect(10, 10, 1, 1)
    assert down.proposal.legal

    preview = _move(machine, boxes, GridCell(8, 12))
    assert preview.proposal.rect == Rect(8, 10, 3, 3)

    released = machine.on_pointer_up(_px(8), _px(12), GridCell(8, 12), boxes)
    assert released.commit is not None
    assert released.commit.kind is GestureKind.CREATE
    assert released.commit.box_id is None
    assert released.commit.rect == Rect(8, 10, 3, 3)


def test_create_below_min_size_is_discarded() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    machine.on_pointer_down(PointerTarget.empty(), _px(10), _px(10), GridCell(10, 10), boxes)
    _move(machine, boxes, GridCell(15, 10))
    released = machine.on_pointer_up(_px(15), _px(10), GridCell(15, 10), boxes)
    assert released.handled
    assert released.commit is None
    assert released.state == IDLE


def test_create_over_existing_box_is_illegal() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    machine.on_pointer_down(PointerTarget.empty(), _px(5), _px(6), GridCell(5, 6), boxes)
    preview = _move(machine, boxes, GridCell(7, 2))
    assert not preview.proposal.legal
    released = machine.on_pointer_up(_px(7), _px(2), GridCell(7, 2), boxes)
    assert released.commit is None


def test_escape_during_create_cancels_without_restore() -> None:
    machine = InteractionMachine()
    machine.on_pointer_down(PointerTarget.empty(), _px(10), _px(10), GridCell(10, 10), ())
    outcome = machine.on_key("Escape")
    assert outcome.cancelled
    assert outcome.restore is None


def test_pointer_down_during_gesture_is_ignored() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    machine.on_pointer_down(PointerTarget.empty(), _px(10), _px(10), GridCell(10, 10), boxes)
    second = machine.on_pointer_down(PointerTarget.body("a"), _px(1), _px(1), GridCell(1, 1), boxes)
    assert not second.handled
    assert isinstance(machine.state, ActiveCreate)


def test_pointer_down_on_unknown_box_is_unhandled() -> None:
    machine = InteractionMachine()
    outcome = machine.on_pointer_down(PointerTarget.body("zzz"), 1.0, 1.0, GridCell(0, 0), _layout_boxes())
    assert not outcome.handled
    assert machine.state == IDLE


def test_move_outside_grid_keeps_session() -> None:
    boxes = _layout_boxes()
    machine = InteractionMachine()
    _press_body(machine, boxes, GridCell(1, 1))
    _move(machine, boxes, GridCell(1, 3))
    outcome = machine.on_pointer_move(-500.0, -500.0, None, boxes)
    assert outcome.handled
    assert outcome.proposal is None
    assert isinstance(machine.state, ActiveMove)


def test_idle_move_and_up_are_unhandled() -> None:
    machine = InteractionMachine()
    assert not machine.on_pointer_move(1.0, 1.0, GridCell(0, 0), ()).handled
    assert not machine.on_pointer_up(1.0, 1.0, GridCell(0, 0), ()).handled


def test_reset_drops_live_gesture() -> None:
    machine = InteractionMachine()
    machine.on_pointer_down(PointerTarget.empty(), 1.0, 1.0, GridCell(0, 0), ())
    machine.reset()
    assert machine.state == IDLE


def test_transition_rejects_unknown_event(settings: EditorSettings) -> None:
    with pytest.raises(TypeError):
        transition(IDLE, object(), (), settings)  # type: ignore[arg-type]


def test_create_release_outside_grid_is_discarded(settings: EditorSettings) -> None:
    session = InteractionSession(
        GestureKind.CREATE, origin=None, anchor=GridCell(22, 0), preview=Rect(22, 0, 4, 2)
    )
    outcome = transition(ActiveCreate(session), PointerUp(0.0, 0.0, None), (), settings)
    assert outcome.handled
    assert outcome.commit is None
    assert outcome.state == IDLE
