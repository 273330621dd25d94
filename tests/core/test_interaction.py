"""
Tests for the interaction state machine
"""

import pytest

from roi_engine.core.enums import (
    InteractionStateName,
    PointerButton,
    PointerEventType,
    ROIKind,
    Tool,
)
from roi_engine.core.interaction import DraggingVertex, Drawing, Idle, Panning
from roi_engine.schemas import PointerEvent


class TestDrawing:
    """Pencil and rectangle gestures"""

    def test_pencil_commit(self, machine, store):
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(10, 10)
        machine.pointer_move(20, 15)
        machine.pointer_move(30, 25)
        machine.pointer_up(30, 25)

        rois = store.list()
        assert len(rois) == 1
        roi = rois[0]
        assert roi.type == ROIKind.PATH
        assert [p.as_tuple() for p in roi.points] == [(10, 10), (20, 15), (30, 25)]
        assert roi.is_confirmed is True
        assert roi.label == "Doctor ROI"
        assert roi.measurements.length is not None

    def test_commit_reverts_to_select(self, machine):
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(10, 10)
        machine.pointer_move(20, 20)
        machine.pointer_up()

        assert machine.tool == Tool.SELECT
        assert isinstance(machine.state, Idle)

    def test_pencil_drawing_state(self, machine):
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(10, 10)
        machine.pointer_move(12, 12)

        assert isinstance(machine.state, Drawing)
        assert machine.state_name == InteractionStateName.DRAWING
        assert [p.as_tuple() for p in machine.draft_points] == [(10, 10), (12, 12)]

    @pytest.mark.parametrize("tool", [Tool.PENCIL, Tool.RECT])
    def test_single_click_discarded(self, machine, store, tool):
        """A down then up with no movement produces no region"""
        machine.set_tool(tool)

        machine.pointer_down(40, 40)
        machine.pointer_up(40, 40)

        assert len(store) == 0
        assert machine.tool == tool
        assert isinstance(machine.state, Idle)

    def test_rect_down_right(self, machine, store):
        machine.set_tool(Tool.RECT)

        machine.pointer_down(10, 10)
        machine.pointer_move(30, 20)
        machine.pointer_move(50, 40)
        machine.pointer_up(50, 40)

        roi = store.list()[0]
        assert roi.type == ROIKind.RECT
        assert [p.as_tuple() for p in roi.points] == [(10, 10), (50, 10), (50, 40), (10, 40)]

    def test_rect_either_direction_same_region(self, machine, store):
        machine.set_tool(Tool.RECT)
        machine.pointer_down(10, 10)
        machine.pointer_move(50, 40)
        machine.pointer_up()

        machine.set_tool(Tool.RECT)
        machine.pointer_down(50, 40)
        machine.pointer_move(10, 10)
        machine.pointer_up()

        forward, backward = store.list()
        assert len(forward.points) == len(backward.points) == 4
        assert {p.as_tuple() for p in forward.points} == {p.as_tuple() for p in backward.points}
        assert forward.measurements.length == backward.measurements.length

    def test_rect_draft_is_two_points(self, machine):
        machine.set_tool(Tool.RECT)

        machine.pointer_down(10, 10)
        machine.pointer_move(20, 20)
        machine.pointer_move(30, 35)

        assert [p.as_tuple() for p in machine.draft_points] == [(10, 10), (30, 35)]

    def test_draw_on_top_of_vertex(self, machine, store, roi_factory):
        """With a drawing tool active, vertices are not hit-tested"""
        store.add(roi_factory([(10, 10), (20, 20)], roi_id="roi_a"))
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(10, 10)

        assert isinstance(machine.state, Drawing)

    def test_points_stored_in_annotation_space(self, machine, store, view):
        view.set_zoom(2.0)
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(40, 40)
        machine.pointer_move(60, 80)
        machine.pointer_up()

        assert [p.as_tuple() for p in store.list()[0].points] == [(20, 20), (30, 40)]

    def test_points_stay_on_image_after_pan(self, machine, store, view):
        """Strokes that start off the panned image are clamped to its edge"""
        view.pan_by(60, 60)
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(5, 5)
        machine.pointer_move(90, 90)
        machine.pointer_up()

        points = store.list()[0].points
        assert [p.as_tuple() for p in points] == [(0, 0), (30, 30)]
        assert all(0 <= c <= 100 for p in points for c in p.as_tuple())


class TestVertexDragging:
    """Select tool hit-testing and drag edits"""

    @pytest.fixture
    def proposal(self, store, roi_factory):
        store.replace_all([roi_factory([(0, 0), (0, 3), (4, 0)], roi_id="roi_p")])
        return "roi_p"

    def test_hit_starts_drag(self, machine, proposal):
        assert machine.pointer_down(1, 1) is True

        assert isinstance(machine.state, DraggingVertex)
        assert machine.state.roi_id == proposal
        assert machine.state.point_index == 0

    def test_miss_stays_idle(self, machine, proposal):
        assert machine.pointer_down(50, 50) is False
        assert isinstance(machine.state, Idle)

    def test_drag_promotes_to_confirmed(self, machine, store, proposal):
        assert store.get(proposal).is_confirmed is False

        machine.pointer_down(4, 0)
        machine.pointer_move(8, 0)
        machine.pointer_up()

        roi = store.get(proposal)
        assert roi.is_confirmed is True
        assert roi.points[2].as_tuple() == (8, 0)
        assert roi.measurements.length == 29

    def test_down_and_up_without_move_keeps_proposal(self, machine, store, proposal):
        machine.pointer_down(4, 0)
        machine.pointer_up()

        assert store.get(proposal).is_confirmed is False

    def test_first_match_wins(self, machine, store, roi_factory):
        store.add(roi_factory([(10, 10), (50, 50)], roi_id="roi_first"))
        store.add(roi_factory([(11, 11), (60, 60)], roi_id="roi_second"))

        machine.pointer_down(10.5, 10.5)

        assert machine.state.roi_id == "roi_first"
        assert machine.state.point_index == 0

    def test_hit_box_is_square(self, machine, store, roi_factory):
        """Both axis offsets must be under the threshold"""
        store.add(roi_factory([(10, 10), (50, 50)], roi_id="roi_a"))

        assert machine.hit_test(machine.view.to_annotation_space(12.9, 12.9)) is not None
        assert machine.hit_test(machine.view.to_annotation_space(13, 10)) is None
        assert machine.hit_test(machine.view.to_annotation_space(10, 13.5)) is None

    def test_hit_threshold_shrinks_with_zoom(self, machine, store, view, roi_factory):
        store.add(roi_factory([(10, 10), (50, 50)], roi_id="roi_a"))
        pointer = machine.view.to_annotation_space(12, 10)

        assert machine.hit_test(pointer) == ("roi_a", 0)

        view.set_zoom(2.0)
        assert machine.hit_test(pointer) is None

    def test_drag_after_delete_is_noop(self, machine, store, proposal):
        machine.pointer_down(0, 0)
        store.remove_by_id(proposal)

        assert machine.pointer_move(20, 20) is False
        assert len(store) == 0
        assert machine.pointer_up() is True
        assert isinstance(machine.state, Idle)


class TestPanning:
    @pytest.mark.parametrize("button", [PointerButton.MIDDLE, PointerButton.SECONDARY])
    def test_pan_buttons(self, machine, view, button):
        machine.pointer_down(10, 10, button=button)
        machine.pointer_move(25, 5)

        assert isinstance(machine.state, Panning)
        assert view.pan.as_tuple() == (15, -5)

        machine.pointer_up()
        assert isinstance(machine.state, Idle)

    def test_shift_pans_with_select_tool(self, machine, view):
        machine.pointer_down(10, 10, shift=True)
        machine.pointer_move(20, 20)

        assert isinstance(machine.state, Panning)
        assert view.pan.as_tuple() == (10, 10)

    def test_shift_with_drawing_tool_draws(self, machine):
        machine.set_tool(Tool.PENCIL)

        machine.pointer_down(10, 10, shift=True)

        assert isinstance(machine.state, Drawing)

    def test_pan_continues_from_previous_offset(self, machine, view):
        view.set_pan(5, 5)

        machine.pointer_down(10, 10, button=PointerButton.MIDDLE)
        machine.pointer_move(12, 13)

        assert view.pan.as_tuple() == (7, 8)

    def test_pan_does_not_touch_store(self, machine, store, roi_factory):
        store.add(roi_factory([(10, 10), (20, 20)], roi_id="roi_a"))
        before = store.list()

        machine.pointer_down(10, 10, button=PointerButton.MIDDLE)
        machine.pointer_move(40, 40)
        machine.pointer_up()

        assert store.list() == before


class TestEventDispatch:
    def test_down_while_busy_ignored(self, machine):
        machine.set_tool(Tool.PENCIL)
        machine.pointer_down(10, 10)

        assert machine.pointer_down(50, 50, button=PointerButton.MIDDLE) is False
        assert isinstance(machine.state, Drawing)

    def test_stray_move_and_up(self, machine):
        assert machine.pointer_move(10, 10) is False
        assert machine.pointer_up() is False

    def test_handle_dispatches(self, machine, store):
        machine.set_tool(Tool.PENCIL)

        for event_type, x, y in [
            (PointerEventType.DOWN, 5, 5),
            (PointerEventType.MOVE, 15, 5),
            (PointerEventType.UP, 15, 5),
        ]:
            machine.handle(PointerEvent(type=event_type, x=x, y=y))

        assert len(store) == 1

    def test_reset(self, machine):
        machine.set_tool(Tool.RECT)
        machine.pointer_down(10, 10)

        machine.reset()

        assert machine.tool == Tool.SELECT
        assert isinstance(machine.state, Idle)
        assert machine.draft_points == []
