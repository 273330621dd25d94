"""
Interaction State Machine - turns pointer events into edits.

States::

    Idle ──down(select, vertex hit)──> DraggingVertex ──up──> Idle
    Idle ──down(pencil|rect)─────────> Drawing ─────────up──> Idle (commit or discard)
    Idle ──down(pan modifier)────────> Panning ─────────up──> Idle

Every transition runs to completion inside one handler call. The machine is
the single writer of the annotation store and the view transform.

There is no cancel transition: a draw gesture ends either in a commit or,
when it has fewer than two points, in a silent discard.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from roi_engine.core.annotation_store import AnnotationStore
from roi_engine.core.constants import EditorConstants
from roi_engine.core.enums import (
    InteractionStateName,
    PointerButton,
    PointerEventType,
    ROIKind,
    Tool,
)
from roi_engine.core.geometry import rect_to_polygon
from roi_engine.core.view_transform import ViewTransform
from roi_engine.schemas.annotation import ROIAnnotation
from roi_engine.schemas.common import Point
from roi_engine.schemas.editor import PointerEvent

logger = logging.getLogger(__name__)


@dataclass
class Idle:
    name = InteractionStateName.IDLE


@dataclass
class Drawing:
    tool: Tool
    points: List[Point] = field(default_factory=list)
    name = InteractionStateName.DRAWING


@dataclass
class DraggingVertex:
    roi_id: str
    point_index: int
    name = InteractionStateName.DRAGGING_VERTEX


@dataclass
class Panning:
    anchor: Tuple[float, float]
    name = InteractionStateName.PANNING


InteractionState = Union[Idle, Drawing, DraggingVertex, Panning]

PAN_BUTTONS = (PointerButton.MIDDLE, PointerButton.SECONDARY)


class InteractionStateMachine:
    """Consumes pointer events and drives the store and view transform"""

    def __init__(
        self,
        store: AnnotationStore,
        view: ViewTransform,
        default_label: str = EditorConstants.DEFAULT_LABEL,
    ):
        self.store = store
        self.view = view
        self.default_label = default_label
        self.tool = Tool.SELECT
        self.state: InteractionState = Idle()

    @property
    def state_name(self) -> InteractionStateName:
        return self.state.name

    def set_tool(self, tool: Tool) -> None:
        self.tool = Tool(tool)
        logger.debug(f"Tool set to {self.tool.value}")

    def reset(self) -> None:
        """Drop any gesture in progress and return to select/Idle."""
        self.state = Idle()
        self.tool = Tool.SELECT

    def handle(self, event: PointerEvent) -> bool:
        """
        Dispatch a pointer event.

        Returns:
            True if observable state (store, view, tool or state) changed
        """
        if event.type == PointerEventType.DOWN:
            return self.pointer_down(event.x, event.y, event.button, event.shift)
        if event.type == PointerEventType.MOVE:
            return self.pointer_move(event.x, event.y)
        return self.pointer_up(event.x, event.y)

    # Pointer down

    def pointer_down(
        self,
        x: float,
        y: float,
        button: PointerButton = PointerButton.PRIMARY,
        shift: bool = False,
    ) -> bool:
        if not isinstance(self.state, Idle):
            logger.debug(f"Ignoring pointer-down while {self.state.name.value}")
            return False

        if button in PAN_BUTTONS or (self.tool == Tool.SELECT and shift):
            pan = self.view.pan
            self.state = Panning(anchor=(x - pan.x, y - pan.y))
            return True

        point = self.view.to_annotation_space(x, y)

        if self.tool == Tool.SELECT:
            hit = self.hit_test(point)
            if hit is None:
                return False
            self.state = DraggingVertex(roi_id=hit[0], point_index=hit[1])
            logger.debug(f"Dragging vertex {hit[1]} of ROI {hit[0]}")
            return True

        self.state = Drawing(tool=self.tool, points=[point])
        return True

    def hit_test(self, point: Point) -> Optional[Tuple[str, int]]:
        """
        First vertex within the zoom-scaled threshold, in document order.

        Returns:
            (roi_id, point_index) or None
        """
        threshold = self.view.hit_threshold
        for roi_id, index, vertex in self.store.iter_vertices():
            if abs(vertex.x - point.x) < threshold and abs(vertex.y - point.y) < threshold:
                return roi_id, index
        return None

    # Pointer move

    def pointer_move(self, x: float, y: float) -> bool:
        state = self.state

        if isinstance(state, Panning):
            ax, ay = state.anchor
            self.view.set_pan(x - ax, y - ay)
            return True

        if isinstance(state, DraggingVertex):
            point = self.view.to_annotation_space(x, y)
            # A region deleted mid-drag makes this a no-op
            return self.store.update_point(state.roi_id, state.point_index, point)

        if isinstance(state, Drawing):
            point = self.view.to_annotation_space(x, y)
            if state.tool == Tool.PENCIL:
                state.points.append(point)
            else:
                state.points = [state.points[0], point]
            return True

        return False

    # Pointer up

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> bool:
        state = self.state

        if isinstance(state, (Panning, DraggingVertex)):
            self.state = Idle()
            return True

        if isinstance(state, Drawing):
            self.state = Idle()
            self._commit(state)
            return True

        return False

    def _commit(self, gesture: Drawing) -> Optional[ROIAnnotation]:
        points = gesture.points
        if gesture.tool == Tool.RECT and len(points) >= EditorConstants.MIN_COMMITTED_POINTS:
            points = rect_to_polygon(points[0], points[-1])

        if len(points) < EditorConstants.MIN_COMMITTED_POINTS:
            logger.debug(f"Discarding {gesture.tool.value} gesture with {len(points)} point(s)")
            return None

        roi = self.store.add(
            ROIAnnotation(
                type=ROIKind.RECT if gesture.tool == Tool.RECT else ROIKind.PATH,
                points=points,
                label=self.default_label,
                is_confirmed=True,
            )
        )
        # Drawing is one-shot
        self.tool = Tool.SELECT
        logger.debug(f"Committed ROI {roi.id} ({roi.type.value}, {len(roi.points)} points)")
        return roi

    # Draft geometry for the render layer

    @property
    def draft_points(self) -> List[Point]:
        if isinstance(self.state, Drawing):
            return [p.model_copy() for p in self.state.points]
        return []
