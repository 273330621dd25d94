"""
Centralized enums for the ROI annotation engine.

All enums are str-based so they serialize cleanly through pydantic and JSON.
"""

from enum import Enum


class ROIKind(str, Enum):
    """How a region's point list was produced. Does not affect measurement."""

    PATH = "path"
    RECT = "rect"
    CIRCLE = "circle"


class Tool(str, Enum):
    """Active editor tool."""

    SELECT = "select"
    PENCIL = "pencil"
    RECT = "rect"


class PointerEventType(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"


class PointerButton(str, Enum):
    PRIMARY = "primary"
    MIDDLE = "middle"
    SECONDARY = "secondary"


class InteractionStateName(str, Enum):
    """Names of the interaction states, as exposed in snapshots."""

    IDLE = "idle"
    DRAWING = "drawing"
    DRAGGING_VERTEX = "dragging_vertex"
    PANNING = "panning"
