"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization,
organized by domain.

These schemas are shared across all application layers:
- API (routers, dependencies)
- Services (editor sessions)
- Core (store, view transform, state machine)
"""

# Re-export enums from centralized location for convenience
from roi_engine.core.enums import (
    InteractionStateName,
    PointerButton,
    PointerEventType,
    ROIKind,
    Tool,
)

# Annotation models
from .annotation import Measurements, ROIAnnotation

# Common models (core data structures)
from .common import ContainerBox, Point

# Editor models
from .editor import (
    ConfirmResponse,
    DisplayRequest,
    EditorSnapshot,
    PanRequest,
    PointerEvent,
    PreviewResponse,
    SessionCreateRequest,
    SessionSummary,
    ToolRequest,
    ZoomRequest,
)

# View models
from .view import ViewState

# Explicitly declare public API for re-export
__all__ = [
    # Common models
    "Point",
    "ContainerBox",
    # Annotation models
    "Measurements",
    "ROIAnnotation",
    # View models
    "ViewState",
    # Editor models
    "PointerEvent",
    "EditorSnapshot",
    "SessionCreateRequest",
    "SessionSummary",
    "ToolRequest",
    "ZoomRequest",
    "PanRequest",
    "DisplayRequest",
    "ConfirmResponse",
    "PreviewResponse",
    # Enums (re-exported from core.enums)
    "InteractionStateName",
    "PointerButton",
    "PointerEventType",
    "ROIKind",
    "Tool",
]
