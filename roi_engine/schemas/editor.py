"""
Editor session API models.

This module contains models for the interactive editor:
- Pointer events consumed by the interaction state machine
- Snapshots produced for the render layer
- Session request and response models
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from roi_engine.core.enums import (
    InteractionStateName,
    PointerButton,
    PointerEventType,
    Tool,
)

from .annotation import ROIAnnotation
from .common import ContainerBox, Point
from .view import ViewState


class PointerEvent(BaseModel):
    """Raw pointer event in device-space coordinates"""

    type: PointerEventType
    x: float = Field(..., description="Device-space x in pixels")
    y: float = Field(..., description="Device-space y in pixels")
    button: PointerButton = PointerButton.PRIMARY
    shift: bool = Field(False, description="Pan modifier key held")


class EditorSnapshot(BaseModel):
    """
    Everything the render layer needs to redraw the scene.

    Snapshots are copies; mutating one has no effect on the editor.
    """

    session_id: Optional[str] = None
    image_ref: Optional[str] = None
    tool: Tool
    state: InteractionStateName
    view: ViewState
    rois: List[ROIAnnotation] = Field(default_factory=list)
    draft_points: List[Point] = Field(
        default_factory=list, description="Points of the gesture in progress"
    )
    total_burden: int = Field(0, description="Sum of longest diameters in mm")
    hit_threshold: float = Field(..., description="Vertex hit radius in annotation units")
    handle_radius: float = Field(..., description="Handle radius scaled by 1/zoom")
    has_image: bool = False


# Session requests
class SessionCreateRequest(BaseModel):
    """Request to open an editor session for one image"""

    image_ref: str = Field(..., description="Opaque image reference owned by the caller")
    initial_rois: List[ROIAnnotation] = Field(
        default_factory=list, description="Proposed regions, usually unconfirmed"
    )
    container: Optional[ContainerBox] = None
    image_base64: Optional[str] = Field(
        None, description="Optional pixel data for intensity sampling and previews"
    )


class ToolRequest(BaseModel):
    tool: Tool


class ZoomRequest(BaseModel):
    """Relative (delta) or absolute (zoom) zoom change"""

    delta: Optional[float] = None
    zoom: Optional[float] = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> "ZoomRequest":
        if (self.delta is None) == (self.zoom is None):
            raise ValueError("Provide exactly one of 'delta' or 'zoom'")
        return self


class PanRequest(BaseModel):
    """Relative pan offset in device pixels"""

    dx: float = 0.0
    dy: float = 0.0


class DisplayRequest(BaseModel):
    """Display-only adjustments; omitted fields are left unchanged"""

    brightness: Optional[float] = None
    contrast: Optional[float] = None
    invert: Optional[bool] = None


# Session responses
class SessionSummary(BaseModel):
    session_id: str
    image_ref: Optional[str] = None
    roi_count: int
    total_burden: int


class ConfirmResponse(BaseModel):
    """Regions handed back to the caller on confirm"""

    session_id: str
    rois: List[ROIAnnotation]
    total_burden: int


class PreviewResponse(BaseModel):
    session_id: str
    thumbnail_base64: str
