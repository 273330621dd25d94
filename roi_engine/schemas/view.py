"""
View state model.
"""

from pydantic import BaseModel, Field

from roi_engine.core.constants import ViewConstants

from .common import Point


class ViewState(BaseModel):
    """Zoom, pan and display-only adjustments for one editing session"""

    zoom: float = Field(ViewConstants.DEFAULT_ZOOM, ge=ViewConstants.ZOOM_MIN)
    pan: Point = Field(default_factory=lambda: Point(x=0.0, y=0.0))
    brightness: float = Field(ViewConstants.DEFAULT_BRIGHTNESS, description="Percent")
    contrast: float = Field(ViewConstants.DEFAULT_CONTRAST, description="Percent")
    invert: bool = False
