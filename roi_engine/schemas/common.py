"""
Common geometric models shared across all layers.
"""

from typing import Tuple

from pydantic import BaseModel, Field


class Point(BaseModel):
    """2D Point in annotation space (percent of the image bounding box)"""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class ContainerBox(BaseModel):
    """
    Untransformed on-screen bounding box of the editor container.

    Expressed in device pixels. Zoom and pan are applied to a layer inside
    this box, never to the box itself.
    """

    left: float = Field(0.0, description="Left edge in device pixels")
    top: float = Field(0.0, description="Top edge in device pixels")
    width: float = Field(..., ge=0, description="Width in device pixels")
    height: float = Field(..., ge=0, description="Height in device pixels")

    @property
    def is_degenerate(self) -> bool:
        """True when the container has no measurable extent."""
        return self.width <= 0 or self.height <= 0
