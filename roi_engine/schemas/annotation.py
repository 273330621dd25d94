"""
Region of Interest annotation models.

This module contains the authoritative ROI entity and its derived
measurements. Both accept the camelCase field names used by upstream
proposal sources (``isConfirmed``, ``huValue``) as well as snake_case.
"""

import math
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from roi_engine.core.constants import EditorConstants
from roi_engine.core.enums import ROIKind

from .common import Point


class Measurements(BaseModel):
    """
    Derived measurements for one region.

    Recomputed by the measurement engine whenever the region's points change.
    Optional fields not computed by the engine are carried through untouched.
    """

    model_config = ConfigDict(populate_by_name=True)

    length: Optional[int] = Field(None, description="Longest diameter in mm-equivalents")
    hu_value: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("hu_value", "huValue"),
        description="Intensity proxy (Hounsfield-like units)",
    )
    width: Optional[float] = Field(None, description="Short axis in mm (passed through)")
    volume: Optional[float] = Field(None, description="Volume in mm3 (passed through)")
    adc_value: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("adc_value", "adcValue"),
        description="ADC value for MRI (passed through)",
    )

    @field_validator("length", mode="before")
    @classmethod
    def floor_length(cls, v):
        # Lengths are whole mm; fractional upstream values are floored
        if isinstance(v, float):
            return math.floor(v)
        return v


class ROIAnnotation(BaseModel):
    """
    A user-drawn or machine-proposed polygonal region.

    Points are stored in annotation space, so they do not depend on the
    current zoom or pan. Rectangles are stored as 4-point polygons.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Opaque unique identifier, assigned by the store")
    type: ROIKind = Field(ROIKind.PATH, description="How the point list was produced")
    points: List[Point] = Field(default_factory=list, description="Ordered vertices")
    label: str = Field(EditorConstants.DEFAULT_LABEL, description="Display text")
    measurements: Measurements = Field(default_factory=Measurements)
    is_confirmed: bool = Field(
        False,
        validation_alias=AliasChoices("is_confirmed", "isConfirmed"),
        description="True once a human has drawn or adjusted the region",
    )
