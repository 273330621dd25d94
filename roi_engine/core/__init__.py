"""
Core modules for the ROI annotation engine
"""

from .annotation_store import AnnotationStore
from .interaction import InteractionStateMachine
from .measurement import ImageIntensitySampler, MeasurementEngine, RandomIntensityProxy
from .view_transform import ViewTransform

__all__ = [
    "AnnotationStore",
    "InteractionStateMachine",
    "MeasurementEngine",
    "RandomIntensityProxy",
    "ImageIntensitySampler",
    "ViewTransform",
]
