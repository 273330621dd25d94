"""
Measurement Engine - derived per-ROI measurements and aggregate burden.

Lengths follow the single-longest-diameter convention used for tumour
measurement. Intensity values are a proxy: without pixel data they are
placeholder draws, and with pixel data they are the mean grey level inside
the region.
"""

import logging
from typing import Iterable, Optional, Sequence

import cv2
import numpy as np

from roi_engine.core.constants import MeasurementConstants
from roi_engine.core.geometry import longest_pairwise_distance, points_to_pixels, to_millimetres
from roi_engine.schemas.annotation import Measurements, ROIAnnotation
from roi_engine.schemas.common import Point

logger = logging.getLogger(__name__)


class RandomIntensityProxy:
    """
    Placeholder intensity values for regions without pixel data.

    A region keeps its value across edits; a new value is drawn only when
    the region has none.
    """

    def __init__(
        self,
        low: int = MeasurementConstants.INTENSITY_LOW,
        high: int = MeasurementConstants.INTENSITY_HIGH,
        seed: Optional[int] = None,
    ):
        if high <= low:
            raise ValueError(f"Intensity range is empty: [{low}, {high})")
        self.low = low
        self.high = high
        self.rng = np.random.default_rng(seed)

    def sample(self, points: Sequence[Point], previous: Optional[float] = None) -> float:
        if previous is not None:
            return previous
        return float(self.rng.integers(self.low, self.high))


class ImageIntensitySampler:
    """
    Mean grey level inside a region of a raster image.

    The polygon is rasterised with ``cv2.fillPoly``. Regions with no area
    (two-point paths, collinear strokes) are sampled along their stroke.
    """

    def __init__(self, image: np.ndarray):
        if image is None or image.size == 0:
            raise ValueError("ImageIntensitySampler requires a non-empty image")
        if len(image.shape) == 3:
            self.gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            self.gray = image
        self.height, self.width = self.gray.shape[:2]

    def mask_for(self, points: Sequence[Point]) -> np.ndarray:
        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        contour = points_to_pixels(points, self.width, self.height)
        if len(contour) == 0:
            return mask
        cv2.fillPoly(mask, [contour], 255)
        if not mask.any():
            cv2.polylines(mask, [contour], False, 255, 1)
        return mask

    def sample(self, points: Sequence[Point], previous: Optional[float] = None) -> float:
        mask = self.mask_for(points)
        if not mask.any():
            # Entirely outside the raster
            return previous if previous is not None else 0.0
        return round(float(cv2.mean(self.gray, mask=mask)[0]), 2)


class MeasurementEngine:
    """Computes measurements as a pure function of current geometry"""

    def __init__(self, mm_per_unit: float = MeasurementConstants.MM_PER_UNIT, sampler=None):
        """
        Initialize Measurement Engine

        Args:
            mm_per_unit: Linear scale from annotation units to mm-equivalents
            sampler: Intensity sampler (defaults to RandomIntensityProxy)
        """
        self.mm_per_unit = mm_per_unit
        self.sampler = sampler or RandomIntensityProxy()

    def measure(
        self, points: Sequence[Point], previous: Optional[Measurements] = None
    ) -> Measurements:
        """
        Measure a point list.

        Args:
            points: Region vertices in annotation space
            previous: Earlier measurements; pass-through fields are kept

        Returns:
            New Measurements with length and intensity filled in
        """
        length = to_millimetres(longest_pairwise_distance(points), self.mm_per_unit)
        base = previous.model_copy() if previous is not None else Measurements()
        base.length = length
        base.hu_value = self.sampler.sample(
            points, previous.hu_value if previous is not None else None
        )
        return base

    def apply(self, roi: ROIAnnotation) -> None:
        """Re-measure a region in place. Used as the store's geometry hook."""
        roi.measurements = self.measure(roi.points, roi.measurements)

    def use_sampler(self, sampler) -> None:
        self.sampler = sampler
        logger.debug(f"Intensity sampler set to {type(sampler).__name__}")

    @staticmethod
    def total_burden(rois: Iterable[ROIAnnotation]) -> int:
        """Sum of longest diameters over all regions (missing lengths count as 0)."""
        return sum(roi.measurements.length or 0 for roi in rois)
