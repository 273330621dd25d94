"""
Annotation Store - authoritative collection of ROIs for the current image
"""

import logging
import uuid
from threading import RLock
from typing import Callable, Dict, Iterable, List, Optional, Set

from roi_engine.core.constants import EditorConstants
from roi_engine.schemas.annotation import ROIAnnotation
from roi_engine.schemas.common import Point

logger = logging.getLogger(__name__)

GeometryHook = Callable[[ROIAnnotation], None]


class AnnotationStore:
    """
    Insertion-ordered store of ROIAnnotation entities.

    Geometry hooks run synchronously inside every mutation that changes a
    region's points (add, replace_all, update_point), so derived
    measurements are always current when the mutation returns.

    Reads return deep copies; callers never hold a live reference.
    """

    def __init__(self):
        self._rois: Dict[str, ROIAnnotation] = {}
        self._issued_ids: Set[str] = set()
        self._geometry_hooks: List[GeometryHook] = []

        # Thread safety (RLock allows hooks to read back into the store)
        self.lock = RLock()

    # Hooks

    def on_geometry_change(self, hook: GeometryHook) -> None:
        """Register a hook called with the live ROI after its points change."""
        self._geometry_hooks.append(hook)

    def _geometry_changed(self, roi: ROIAnnotation) -> None:
        for hook in self._geometry_hooks:
            hook(roi)

    # Identity

    def new_id(self) -> str:
        """Generate an id never issued or loaded by this store."""
        with self.lock:
            while True:
                roi_id = (
                    f"{EditorConstants.ROI_ID_PREFIX}"
                    f"{uuid.uuid4().hex[:EditorConstants.ROI_ID_HEX_LENGTH]}"
                )
                if roi_id not in self._issued_ids:
                    self._issued_ids.add(roi_id)
                    return roi_id

    # Mutations

    def add(self, roi: ROIAnnotation) -> ROIAnnotation:
        """
        Add a region to the end of the store.

        A missing id, or one this store has already issued or loaded (even
        for a region since removed), is replaced with a fresh one. The
        region is stored as a private copy; the stored version is returned
        as a snapshot.
        """
        with self.lock:
            stored = self._admit(roi)
            self._geometry_changed(stored)
            logger.debug(f"Added ROI {stored.id} with {len(stored.points)} points")
            return stored.model_copy(deep=True)

    def replace_all(self, rois: Iterable[ROIAnnotation]) -> int:
        """
        Discard every region and load a new set, e.g. for a new image.

        Proposals with fewer than two points are dropped. Ids are admitted
        as in :meth:`add`, so a reload never reuses an earlier region's id.

        Returns:
            Number of regions loaded
        """
        with self.lock:
            self._rois.clear()
            for roi in rois:
                if len(roi.points) < EditorConstants.MIN_COMMITTED_POINTS:
                    logger.warning(
                        f"Dropping proposed ROI {roi.id!r}: "
                        f"{len(roi.points)} point(s), need at least "
                        f"{EditorConstants.MIN_COMMITTED_POINTS}"
                    )
                    continue
                stored = self._admit(roi)
                self._geometry_changed(stored)
            count = len(self._rois)
        logger.info(f"Annotation store loaded with {count} ROI(s)")
        return count

    def _admit(self, roi: ROIAnnotation) -> ROIAnnotation:
        stored = roi.model_copy(deep=True)
        if not stored.id or stored.id in self._issued_ids:
            stored.id = self.new_id()
        else:
            self._issued_ids.add(stored.id)
        self._rois[stored.id] = stored
        return stored

    def remove_by_id(self, roi_id: str) -> bool:
        """
        Remove a region. Removing a missing id is a no-op.

        Returns:
            True if a region was removed
        """
        with self.lock:
            removed = self._rois.pop(roi_id, None)
        if removed is not None:
            logger.debug(f"Removed ROI {roi_id}")
        return removed is not None

    def update_point(self, roi_id: str, index: int, point: Point, confirm: bool = True) -> bool:
        """
        Replace one vertex of a region.

        Args:
            roi_id: Target region
            index: Vertex index within the region's point list
            point: New position in annotation space
            confirm: Promote the region to human-confirmed

        Returns:
            False (and no change) if the region or index no longer exists
        """
        with self.lock:
            roi = self._rois.get(roi_id)
            if roi is None or not 0 <= index < len(roi.points):
                return False
            roi.points[index] = Point(x=point.x, y=point.y)
            if confirm:
                roi.is_confirmed = True
            self._geometry_changed(roi)
        return True

    # Reads

    def get(self, roi_id: str) -> Optional[ROIAnnotation]:
        with self.lock:
            roi = self._rois.get(roi_id)
            return roi.model_copy(deep=True) if roi is not None else None

    def list(self) -> List[ROIAnnotation]:
        """All regions in insertion order, as copies."""
        with self.lock:
            return [roi.model_copy(deep=True) for roi in self._rois.values()]

    def iter_vertices(self):
        """
        Yield (roi_id, index, point) in document order.

        Document order is region insertion order, then point index order.
        """
        with self.lock:
            entries = [(roi.id, list(roi.points)) for roi in self._rois.values()]
        for roi_id, points in entries:
            for index, point in enumerate(points):
                yield roi_id, index, point

    def __len__(self) -> int:
        return len(self._rois)

    def __contains__(self, roi_id: str) -> bool:
        return roi_id in self._rois
