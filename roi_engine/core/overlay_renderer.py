"""
Overlay rendering for editor snapshots.

Produces a display-only preview of a session: the image with the session's
brightness/contrast/invert applied and every ROI drawn on top. Geometry is
read from the snapshot only; nothing here mutates editor state.
"""

from typing import List, Optional, Tuple

import cv2
import numpy as np

from roi_engine.core.constants import Colors, DrawingConstants
from roi_engine.core.enums import Tool
from roi_engine.core.geometry import points_to_pixels
from roi_engine.core.image_codec import ImageCodec
from roi_engine.schemas.annotation import ROIAnnotation
from roi_engine.schemas.common import Point
from roi_engine.schemas.editor import EditorSnapshot
from roi_engine.schemas.view import ViewState


class OverlayRenderer:
    """
    Renders ROI overlays on images.

    Confirmed regions are drawn in teal, machine proposals in amber.
    """

    def __init__(
        self,
        font=cv2.FONT_HERSHEY_SIMPLEX,
        font_scale: float = DrawingConstants.DEFAULT_FONT_SCALE,
        thickness: int = DrawingConstants.DEFAULT_LINE_THICKNESS,
        line_type=cv2.LINE_AA,
    ):
        """
        Initialize overlay renderer.

        Args:
            font: OpenCV font type
            font_scale: Font scale factor
            thickness: Line thickness for outlines and text
            line_type: Line type for anti-aliasing
        """
        self.font = font
        self.font_scale = font_scale
        self.thickness = thickness
        self.line_type = line_type

    @staticmethod
    def apply_display_filters(image: np.ndarray, view: ViewState) -> np.ndarray:
        """
        Apply brightness, contrast and invert as the viewer would.

        brightness(b) scales intensities by b/100; contrast(c) scales them
        around mid-grey by c/100.
        """
        result = image.astype(np.float32) * (view.brightness / 100.0)
        contrast = view.contrast / 100.0
        result = (result - 128.0) * contrast + 128.0
        result = np.clip(result, 0, 255).astype(np.uint8)
        if view.invert:
            result = cv2.bitwise_not(result)
        return result

    def draw_polygon(
        self,
        image: np.ndarray,
        points: List[Point],
        color: Tuple[int, int, int],
        closed: bool = True,
        fill_alpha: float = 0.0,
    ) -> np.ndarray:
        """
        Draw a polygon outline (and optional translucent fill).

        Args:
            image: Input image (modified in place)
            points: Vertices in annotation space
            color: Outline color in BGR format
            closed: Close the outline back to the first vertex
            fill_alpha: Opacity of the fill, 0 disables it

        Returns:
            Image with polygon drawn
        """
        height, width = image.shape[:2]
        contour = points_to_pixels(points, width, height)
        if len(contour) == 0:
            return image

        if fill_alpha > 0 and len(contour) >= 3:
            layer = image.copy()
            cv2.fillPoly(layer, [contour], color, self.line_type)
            cv2.addWeighted(layer, fill_alpha, image, 1 - fill_alpha, 0, dst=image)

        cv2.polylines(image, [contour], closed, color, self.thickness, self.line_type)
        return image

    def draw_handles(
        self, image: np.ndarray, points: List[Point], color: Tuple[int, int, int], radius: int
    ) -> np.ndarray:
        """Draw vertex handles as filled circles with a colored ring."""
        height, width = image.shape[:2]
        for (x, y) in points_to_pixels(points, width, height).reshape(-1, 2):
            center = (int(x), int(y))
            cv2.circle(image, center, radius, Colors.HANDLE_FILL, -1, self.line_type)
            cv2.circle(image, center, radius, color, DrawingConstants.THIN_LINE, self.line_type)
        return image

    def draw_label(
        self, image: np.ndarray, text: str, anchor: Point, color: Tuple[int, int, int]
    ) -> np.ndarray:
        """Draw text just above an annotation-space anchor point."""
        height, width = image.shape[:2]
        x, y = points_to_pixels([anchor], width, height).reshape(2)
        origin = (int(x), max(int(y) - 2 * self.thickness, 10))

        # Dark outline keeps labels readable on bright tissue
        cv2.putText(
            image, text, origin, self.font, self.font_scale, Colors.BLACK,
            self.thickness + 2, self.line_type,
        )
        cv2.putText(
            image, text, origin, self.font, self.font_scale, color, self.thickness, self.line_type
        )
        return image

    @staticmethod
    def label_for(roi: ROIAnnotation) -> str:
        return f"{roi.label} ({roi.measurements.length}mm)"

    def render_roi(
        self, image: np.ndarray, roi: ROIAnnotation, show_handles: bool = True
    ) -> np.ndarray:
        color = Colors.CONFIRMED if roi.is_confirmed else Colors.PROPOSED
        self.draw_polygon(image, roi.points, color, fill_alpha=DrawingConstants.FILL_ALPHA)
        if show_handles:
            self.draw_handles(image, roi.points, color, DrawingConstants.HANDLE_RADIUS_PX)
        if roi.points:
            self.draw_label(image, self.label_for(roi), roi.points[0], Colors.LABEL)
        return image

    def render(
        self, image: np.ndarray, snapshot: EditorSnapshot, show_handles: Optional[bool] = None
    ) -> np.ndarray:
        """
        Render a full editor snapshot.

        Args:
            image: Source image (BGR or grayscale); left untouched
            snapshot: Snapshot to draw
            show_handles: Draw vertex handles; defaults to "select tool active"

        Returns:
            New BGR image with overlays
        """
        if show_handles is None:
            show_handles = snapshot.tool == Tool.SELECT

        result = ImageCodec.ensure_bgr(self.apply_display_filters(image, snapshot.view))
        for roi in snapshot.rois:
            self.render_roi(result, roi, show_handles=show_handles)

        if snapshot.draft_points:
            self.draw_polygon(result, snapshot.draft_points, Colors.PROPOSED, closed=False)
        return result
