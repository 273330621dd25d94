"""
View Transform - zoom, pan and device/annotation coordinate mapping.

The scene is drawn inside a layer transformed as ``scale(zoom)
translate(pan)`` with a top-left origin, sitting in an untransformed
container. Stored geometry is expressed as a percentage of the
*untransformed* container, so mapping a pointer position undoes the layer
transform first and then divides by the container's own extent:

    device = left + zoom * (local + pan)
    local  = (device - left) / zoom - pan
    point  = local / extent * 100

The same spot on the image therefore always maps to the same stored point,
whatever the current zoom and pan. Points past the image edge are clamped
into [0, 100], so `to_device_space` inverts the mapping only inside that
range.
"""

import logging
from typing import Optional, Tuple

from roi_engine.core.constants import AnnotationSpace, ViewConstants
from roi_engine.core.geometry import clamp, from_percent, to_percent
from roi_engine.schemas.common import ContainerBox, Point
from roi_engine.schemas.view import ViewState

logger = logging.getLogger(__name__)


class ViewTransform:
    """Owns the ViewState of one editing session"""

    def __init__(
        self,
        container: Optional[ContainerBox] = None,
        zoom_min: float = ViewConstants.ZOOM_MIN,
        zoom_max: float = ViewConstants.ZOOM_MAX,
        zoom_step: float = ViewConstants.ZOOM_STEP,
        base_hit_threshold: float = ViewConstants.BASE_HIT_THRESHOLD,
        base_handle_radius: float = ViewConstants.BASE_HANDLE_RADIUS,
    ):
        """
        Initialize View Transform

        Args:
            container: Untransformed container box in device pixels
            zoom_min: Lower zoom bound (>= 1)
            zoom_max: Upper zoom bound
            zoom_step: Step used by zoom_in/zoom_out
            base_hit_threshold: Vertex hit radius at zoom 1, in annotation units
            base_handle_radius: Handle radius at zoom 1
        """
        if zoom_min < 1 or zoom_max < zoom_min:
            raise ValueError(f"Invalid zoom range [{zoom_min}, {zoom_max}]")

        self.container = container or ContainerBox(width=0, height=0)
        self.zoom_min = zoom_min
        self.zoom_max = zoom_max
        self.zoom_step = zoom_step
        self.base_hit_threshold = base_hit_threshold
        self.base_handle_radius = base_handle_radius
        self.state = ViewState(zoom=zoom_min)

    # Coordinate mapping

    def to_annotation_space(self, x: float, y: float) -> Point:
        """
        Map a device-space pointer position into annotation space.

        Positions outside the image (reachable once the view is panned)
        are clamped to its edge. Returns the origin when the container has
        no measurable extent, which only happens during transient layout
        states.
        """
        box = self.container
        if box.is_degenerate:
            logger.warning("Container has zero extent; mapping pointer to origin")
            return Point(x=0.0, y=0.0)

        zoom = self.state.zoom
        local_x = (x - box.left) / zoom - self.state.pan.x
        local_y = (y - box.top) / zoom - self.state.pan.y
        return Point(
            x=clamp(to_percent(local_x, 0.0, box.width), 0.0, AnnotationSpace.SCALE),
            y=clamp(to_percent(local_y, 0.0, box.height), 0.0, AnnotationSpace.SCALE),
        )

    def to_device_space(self, point: Point) -> Tuple[float, float]:
        """Map an annotation-space point back to device pixels."""
        box = self.container
        zoom = self.state.zoom
        local_x = from_percent(point.x, 0.0, box.width)
        local_y = from_percent(point.y, 0.0, box.height)
        return (
            box.left + zoom * (local_x + self.state.pan.x),
            box.top + zoom * (local_y + self.state.pan.y),
        )

    def set_container(self, container: ContainerBox) -> None:
        self.container = container

    # Zoom and pan

    @property
    def zoom(self) -> float:
        return self.state.zoom

    @property
    def pan(self) -> Point:
        return self.state.pan

    def set_zoom(self, zoom: float) -> float:
        self.state.zoom = clamp(zoom, self.zoom_min, self.zoom_max)
        return self.state.zoom

    def zoom_by(self, delta: float) -> float:
        """Change zoom by delta, clamped to the configured range."""
        return self.set_zoom(self.state.zoom + delta)

    def zoom_in(self) -> float:
        return self.zoom_by(self.zoom_step)

    def zoom_out(self) -> float:
        return self.zoom_by(-self.zoom_step)

    def set_pan(self, x: float, y: float) -> None:
        self.state.pan = Point(x=x, y=y)

    def pan_by(self, dx: float, dy: float) -> None:
        self.set_pan(self.state.pan.x + dx, self.state.pan.y + dy)

    # Display-only adjustments

    def set_brightness(self, value: float) -> None:
        self.state.brightness = clamp(
            value, ViewConstants.BRIGHTNESS_MIN, ViewConstants.BRIGHTNESS_MAX
        )

    def set_contrast(self, value: float) -> None:
        self.state.contrast = clamp(value, ViewConstants.CONTRAST_MIN, ViewConstants.CONTRAST_MAX)

    def set_invert(self, invert: bool) -> None:
        self.state.invert = invert

    def reset(self) -> None:
        """Restore identity zoom/pan and default brightness/contrast/invert."""
        self.state = ViewState(zoom=self.zoom_min)
        logger.debug("View reset to identity")

    # Zoom-scaled sizes

    @property
    def hit_threshold(self) -> float:
        """Vertex hit radius; constant visual size at any zoom."""
        return self.base_hit_threshold / self.state.zoom

    @property
    def handle_radius(self) -> float:
        return self.base_handle_radius / self.state.zoom

    def snapshot(self) -> ViewState:
        return self.state.model_copy(deep=True)
