"""
Editor Service - one interactive ROI editing session.

This service wires the view transform, annotation store, measurement engine
and interaction state machine together, and exposes the session's outer
contract: initialization with proposals, pointer events, tool/view
controls, render snapshots and the confirm callback.
"""

import logging
from typing import Callable, Iterable, List, Optional

import numpy as np

from roi_engine.config import EditorSettings
from roi_engine.core.annotation_store import AnnotationStore
from roi_engine.core.enums import PointerButton, Tool
from roi_engine.core.interaction import InteractionStateMachine
from roi_engine.core.measurement import (
    ImageIntensitySampler,
    MeasurementEngine,
    RandomIntensityProxy,
)
from roi_engine.core.view_transform import ViewTransform
from roi_engine.schemas import (
    ContainerBox,
    EditorSnapshot,
    PointerEvent,
    ROIAnnotation,
)

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[List[ROIAnnotation]], None]
SnapshotListener = Callable[[EditorSnapshot], None]


class EditorSession:
    """
    Service for a single image's annotation session.

    All calls run synchronously to completion; listeners receive a fresh
    snapshot after every call that changed observable state.
    """

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        confirm_callback: Optional[ConfirmCallback] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize editor session.

        Args:
            settings: Editor tool defaults (zoom range, thresholds, scale, label)
            confirm_callback: Called with the full ROI list on every confirm
            session_id: Identifier reported in snapshots
        """
        self.settings = settings or EditorSettings()
        self.session_id = session_id
        self.confirm_callback = confirm_callback

        self.image_ref: Optional[str] = None
        self.image: Optional[np.ndarray] = None
        self.confirmed_rois: Optional[List[ROIAnnotation]] = None
        self._listeners: List[SnapshotListener] = []

        self.view = ViewTransform(
            zoom_min=self.settings.zoom_min,
            zoom_max=self.settings.zoom_max,
            zoom_step=self.settings.zoom_step,
            base_hit_threshold=self.settings.base_hit_threshold,
            base_handle_radius=self.settings.base_handle_radius,
        )
        self.measurements = MeasurementEngine(
            mm_per_unit=self.settings.mm_per_unit, sampler=self._default_sampler()
        )
        self.store = AnnotationStore()
        self.store.on_geometry_change(self.measurements.apply)
        self.interaction = InteractionStateMachine(
            self.store, self.view, default_label=self.settings.default_label
        )

    def _default_sampler(self) -> RandomIntensityProxy:
        return RandomIntensityProxy(
            low=self.settings.intensity_low,
            high=self.settings.intensity_high,
            seed=self.settings.intensity_seed,
        )

    # Lifecycle

    def initialize(
        self,
        image_ref: str,
        initial_rois: Iterable[ROIAnnotation] = (),
        container: Optional[ContainerBox] = None,
        image: Optional[np.ndarray] = None,
    ) -> EditorSnapshot:
        """
        Start editing a new image.

        Every existing region is discarded, the view and interaction state
        are reset, and the proposals are loaded in order.

        Args:
            image_ref: Opaque reference to the image, owned by the caller
            initial_rois: Proposed regions (typically unconfirmed)
            container: Untransformed on-screen container box
            image: Optional pixel data; enables real intensity sampling

        Returns:
            Snapshot after initialization
        """
        self.image_ref = image_ref
        self.image = image
        self.confirmed_rois = None

        if image is not None:
            self.measurements.use_sampler(ImageIntensitySampler(image))
        else:
            self.measurements.use_sampler(self._default_sampler())

        if container is not None:
            self.view.set_container(container)
        self.view.reset()
        self.interaction.reset()

        count = self.store.replace_all(initial_rois)
        logger.info(
            f"Session {self.session_id} initialized for image {image_ref!r} "
            f"with {count} proposed ROI(s)"
        )
        return self._notify()

    # Pointer events

    def handle_event(self, event: PointerEvent) -> EditorSnapshot:
        changed = self.interaction.handle(event)
        return self._notify() if changed else self.snapshot()

    def pointer_down(
        self,
        x: float,
        y: float,
        button: PointerButton = PointerButton.PRIMARY,
        shift: bool = False,
    ) -> EditorSnapshot:
        changed = self.interaction.pointer_down(x, y, button, shift)
        return self._notify() if changed else self.snapshot()

    def pointer_move(self, x: float, y: float) -> EditorSnapshot:
        changed = self.interaction.pointer_move(x, y)
        return self._notify() if changed else self.snapshot()

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> EditorSnapshot:
        changed = self.interaction.pointer_up(x, y)
        return self._notify() if changed else self.snapshot()

    # Tool and region controls

    @property
    def tool(self) -> Tool:
        return self.interaction.tool

    def set_tool(self, tool: Tool) -> EditorSnapshot:
        self.interaction.set_tool(tool)
        return self._notify()

    def delete_roi(self, roi_id: str) -> EditorSnapshot:
        """Delete a region; deleting a missing id changes nothing."""
        if self.store.remove_by_id(roi_id):
            return self._notify()
        return self.snapshot()

    # View controls

    def set_container(self, container: ContainerBox) -> EditorSnapshot:
        self.view.set_container(container)
        return self._notify()

    def zoom_by(self, delta: float) -> EditorSnapshot:
        self.view.zoom_by(delta)
        return self._notify()

    def set_zoom(self, zoom: float) -> EditorSnapshot:
        self.view.set_zoom(zoom)
        return self._notify()

    def zoom_in(self) -> EditorSnapshot:
        self.view.zoom_in()
        return self._notify()

    def zoom_out(self) -> EditorSnapshot:
        self.view.zoom_out()
        return self._notify()

    def pan_by(self, dx: float, dy: float) -> EditorSnapshot:
        self.view.pan_by(dx, dy)
        return self._notify()

    def set_display(
        self,
        brightness: Optional[float] = None,
        contrast: Optional[float] = None,
        invert: Optional[bool] = None,
    ) -> EditorSnapshot:
        """Update display-only adjustments; None leaves a value unchanged."""
        if brightness is not None:
            self.view.set_brightness(brightness)
        if contrast is not None:
            self.view.set_contrast(contrast)
        if invert is not None:
            self.view.set_invert(invert)
        return self._notify()

    def reset_view(self) -> EditorSnapshot:
        self.view.reset()
        return self._notify()

    # Outputs

    @property
    def total_burden(self) -> int:
        return self.measurements.total_burden(self.store.list())

    def get_roi(self, roi_id: str) -> Optional[ROIAnnotation]:
        return self.store.get(roi_id)

    def list_rois(self) -> List[ROIAnnotation]:
        return self.store.list()

    def snapshot(self) -> EditorSnapshot:
        """Read-only view of everything the render layer needs."""
        rois = self.store.list()
        return EditorSnapshot(
            session_id=self.session_id,
            image_ref=self.image_ref,
            tool=self.interaction.tool,
            state=self.interaction.state_name,
            view=self.view.snapshot(),
            rois=rois,
            draft_points=self.interaction.draft_points,
            total_burden=self.measurements.total_burden(rois),
            hit_threshold=self.view.hit_threshold,
            handle_radius=self.view.handle_radius,
            has_image=self.image is not None,
        )

    def confirm(self) -> List[ROIAnnotation]:
        """
        Hand the full current region list to the caller.

        Confirmed and unconfirmed regions alike are included; filtering is
        the consumer's job. The callback is invoked exactly once per call.
        """
        rois = self.store.list()
        self.confirmed_rois = rois
        logger.info(f"Session {self.session_id} confirmed {len(rois)} ROI(s)")
        if self.confirm_callback is not None:
            self.confirm_callback([roi.model_copy(deep=True) for roi in rois])
        return [roi.model_copy(deep=True) for roi in rois]

    # Render listeners

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a render listener.

        Returns:
            A function that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> EditorSnapshot:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot.model_copy(deep=True))
        return snapshot
