"""
Sessions API Router - interactive ROI editing over HTTP

Each session edits one image. Mutating endpoints return the new editor
snapshot so a client can redraw without a second round trip.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from roi_engine.api.dependencies import get_session, get_session_manager
from roi_engine.api.exceptions import (
    ImageRequiredException,
    InvalidImageException,
    ROINotFoundException,
    SessionNotFoundException,
    safe_endpoint,
)
from roi_engine.core.constants import APIConstants
from roi_engine.core.image_codec import ImageCodec, ImageDecodeError
from roi_engine.core.measurement import MeasurementEngine
from roi_engine.core.overlay_renderer import OverlayRenderer
from roi_engine.schemas import (
    ConfirmResponse,
    ContainerBox,
    DisplayRequest,
    EditorSnapshot,
    PanRequest,
    PointerEvent,
    PreviewResponse,
    ROIAnnotation,
    SessionCreateRequest,
    SessionSummary,
    ToolRequest,
    ZoomRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

renderer = OverlayRenderer()


@router.post("")
@safe_endpoint
async def create_session(
    request: SessionCreateRequest, session_manager=Depends(get_session_manager)
) -> EditorSnapshot:
    """Open an editor session for an image, preloaded with proposed ROIs"""
    image = None
    if request.image_base64:
        try:
            image = ImageCodec.from_base64(request.image_base64)
        except ImageDecodeError as e:
            raise InvalidImageException(str(e))

    session = session_manager.create(
        image_ref=request.image_ref,
        initial_rois=request.initial_rois,
        container=request.container,
        image=image,
    )
    return session.snapshot()


@router.get("")
@safe_endpoint
async def list_sessions(session_manager=Depends(get_session_manager)) -> List[SessionSummary]:
    """List open sessions"""
    return session_manager.list_sessions()


@router.get("/{session_id}")
@safe_endpoint
async def get_snapshot(session=Depends(get_session)) -> EditorSnapshot:
    """Get the current render snapshot"""
    return session.snapshot()


@router.delete("/{session_id}")
@safe_endpoint
async def delete_session(session_id: str, session_manager=Depends(get_session_manager)) -> dict:
    """Close a session and discard its regions"""
    if not session_manager.delete(session_id):
        raise SessionNotFoundException(session_id)
    return {"success": True, "message": f"Session {session_id} deleted"}


@router.post("/{session_id}/pointer")
@safe_endpoint
async def pointer_event(event: PointerEvent, session=Depends(get_session)) -> EditorSnapshot:
    """Feed one pointer event (down/move/up) to the interaction state machine"""
    return session.handle_event(event)


@router.post("/{session_id}/tool")
@safe_endpoint
async def set_tool(request: ToolRequest, session=Depends(get_session)) -> EditorSnapshot:
    """Select the active tool"""
    return session.set_tool(request.tool)


@router.put("/{session_id}/container")
@safe_endpoint
async def set_container(container: ContainerBox, session=Depends(get_session)) -> EditorSnapshot:
    """Update the untransformed container box after a layout change"""
    return session.set_container(container)


@router.post("/{session_id}/view/zoom")
@safe_endpoint
async def zoom(request: ZoomRequest, session=Depends(get_session)) -> EditorSnapshot:
    """Zoom by a delta or to an absolute level (clamped to the configured range)"""
    if request.delta is not None:
        return session.zoom_by(request.delta)
    return session.set_zoom(request.zoom)


@router.post("/{session_id}/view/pan")
@safe_endpoint
async def pan(request: PanRequest, session=Depends(get_session)) -> EditorSnapshot:
    """Pan by a device-pixel offset"""
    return session.pan_by(request.dx, request.dy)


@router.post("/{session_id}/view/display")
@safe_endpoint
async def set_display(request: DisplayRequest, session=Depends(get_session)) -> EditorSnapshot:
    """Adjust brightness, contrast or invert (display only)"""
    return session.set_display(
        brightness=request.brightness, contrast=request.contrast, invert=request.invert
    )


@router.post("/{session_id}/view/reset")
@safe_endpoint
async def reset_view(session=Depends(get_session)) -> EditorSnapshot:
    """Restore identity zoom/pan and default display settings"""
    return session.reset_view()


@router.get("/{session_id}/rois/{roi_id}")
@safe_endpoint
async def get_roi(roi_id: str, session=Depends(get_session)) -> ROIAnnotation:
    """Get one region with its current measurements"""
    roi = session.get_roi(roi_id)
    if roi is None:
        raise ROINotFoundException(session.session_id, roi_id)
    return roi


@router.delete("/{session_id}/rois/{roi_id}")
@safe_endpoint
async def delete_roi(roi_id: str, session=Depends(get_session)) -> EditorSnapshot:
    """Delete a region; unknown ids are ignored"""
    return session.delete_roi(roi_id)


@router.post("/{session_id}/confirm")
@safe_endpoint
async def confirm(session=Depends(get_session)) -> ConfirmResponse:
    """Return the full region list to the caller"""
    rois = session.confirm()
    return ConfirmResponse(
        session_id=session.session_id,
        rois=rois,
        total_burden=MeasurementEngine.total_burden(rois),
    )


@router.get("/{session_id}/preview")
@safe_endpoint
async def preview(session=Depends(get_session)) -> PreviewResponse:
    """Render the image with overlays as a base64 JPEG"""
    if session.image is None:
        raise ImageRequiredException(session.session_id)

    rendered = renderer.render(session.image, session.snapshot())
    thumbnail = ImageCodec.to_base64(
        rendered, ".jpg", quality=APIConstants.PREVIEW_JPEG_QUALITY
    )
    return PreviewResponse(session_id=session.session_id, thumbnail_base64=thumbnail)
