"""
Module: viewport.engine

Purpose:
    Turn continuous pointer input (drag + zoom) into a stable, normalised
    crop rectangle under a fixed aspect-ratio constraint.

    The transform applied to the image is translate(pan) then scale(zoom)
    with the origin at the container's top-left corner:

        screen = pan + zoom * base

    so a screen point maps back to the fitted image with
    base = (screen - pan) / zoom.

Key Functions:
    - zoom_state(): Pure zoom with re-centring
    - pan_state(): Pure pan with the strategy's constraint
    - compute_crop_region(): Pure crop derivation

Key Classes:
    - ViewportState: Immutable pan/zoom/container value
    - ViewportEngine: Mutable wrapper fed by UI pointer events

Dependencies:
    - viewport.config: FrameSpec
    - core.models: CropRegion

Used By:
    - gui.widgets.crop_view: Drives the engine from mouse events
    - workflow: Receives the CropRegion on crop confirmation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from photosheet.core.models import CropRegion
from photosheet.errors import ImageNotLoadedError, InvalidCropError

from .config import FrameSpec
from .strategies import Rect

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class ViewportState:
    """
    Pan/zoom state of an image inside a container (immutable).

    Attributes:
        zoom: Zoom factor, within the frame's range
        pan_x: Horizontal translation in container pixels
        pan_y: Vertical translation in container pixels
        container_width: Container width in pixels
        container_height: Container height in pixels
    """

    container_width: float
    container_height: float
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def __post_init__(self) -> None:
        if self.container_width <= 0 or self.container_height <= 0:
            raise ValueError(
                f"Container size must be positive: "
                f"{self.container_width}x{self.container_height}"
            )

    @property
    def pan(self) -> Point:
        return (self.pan_x, self.pan_y)

    @property
    def center(self) -> Point:
        return (self.container_width / 2, self.container_height / 2)


def zoom_state(state: ViewportState, frame: FrameSpec, new_zoom: float) -> ViewportState:
    """
    Zoom keeping the container centre fixed on the same image point.

    new_pan = center - (center - old_pan) * (new_zoom / old_zoom), then the
    strategy's pan constraint is re-applied.

    Args:
        state: Current state
        frame: Frame configuration (zoom bounds, strategy)
        new_zoom: Requested zoom, clamped into the frame's range

    Returns:
        New state (the same object when the clamped zoom is unchanged)
    """
    zoom = frame.clamp_zoom(new_zoom)
    if zoom == state.zoom:
        return state
    cx, cy = state.center
    ratio = zoom / state.zoom
    pan_x = cx - (cx - state.pan_x) * ratio
    pan_y = cy - (cy - state.pan_y) * ratio
    pan_x, pan_y = frame.strategy.clamp_pan(
        pan_x, pan_y, zoom, state.container_width, state.container_height
    )
    return replace(state, zoom=zoom, pan_x=pan_x, pan_y=pan_y)


def pan_state(state: ViewportState, frame: FrameSpec, pan_x: float, pan_y: float) -> ViewportState:
    """Set the pan offset, constrained by the frame's strategy."""
    x, y = frame.strategy.clamp_pan(
        pan_x, pan_y, state.zoom, state.container_width, state.container_height
    )
    return replace(state, pan_x=x, pan_y=y)


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def compute_crop_region(
    state: ViewportState,
    frame: FrameSpec,
    natural_width: int,
    natural_height: int,
) -> CropRegion:
    """
    Derive the normalised crop rectangle for the current viewport.

    The frame rectangle is mapped through the inverse transform into the
    fitted base image, normalised by the base size and intersected with
    [0, 1]. When the frame lies inside the image the result keeps the
    frame's aspect ratio in source pixels.

    Args:
        state: Viewport state
        frame: Frame configuration
        natural_width: Source image width in pixels
        natural_height: Source image height in pixels

    Returns:
        CropRegion satisfying 0 <= x <= 1 - width, 0 <= y <= 1 - height

    Raises:
        ImageNotLoadedError: If natural dimensions are unknown
        InvalidCropError: If the frame does not overlap the image

    Example:
        >>> state = ViewportState(460, 500, zoom=2.0)
        >>> region = compute_crop_region(state, POLAROID_FRAME, 920, 1000)
        >>> (region.x, region.width)
        (0.0, 0.5)
    """
    if not natural_width or not natural_height or natural_width <= 0 or natural_height <= 0:
        raise ImageNotLoadedError("Image dimensions are not known yet")

    strategy = frame.strategy
    cw, ch = state.container_width, state.container_height
    frame_rect = strategy.frame_rect(cw, ch, frame.aspect_ratio)
    base = strategy.base_rect(cw, ch, natural_width, natural_height)

    def to_unit_x(screen_x: float) -> float:
        return ((screen_x - state.pan_x) / state.zoom - base.x) / base.width

    def to_unit_y(screen_y: float) -> float:
        return ((screen_y - state.pan_y) / state.zoom - base.y) / base.height

    left = _unit(to_unit_x(frame_rect.x))
    right = _unit(to_unit_x(frame_rect.right))
    top = _unit(to_unit_y(frame_rect.y))
    bottom = _unit(to_unit_y(frame_rect.bottom))

    width = right - left
    height = bottom - top
    if width <= 0 or height <= 0:
        raise InvalidCropError("Crop frame does not overlap the image")

    region = CropRegion(
        x=left,
        y=top,
        width=width,
        height=height,
        natural_width=int(natural_width),
        natural_height=int(natural_height),
        zoom=state.zoom,
    )
    logger.debug(
        f"Crop ({strategy.name}): x={left:.4f} y={top:.4f} "
        f"w={width:.4f} h={height:.4f} zoom={state.zoom:.2f}"
    )
    return region


class ViewportEngine:
    """
    Pointer-driven viewport for one crop frame.

    Holds the current ViewportState, the drag anchor and the natural
    image size. All geometry is delegated to the pure functions above,
    so the engine is testable without a rendering surface.

    Example:
        >>> engine = ViewportEngine(PASSPORT_FRAME, (400, 500))
        >>> engine.set_image(1200, 1600)
        >>> engine.on_drag_start((100, 100))
        >>> engine.on_drag_move((50, 70))
        >>> engine.on_drag_end()
        >>> engine.state.pan
        (-50.0, -30.0)
    """

    def __init__(self, frame: FrameSpec, container_size: Optional[Tuple[float, float]] = None) -> None:
        self.frame = frame
        width, height = container_size or frame.canvas_size
        self._state = ViewportState(container_width=float(width), container_height=float(height))
        self._drag_anchor: Optional[Point] = None
        self._natural: Optional[Tuple[int, int]] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def is_dragging(self) -> bool:
        return self._drag_anchor is not None

    @property
    def loaded(self) -> bool:
        """True once natural dimensions are known."""
        return self._natural is not None

    @property
    def natural_size(self) -> Optional[Tuple[int, int]]:
        return self._natural

    def set_image(self, natural_width: int, natural_height: int) -> None:
        """Record natural dimensions (the explicit 'loaded' signal)."""
        if natural_width <= 0 or natural_height <= 0:
            raise ValueError(f"Invalid image size: {natural_width}x{natural_height}")
        self._natural = (int(natural_width), int(natural_height))
        self.reset()

    def clear_image(self) -> None:
        self._natural = None
        self._drag_anchor = None
        self.reset()

    def set_container_size(self, width: float, height: float) -> None:
        """Resize the container, keeping zoom and re-applying the pan constraint."""
        if width <= 0 or height <= 0:
            return
        resized = replace(self._state, container_width=float(width), container_height=float(height))
        self._state = pan_state(resized, self.frame, resized.pan_x, resized.pan_y)

    def reset(self) -> None:
        """Zoom 1 (clamped into range), no pan."""
        self._state = replace(
            self._state, zoom=self.frame.clamp_zoom(1.0), pan_x=0.0, pan_y=0.0
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_zoom_change(self, new_zoom: float) -> float:
        """
        Apply a zoom request.

        Returns:
            The zoom actually applied after clamping
        """
        self._state = zoom_state(self._state, self.frame, new_zoom)
        return self._state.zoom

    def zoom_in(self) -> float:
        return self.on_zoom_change(round(self._state.zoom + self.frame.zoom_step, 6))

    def zoom_out(self) -> float:
        return self.on_zoom_change(round(self._state.zoom - self.frame.zoom_step, 6))

    def on_drag_start(self, pointer: Point) -> None:
        """Record the anchor so the grabbed image point follows the pointer."""
        self._drag_anchor = (pointer[0] - self._state.pan_x, pointer[1] - self._state.pan_y)

    def on_drag_move(self, pointer: Point) -> None:
        """Move the image with the pointer; ignored when no drag is active."""
        if self._drag_anchor is None:
            return
        ax, ay = self._drag_anchor
        self._state = pan_state(self._state, self.frame, pointer[0] - ax, pointer[1] - ay)

    def on_drag_end(self) -> None:
        self._drag_anchor = None

    def on_drag_cancel(self) -> None:
        self._drag_anchor = None

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    def frame_rect(self) -> Rect:
        s = self._state
        return self.frame.strategy.frame_rect(s.container_width, s.container_height, self.frame.aspect_ratio)

    def image_rect(self) -> Optional[Rect]:
        """Transformed image rectangle in container pixels, for painting."""
        if self._natural is None:
            return None
        s = self._state
        base = self.frame.strategy.base_rect(s.container_width, s.container_height, *self._natural)
        return Rect(
            s.pan_x + base.x * s.zoom,
            s.pan_y + base.y * s.zoom,
            base.width * s.zoom,
            base.height * s.zoom,
        )

    def compute_crop_region(self) -> CropRegion:
        """
        Crop for the current viewport.

        Raises:
            ImageNotLoadedError: If set_image() has not been called
            InvalidCropError: If the frame does not overlap the image
        """
        if self._natural is None:
            raise ImageNotLoadedError("Image has not finished loading")
        return compute_crop_region(self._state, self.frame, *self._natural)
