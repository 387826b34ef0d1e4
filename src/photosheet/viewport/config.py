"""
Module: viewport.config

Purpose:
    Construction-time constants for each crop frame: aspect ratio, zoom
    range and crop strategy.

Key Classes:
    - FrameSpec: Immutable frame configuration

Key Constants:
    - PASSPORT_FRAME: 3.5 x 4.5 identity photo, fixed-frame strategy
    - POLAROID_FRAME: 2.3 x 2.5 caption print, cover-fill strategy

Used By:
    - viewport.engine: ViewportEngine is built around one FrameSpec
    - gui.widgets.crop_view: Sizes the canvas from the frame aspect
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .strategies import CoverFillStrategy, CropStrategy, FixedFrameStrategy


@dataclass(frozen=True)
class FrameSpec:
    """
    Crop frame configuration (immutable).

    Attributes:
        name: Frame key
        aspect_ratio: Frame width / height
        zoom_min: Lowest allowed zoom
        zoom_max: Highest allowed zoom
        zoom_step: Increment for zoom buttons and wheel notches
        strategy: Crop strategy for this frame
        canvas_size: Preferred container size (width, height) in pixels

    Example:
        >>> PASSPORT_FRAME.clamp_zoom(5.0)
        3.0
    """

    name: str
    aspect_ratio: float
    zoom_min: float
    zoom_max: float
    strategy: CropStrategy = field(compare=False)
    zoom_step: float = 0.1
    canvas_size: Tuple[int, int] = (400, 500)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive: {self.aspect_ratio}")
        if self.zoom_min <= 0:
            raise ValueError(f"zoom_min must be positive: {self.zoom_min}")
        if self.zoom_max < self.zoom_min:
            raise ValueError(f"zoom range is empty: {self.zoom_min}-{self.zoom_max}")
        if self.zoom_step <= 0:
            raise ValueError(f"zoom_step must be positive: {self.zoom_step}")

    def clamp_zoom(self, zoom: float) -> float:
        """Clamp a zoom factor into [zoom_min, zoom_max]."""
        return max(self.zoom_min, min(self.zoom_max, zoom))


# Identity photo: 3.5cm x 4.5cm
PASSPORT_FRAME = FrameSpec(
    name="passport",
    aspect_ratio=3.5 / 4.5,
    zoom_min=0.5,
    zoom_max=3.0,
    strategy=FixedFrameStrategy(frame_fraction=0.7),
    canvas_size=(400, 500),
)

# Caption print photo window: 2.3 x 2.5; canvas matches the aspect exactly
POLAROID_FRAME = FrameSpec(
    name="polaroid",
    aspect_ratio=2.3 / 2.5,
    zoom_min=1.0,
    zoom_max=3.0,
    strategy=CoverFillStrategy(),
    canvas_size=(460, 500),
)

FRAMES: Dict[str, FrameSpec] = {
    PASSPORT_FRAME.name: PASSPORT_FRAME,
    POLAROID_FRAME.name: POLAROID_FRAME,
}
