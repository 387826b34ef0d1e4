"""
Module: viewport

Purpose:
    Interactive viewport/crop engine. Pan/zoom state for an image inside a
    bounded container, and the normalised crop rectangle derived from it.

Key Classes:
    - ViewportEngine: Pointer-driven engine
    - ViewportState: Immutable pan/zoom value
    - FrameSpec: Frame aspect ratio, zoom range and strategy
    - CoverFillStrategy / FixedFrameStrategy: Crop strategies

Key Functions:
    - compute_crop_region(): Pure crop derivation
"""

from .config import FRAMES, PASSPORT_FRAME, POLAROID_FRAME, FrameSpec
from .strategies import CoverFillStrategy, CropStrategy, FixedFrameStrategy, Rect
from .engine import ViewportEngine, ViewportState, compute_crop_region, pan_state, zoom_state

__all__ = [
    # Config
    "FRAMES",
    "PASSPORT_FRAME",
    "POLAROID_FRAME",
    "FrameSpec",
    # Strategies
    "CoverFillStrategy",
    "CropStrategy",
    "FixedFrameStrategy",
    "Rect",
    # Engine
    "ViewportEngine",
    "ViewportState",
    "compute_crop_region",
    "pan_state",
    "zoom_state",
]
