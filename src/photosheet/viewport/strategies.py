"""
Module: viewport.strategies

Purpose:
    Crop strategies for the viewport engine. Both strategies share the
    same screen-to-image mapping (see engine.compute_crop_region); a
    strategy only decides three things:

    1. Where the crop frame sits in the container
    2. How the image is fitted into the container at zoom 1
    3. Which pan offsets are allowed

Key Classes:
    - Rect: Axis-aligned rectangle in container pixels
    - CropStrategy: Strategy interface
    - CoverFillStrategy: Frame fills the container, image covers it, pan clamped
    - FixedFrameStrategy: Smaller centred frame, image contained, pan free

Dependencies:
    - dataclasses (std)

Used By:
    - viewport.config: Each FrameSpec picks one strategy
    - viewport.engine: Applies the strategy
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle (container pixels)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


def fit_aspect(width: float, height: float, aspect: float) -> Tuple[float, float]:
    """Largest (w, h) with w/h == aspect inside width x height."""
    ratio = width / height
    # A container already at the aspect is used as-is (no float drift)
    if math.isclose(ratio, aspect, rel_tol=1e-9):
        return (width, height)
    if ratio > aspect:
        return (height * aspect, height)
    return (width, width / aspect)


def centered(container_w: float, container_h: float, w: float, h: float) -> Rect:
    return Rect((container_w - w) / 2, (container_h - h) / 2, w, h)


class CropStrategy(ABC):
    """Strategy interface for the viewport engine."""

    name: str = "abstract"

    @abstractmethod
    def frame_rect(self, container_w: float, container_h: float, aspect: float) -> Rect:
        """Aspect-locked crop frame in container pixels."""
        ...

    @abstractmethod
    def base_rect(
        self,
        container_w: float,
        container_h: float,
        natural_w: int,
        natural_h: int,
    ) -> Rect:
        """Image rectangle at zoom 1 and zero pan (never distorted)."""
        ...

    @abstractmethod
    def clamp_pan(
        self,
        pan_x: float,
        pan_y: float,
        zoom: float,
        container_w: float,
        container_h: float,
    ) -> Tuple[float, float]:
        """Constrain a pan offset."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CoverFillStrategy(CropStrategy):
    """
    Frame occupies the container; image scaled to cover it.

    Pan is limited to [-(size * zoom - size), 0] on each axis so the
    container never shows empty space. With zoom >= 1 the frame therefore
    always lies inside the image and the crop keeps the frame's aspect.
    """

    name = "cover_fill"

    def frame_rect(self, container_w: float, container_h: float, aspect: float) -> Rect:
        w, h = fit_aspect(container_w, container_h, aspect)
        return centered(container_w, container_h, w, h)

    def base_rect(self, container_w, container_h, natural_w, natural_h) -> Rect:
        scale = max(container_w / natural_w, container_h / natural_h)
        return centered(container_w, container_h, natural_w * scale, natural_h * scale)

    def clamp_pan(self, pan_x, pan_y, zoom, container_w, container_h) -> Tuple[float, float]:
        min_x = -(container_w * zoom - container_w)
        min_y = -(container_h * zoom - container_h)
        # zoom < 1 would invert the range; pin to the origin instead
        x = 0.0 if min_x > 0 else max(min_x, min(0.0, pan_x))
        y = 0.0 if min_y > 0 else max(min_y, min(0.0, pan_y))
        return (x, y)


class FixedFrameStrategy(CropStrategy):
    """
    Smaller aspect-locked frame centred in a larger draggable canvas.

    The image is contained in the canvas at zoom 1. Pan is free, so the
    frame may overhang the image; the engine intersects the two.

    Attributes:
        frame_fraction: Frame height as a fraction of container height
            (shrunk to the same fraction of width when too wide)
    """

    name = "fixed_frame"

    def __init__(self, frame_fraction: float = 0.7) -> None:
        if not 0 < frame_fraction <= 1:
            raise ValueError(f"frame_fraction must be in (0, 1]: {frame_fraction}")
        self.frame_fraction = frame_fraction

    def frame_rect(self, container_w: float, container_h: float, aspect: float) -> Rect:
        w, h = fit_aspect(container_w * self.frame_fraction, container_h * self.frame_fraction, aspect)
        return centered(container_w, container_h, w, h)

    def base_rect(self, container_w, container_h, natural_w, natural_h) -> Rect:
        scale = min(container_w / natural_w, container_h / natural_h)
        return centered(container_w, container_h, natural_w * scale, natural_h * scale)

    def clamp_pan(self, pan_x, pan_y, zoom, container_w, container_h) -> Tuple[float, float]:
        return (pan_x, pan_y)

    def __repr__(self) -> str:
        return f"FixedFrameStrategy(frame_fraction={self.frame_fraction})"
