"""
Module: crop

Purpose:
    CropRegion - normalised crop rectangle over an image's natural pixel
    dimensions. This is the wire contract with the collaborator: it can be
    mapped back to source pixels independent of the viewing container.

Key Functions:
    - CropRegion.to_pixels(): Source-pixel box (left, top, right, bottom)
    - CropRegion.pixel_aspect: Width/height ratio in source pixels
    - CropRegion.to_dict(): Serialize for the collaborator request
    - CropRegion.from_dict(data): Deserialize

Dependencies:
    - dataclasses (std)

Used By:
    - viewport.engine: produces CropRegions
    - workflow.transitions: crop guard and applyCrop request
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from photosheet.errors import InvalidCropError

# Float slack allowed on the [0, 1] bounds after viewport arithmetic
BOUNDS_EPSILON = 1e-9


@dataclass(frozen=True, slots=True)
class CropRegion:
    """
    Normalised crop rectangle (immutable).

    x, y, width and height are fractions of the natural image size.
    zoom and the natural dimensions are recorded at capture time so the
    collaborator can trace how the rectangle was produced.

    Attributes:
        x: Left edge, fraction of natural width
        y: Top edge, fraction of natural height
        width: Fraction of natural width
        height: Fraction of natural height
        natural_width: Source width in pixels at capture time
        natural_height: Source height in pixels at capture time
        zoom: Viewport zoom factor when captured

    Invariants:
        - width > 0 and height > 0
        - 0 <= x <= 1 - width
        - 0 <= y <= 1 - height
        - natural_width > 0 and natural_height > 0

    Example:
        >>> region = CropRegion(0.25, 0.1, 0.5, 0.5, 1200, 1600, 2.0)
        >>> region.to_pixels()
        (300, 160, 900, 960)
    """

    x: float
    y: float
    width: float
    height: float
    natural_width: int
    natural_height: int
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if self.natural_width <= 0 or self.natural_height <= 0:
            raise InvalidCropError(
                f"Natural dimensions missing: {self.natural_width}x{self.natural_height}"
            )
        if self.width <= 0 or self.height <= 0:
            raise InvalidCropError(
                f"Crop size must be positive: {self.width:.4f}x{self.height:.4f}"
            )
        if self.x < -BOUNDS_EPSILON or self.y < -BOUNDS_EPSILON:
            raise InvalidCropError(f"Crop origin is negative: ({self.x:.4f}, {self.y:.4f})")
        if self.x + self.width > 1 + BOUNDS_EPSILON:
            raise InvalidCropError(
                f"Crop exceeds right edge: x={self.x:.4f} width={self.width:.4f}"
            )
        if self.y + self.height > 1 + BOUNDS_EPSILON:
            raise InvalidCropError(
                f"Crop exceeds bottom edge: y={self.y:.4f} height={self.height:.4f}"
            )
        if self.zoom <= 0:
            raise InvalidCropError(f"Zoom must be positive: {self.zoom}")

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def pixel_aspect(self) -> float:
        """Width/height of the crop measured in source pixels."""
        return (self.width * self.natural_width) / (self.height * self.natural_height)

    def to_pixels(self) -> Tuple[int, int, int, int]:
        """
        Map to a source-pixel box.

        Returns:
            (left, top, right, bottom), right/bottom exclusive
        """
        left = round(self.x * self.natural_width)
        top = round(self.y * self.natural_height)
        right = round(self.right * self.natural_width)
        bottom = round(self.bottom * self.natural_height)
        return (left, top, min(right, self.natural_width), min(bottom, self.natural_height))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the collaborator's field names."""
        return {
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
            "naturalWidth": int(self.natural_width),
            "naturalHeight": int(self.natural_height),
            "zoom": float(self.zoom),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropRegion":
        """
        Deserialize from a collaborator-style dict.

        Raises:
            KeyError: If a required field is missing
            InvalidCropError: If the values break an invariant
        """
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
            natural_width=int(data["naturalWidth"]),
            natural_height=int(data["naturalHeight"]),
            zoom=float(data.get("zoom", 1.0)),
        )
