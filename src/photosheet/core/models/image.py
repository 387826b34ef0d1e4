"""
Module: image

Purpose:
    ImageAsset - handle to an image stored by the collaborator, plus what
    the client needs to display it and to normalise crops against it.

Used By:
    - workflow.machine: created on successful upload
    - viewport.engine: natural dimensions gate crop computation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class ImageAsset:
    """
    Uploaded image handle (immutable).

    Attributes:
        id: Collaborator image identifier
        display_url: URL (file:// or remote) the GUI can load
        natural_width: Source width in pixels
        natural_height: Source height in pixels

    Invariants:
        - id is non-empty
        - natural_width > 0 and natural_height > 0

    Example:
        >>> asset = ImageAsset("img_1", "file:///tmp/me.jpg", 1200, 1600)
        >>> asset.aspect_ratio
        0.75
    """

    id: str
    display_url: str
    natural_width: int
    natural_height: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ImageAsset id must be non-empty")
        if self.natural_width <= 0 or self.natural_height <= 0:
            raise ValueError(
                f"Natural dimensions must be positive: "
                f"{self.natural_width}x{self.natural_height}"
            )

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.natural_width / self.natural_height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "display_url": self.display_url,
            "natural_width": self.natural_width,
            "natural_height": self.natural_height,
        }
