"""
Module: layout.config

Purpose:
    Configuration for sheet layouts. Defines the print resolution and the
    per-paper-type sheet configuration table.

Key Classes:
    - PaperType: Known paper layout keys
    - SheetConfig: Immutable sheet configuration

Dependencies:
    - dataclasses (std)

Used By:
    - layout.calculator: Turns a SheetConfig into a PaperLayoutSpec
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


DEFAULT_DPI = 300


class PaperType(str, Enum):
    """Paper layout keys understood by the compositing collaborator."""

    STANDARD = "standard"
    CUSTOM = "custom"
    POLAROID = "polaroid"


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


@dataclass(frozen=True)
class SheetConfig:
    """
    Configuration for one sheet layout (immutable).

    Attributes:
        rows: Grid rows
        cols: Grid columns
        sheet_width_in: Sheet width in inches
        sheet_height_in: Sheet height in inches
        gap_px: Space removed from each slot; cells are centred in their slot
        dpi: Print resolution

    Example:
        >>> config = SheetConfig(rows=2, cols=4, sheet_width_in=6, sheet_height_in=4)
        >>> config.sheet_width_px
        1800
    """

    rows: int
    cols: int
    sheet_width_in: float
    sheet_height_in: float
    gap_px: int = 3
    dpi: int = DEFAULT_DPI

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid must be positive: {self.rows}x{self.cols}")
        if self.sheet_width_in <= 0 or self.sheet_height_in <= 0:
            raise ValueError(
                f"Sheet size must be positive: {self.sheet_width_in}x{self.sheet_height_in}"
            )
        if self.gap_px < 0:
            raise ValueError(f"gap_px must be non-negative: {self.gap_px}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if self.sheet_width_px // self.cols <= self.gap_px:
            raise ValueError("Gap exceeds column width")
        if self.sheet_height_px // self.rows <= self.gap_px:
            raise ValueError("Gap exceeds row height")

    @property
    def sheet_width_px(self) -> int:
        return round(self.sheet_width_in * self.dpi)

    @property
    def sheet_height_px(self) -> int:
        return round(self.sheet_height_in * self.dpi)

    @property
    def orientation(self) -> Orientation:
        if self.sheet_width_in >= self.sheet_height_in:
            return Orientation.LANDSCAPE
        return Orientation.PORTRAIT


SHEET_CONFIGS: Dict[PaperType, SheetConfig] = {
    # 8 identity photos on a 6x4 landscape sheet
    PaperType.STANDARD: SheetConfig(rows=2, cols=4, sheet_width_in=6, sheet_height_in=4, gap_px=3),
    # 12 identity photos on a 4x6 portrait sheet
    PaperType.CUSTOM: SheetConfig(rows=4, cols=3, sheet_width_in=4, sheet_height_in=6, gap_px=3),
    # 2 caption prints side by side, spaced for cutting
    PaperType.POLAROID: SheetConfig(rows=1, cols=2, sheet_width_in=6, sheet_height_in=4, gap_px=60),
}
