"""
Module: layout.models

Purpose:
    Data models for sheet layout.
    Immutable dataclasses describing a sheet's grid and its cells.

Key Classes:
    - PaperLayoutSpec: Grid geometry for one paper type
    - CellBox: One cell positioned on the sheet

Dependencies:
    - dataclasses (std)

Used By:
    - layout.calculator: Creates PaperLayoutSpecs and CellBoxes
    - workflow.transitions: Sends PaperLayoutSpec.to_request() to the collaborator
    - gui.widgets.layout_preview: Paints CellBoxes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .config import Orientation, PaperType


@dataclass(frozen=True)
class PaperLayoutSpec:
    """
    Complete grid geometry for a paper type (immutable).

    Computed from the layout table, never stored.

    Attributes:
        type: Paper layout key
        rows: Grid rows
        cols: Grid columns
        cell_width_px: Cell width after the gap is removed
        cell_height_px: Cell height after the gap is removed
        sheet_width_px: Sheet width at dpi
        sheet_height_px: Sheet height at dpi
        dpi: Print resolution
        orientation: Landscape or portrait
        gap_px: Gap removed from each slot

    Example:
        >>> spec = layout_for("standard")
        >>> spec.photo_count
        8
    """

    type: PaperType
    rows: int
    cols: int
    cell_width_px: int
    cell_height_px: int
    sheet_width_px: int
    sheet_height_px: int
    dpi: int
    orientation: Orientation
    gap_px: int = 0

    @property
    def photo_count(self) -> int:
        """Number of photos on the sheet (rows * cols)."""
        return self.rows * self.cols

    @property
    def slot_width_px(self) -> int:
        return self.sheet_width_px // self.cols

    @property
    def slot_height_px(self) -> int:
        return self.sheet_height_px // self.rows

    @property
    def margin_px(self) -> int:
        """Outer margin: half a gap on each edge."""
        return self.gap_px // 2

    @property
    def sheet_size_inches(self) -> tuple[float, float]:
        return (self.sheet_width_px / self.dpi, self.sheet_height_px / self.dpi)

    @property
    def sheet_label(self) -> str:
        """Human size label such as '6×4 in'."""
        w, h = self.sheet_size_inches
        return f"{w:g}×{h:g} in"

    def to_request(self) -> Dict[str, Any]:
        """Payload for the compositing collaborator."""
        return {
            "type": self.type.value,
            "rows": self.rows,
            "cols": self.cols,
            "cell_width_px": self.cell_width_px,
            "cell_height_px": self.cell_height_px,
            "sheet_width_px": self.sheet_width_px,
            "sheet_height_px": self.sheet_height_px,
            "dpi": self.dpi,
            "orientation": self.orientation.value,
            "photo_count": self.photo_count,
        }


@dataclass(frozen=True)
class CellBox:
    """
    A cell positioned on the sheet.

    Attributes:
        index: Row-major cell index
        row: Row index
        col: Column index
        left: X offset from sheet left (pixels)
        top: Y offset from sheet top (pixels)
        width: Cell width (pixels)
        height: Cell height (pixels)
    """

    index: int
    row: int
    col: int
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height
