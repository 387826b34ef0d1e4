"""
Module: layout

Purpose:
    Printable sheet geometry: grid dimensions, cell size, margins and DPI
    for each paper type.

Key Functions:
    - layout_for(): Layout spec for a paper type
    - cell_boxes(): Cell placement on the sheet

Key Classes:
    - PaperType: Layout keys
    - PaperLayoutSpec: Grid geometry
    - CellBox: Positioned cell
"""

from .config import DEFAULT_DPI, SHEET_CONFIGS, Orientation, PaperType, SheetConfig
from .models import CellBox, PaperLayoutSpec
from .calculator import available_layouts, build_spec, cell_boxes, layout_for

__all__ = [
    # Config
    "DEFAULT_DPI",
    "SHEET_CONFIGS",
    "Orientation",
    "PaperType",
    "SheetConfig",
    # Models
    "CellBox",
    "PaperLayoutSpec",
    # Calculator
    "available_layouts",
    "build_spec",
    "cell_boxes",
    "layout_for",
]
