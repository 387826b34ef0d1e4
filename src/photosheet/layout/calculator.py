"""
Module: layout.calculator

Purpose:
    Map a paper-type key to its grid geometry. This is the single source
    of truth for both the local layout preview and the compositing request.

Key Functions:
    - layout_for(): PaperLayoutSpec for a paper type
    - cell_boxes(): Pixel box of every cell, row-major
    - available_layouts(): Layout keys offered for a workflow variant

Dependencies:
    - layout.config: Sheet configuration table

Used By:
    - workflow.transitions: choose_layout / submit_captions
    - gui.pages.layout_page, gui.pages.preview_page
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Union

from photosheet.errors import UnknownPaperTypeError

from .config import SHEET_CONFIGS, PaperType, SheetConfig
from .models import CellBox, PaperLayoutSpec

logger = logging.getLogger(__name__)


def _coerce_type(paper_type: Union[str, PaperType]) -> PaperType:
    if isinstance(paper_type, PaperType):
        return paper_type
    try:
        return PaperType(str(paper_type).strip().lower())
    except ValueError:
        known = ", ".join(t.value for t in PaperType)
        raise UnknownPaperTypeError(
            f"Unknown paper type {paper_type!r} (expected one of: {known})"
        ) from None


def build_spec(paper_type: PaperType, config: SheetConfig) -> PaperLayoutSpec:
    """
    Compute the layout spec for a sheet configuration.

    Cell size = (sheet_width // cols - gap, sheet_height // rows - gap).

    Args:
        paper_type: Key recorded on the returned layout
        config: Sheet configuration

    Returns:
        PaperLayoutSpec
    """
    slot_w = config.sheet_width_px // config.cols
    slot_h = config.sheet_height_px // config.rows
    return PaperLayoutSpec(
        type=paper_type,
        rows=config.rows,
        cols=config.cols,
        cell_width_px=slot_w - config.gap_px,
        cell_height_px=slot_h - config.gap_px,
        sheet_width_px=config.sheet_width_px,
        sheet_height_px=config.sheet_height_px,
        dpi=config.dpi,
        orientation=config.orientation,
        gap_px=config.gap_px,
    )


def layout_for(paper_type: Union[str, PaperType]) -> PaperLayoutSpec:
    """
    Look up the layout for a paper type.

    Args:
        paper_type: "standard", "custom" or "polaroid" (or a PaperType)

    Returns:
        PaperLayoutSpec at 300 DPI

    Raises:
        UnknownPaperTypeError: If the key is not in the layout table

    Example:
        >>> spec = layout_for("custom")
        >>> (spec.rows, spec.cols, spec.photo_count)
        (4, 3, 12)
    """
    key = _coerce_type(paper_type)
    spec = build_spec(key, SHEET_CONFIGS[key])
    logger.debug(
        f"Layout {key.value}: {spec.cols}x{spec.rows} cells of "
        f"{spec.cell_width_px}x{spec.cell_height_px}px on {spec.sheet_label}"
    )
    return spec


def cell_boxes(spec: PaperLayoutSpec) -> Iterator[CellBox]:
    """
    Yield every cell's pixel box, row-major.

    Each cell is centred in its slot, so boxes never overlap and all
    lie inside the sheet.
    """
    offset = spec.gap_px // 2
    index = 0
    for row in range(spec.rows):
        for col in range(spec.cols):
            yield CellBox(
                index=index,
                row=row,
                col=col,
                left=col * spec.slot_width_px + offset,
                top=row * spec.slot_height_px + offset,
                width=spec.cell_width_px,
                height=spec.cell_height_px,
            )
            index += 1


def available_layouts(caption_print: bool) -> List[PaperLayoutSpec]:
    """Layouts offered to a workflow variant."""
    if caption_print:
        return [layout_for(PaperType.POLAROID)]
    return [layout_for(PaperType.STANDARD), layout_for(PaperType.CUSTOM)]
