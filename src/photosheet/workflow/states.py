"""
Module: workflow.states

Purpose:
    Workflow steps and paper-type variants.

Key Classes:
    - Step: Workflow step
    - Variant: Paper-type variant chosen at PAPER_TYPE

Used By:
    - workflow.transitions, workflow.machine
    - gui.main_window: One page per step
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from photosheet.viewport import PASSPORT_FRAME, POLAROID_FRAME, FrameSpec


class Step(str, Enum):
    """Workflow step."""

    UPLOAD = "upload"
    PAPER_TYPE = "paper_type"
    CROP = "crop"
    ENHANCE = "enhance"
    CAPTION_TEXT = "caption_text"
    LAYOUT_SELECT = "layout_select"
    PROCESSING = "processing"
    PREVIEW = "preview"
    DONE = "done"

    @property
    def label(self) -> str:
        return STEP_LABELS[self]


class Variant(str, Enum):
    """Paper-type variant."""

    PASSPORT = "passport"
    POLAROID = "polaroid"

    @property
    def frame(self) -> FrameSpec:
        """Crop frame used by this variant."""
        return PASSPORT_FRAME if self is Variant.PASSPORT else POLAROID_FRAME


STEP_LABELS: Dict[Step, str] = {
    Step.UPLOAD: "Upload",
    Step.PAPER_TYPE: "Paper Type",
    Step.CROP: "Crop",
    Step.ENHANCE: "Enhance",
    Step.CAPTION_TEXT: "Captions",
    Step.LAYOUT_SELECT: "Layout",
    Step.PROCESSING: "Processing",
    Step.PREVIEW: "Preview",
    Step.DONE: "Done",
}

# Steps shown in the progress header (PROCESSING is transient)
STEP_SEQUENCES: Dict[Variant, Tuple[Step, ...]] = {
    Variant.PASSPORT: (
        Step.UPLOAD,
        Step.PAPER_TYPE,
        Step.CROP,
        Step.ENHANCE,
        Step.LAYOUT_SELECT,
        Step.PREVIEW,
        Step.DONE,
    ),
    Variant.POLAROID: (
        Step.UPLOAD,
        Step.PAPER_TYPE,
        Step.CROP,
        Step.CAPTION_TEXT,
        Step.PREVIEW,
        Step.DONE,
    ),
}

PROCESSING_MODES: Tuple[str, ...] = ("passport", "studio")
DEFAULT_PROCESSING_MODE = "passport"
DEFAULT_ENHANCE_LEVEL = 0.40
