"""
Module: workflow.session

Purpose:
    WorkflowSession - everything accumulated for one photo, from upload
    to download. A session is never cleared field by field: reset
    replaces it with a fresh instance.

Key Classes:
    - WorkflowSession: Mutable session aggregate

Used By:
    - workflow.machine: Owns the current session
    - gui: Reads session fields to populate pages
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from photosheet.client.models import PrinterInfo, PrintResult, SheetFile
from photosheet.core.models import CaptionSet, CropRegion, ImageAsset
from photosheet.layout import PaperLayoutSpec

from .states import DEFAULT_ENHANCE_LEVEL, DEFAULT_PROCESSING_MODE, Step, Variant


@dataclass
class WorkflowSession:
    """
    Session aggregate root.

    Attributes:
        generation: Token identifying this session's current epoch;
            collaborator results carrying another token are discarded
        step: Current step
        variant: Paper-type variant, once chosen
        source_path: Local file that was uploaded
        image: Uploaded image handle and natural size
        face_detected: Face detection flag reported on upload
        crop: Confirmed crop
        processing_mode: "passport" or "studio"
        enhance_level: Enhancement strength in [0, 1]
        processed_image_id: Handle for sheet requests
        processed_image: Processed photo (data URL or URL)
        before_image: Comparison image before enhancement
        after_image: Comparison image after enhancement
        face_confidence: Detector confidence from processing
        layout: Chosen sheet layout
        captions: Captions for caption-style prints
        preview_image: Composited sheet preview
        preview_warning: User-visible note when a fallback preview is shown
        sheet_file: Downloaded sheet metadata
        saved_path: Where the downloaded sheet was written
        print_result: Outcome of the last print request
        printers: Printers offered by the collaborator
        pending: Name of the transition whose call is in flight
        resume_step: Step restored if the in-flight call fails
        last_error: Most recent failure, for display
        failed_transition: Name of the transition that failed last
        failed_args: Arguments captured for that transition (for retry
            and the processed-photo preview fallback)
    """

    generation: int = 0
    step: Step = Step.UPLOAD
    variant: Optional[Variant] = None

    source_path: Optional[Path] = None
    image: Optional[ImageAsset] = None
    face_detected: Optional[bool] = None

    crop: Optional[CropRegion] = None
    processing_mode: str = DEFAULT_PROCESSING_MODE
    enhance_level: float = DEFAULT_ENHANCE_LEVEL
    processed_image_id: Optional[str] = None
    processed_image: Optional[str] = None
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    face_confidence: Optional[float] = None

    layout: Optional[PaperLayoutSpec] = None
    captions: CaptionSet = field(default_factory=CaptionSet)

    preview_image: Optional[str] = None
    preview_warning: Optional[str] = None
    sheet_file: Optional[SheetFile] = None
    saved_path: Optional[Path] = None
    print_result: Optional[PrintResult] = None
    printers: List[PrinterInfo] = field(default_factory=list)

    pending: Optional[str] = None
    resume_step: Optional[Step] = None
    last_error: Optional[Exception] = None
    failed_transition: Optional[str] = None
    failed_args: Optional[Mapping[str, Any]] = None

    @property
    def busy(self) -> bool:
        """True while a collaborator call is in flight."""
        return self.pending is not None

    @property
    def is_empty(self) -> bool:
        """True when nothing has been uploaded or chosen yet."""
        return (
            self.image is None
            and self.crop is None
            and self.processed_image_id is None
            and self.captions.is_blank
            and self.layout is None
        )

    def clear_results(self) -> None:
        """Forget processing and sheet results (used when the crop changes)."""
        self.processed_image_id = None
        self.processed_image = None
        self.before_image = None
        self.after_image = None
        self.face_confidence = None
        self.clear_sheet()

    def clear_sheet(self) -> None:
        self.preview_image = None
        self.preview_warning = None
        self.sheet_file = None
        self.saved_path = None
        self.print_result = None
