"""
Module: client.interface

Purpose:
    Abstract interface of the external processing collaborator. The
    workflow depends only on this interface; HttpProcessingClient is the
    production implementation and tests substitute mocks.

Key Classes:
    - ProcessingClient: Collaborator operations

Used By:
    - workflow.machine: PendingCall.execute(client)
    - client.http: HttpProcessingClient
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from photosheet.core.models import CaptionSet, CropRegion
from photosheet.layout import PaperLayoutSpec

from .models import CropResult, PrinterInfo, PrintResult, SheetFile, SheetPreview, UploadResult


class ProcessingClient(ABC):
    """
    Operations offered by the processing collaborator.

    Every method either returns its result or raises CollaboratorError
    (PrinterUnavailableError for print_sheet when nothing can print).
    Implementations are called from worker threads and must not touch
    the GUI.
    """

    @abstractmethod
    def upload_image(self, path: Path) -> UploadResult:
        """Store an image and return its handle and natural dimensions."""
        ...

    @abstractmethod
    def apply_crop(
        self,
        image_id: str,
        crop: CropRegion,
        mode: str = "passport",
        enhance_level: float = 0.40,
    ) -> CropResult:
        """Crop (and for identity photos, clean up and enhance) an image."""
        ...

    @abstractmethod
    def preview_sheet(self, image_id: str, layout: PaperLayoutSpec) -> SheetPreview:
        """Composite a preview of the photo grid."""
        ...

    @abstractmethod
    def download_sheet(self, image_id: str, layout: PaperLayoutSpec) -> SheetFile:
        """Composite the full-resolution photo grid for download."""
        ...

    @abstractmethod
    def print_sheet(
        self,
        image_id: str,
        layout: PaperLayoutSpec,
        printer_id: Optional[str] = None,
        copies: int = 1,
        captions: Optional[CaptionSet] = None,
    ) -> PrintResult:
        """Send the composited sheet to a printer."""
        ...

    @abstractmethod
    def preview_caption_sheet(self, image_id: str, captions: CaptionSet) -> SheetPreview:
        """Composite a preview of the captioned (polaroid) sheet."""
        ...

    @abstractmethod
    def download_caption_sheet(self, image_id: str, captions: CaptionSet) -> SheetFile:
        """Composite the full-resolution captioned sheet for download."""
        ...

    def list_printers(self) -> List[PrinterInfo]:
        """Printers known to the collaborator (empty when unsupported)."""
        return []
