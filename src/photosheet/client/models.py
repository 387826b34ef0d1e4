"""
Module: client.models

Purpose:
    Typed results returned by the processing collaborator. Each result
    parses the collaborator's JSON body in from_dict() and raises
    ValueError when a required field is missing, so the transport can
    report a malformed response as a CollaboratorError.

Key Classes:
    - UploadResult: uploadImage response
    - CropResult: applyCrop response
    - SheetPreview: previewSheet / previewCaptionSheet response
    - SheetFile: downloadSheet response
    - PrintResult: printSheet response
    - PrinterInfo: One entry of the printer listing

Used By:
    - client.http: Builds results from responses
    - workflow.transitions: Applies results to the session
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _require(data: Dict[str, Any], *keys: str) -> Any:
    """First present, non-empty value among keys."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    raise ValueError(f"Response is missing field {keys[0]!r}")


@dataclass(frozen=True)
class UploadResult:
    """
    Result of uploadImage.

    Attributes:
        image_id: Collaborator handle for the stored image
        natural_width: Source width in pixels
        natural_height: Source height in pixels
        face_detected: Whether a face was found (None when not reported)
        display_url: URL or data URL for display, when provided
    """

    image_id: str
    natural_width: int
    natural_height: int
    face_detected: Optional[bool] = None
    display_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UploadResult":
        image_id = str(_require(data, "image_id", "imageId"))
        dims = _require(data, "dimensions", "naturalDimensions")
        try:
            width, height = (int(v) for v in dims)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid dimensions in response: {dims!r}") from None
        face = data.get("face_detected")
        return cls(
            image_id=image_id,
            natural_width=width,
            natural_height=height,
            face_detected=None if face is None else bool(face),
            display_url=str(data.get("thumbnail_url") or data.get("url") or ""),
        )


@dataclass(frozen=True)
class CropResult:
    """
    Result of applyCrop.

    Attributes:
        processed_image_id: Handle used for every later sheet request
        processed_image: Processed image (data URL or URL)
        before_image: Optional comparison image before enhancement
        after_image: Optional comparison image after enhancement
        face_confidence: Optional detector confidence in [0, 1]
    """

    processed_image_id: str
    processed_image: str = ""
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    face_confidence: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_image_id: str = "") -> "CropResult":
        """
        Parse a processing response.

        Some collaborators echo no new id; the source image id is then
        used as the processed handle.
        """
        processed_id = data.get("processed_image_id") or data.get("image_id") or source_image_id
        if not processed_id:
            raise ValueError("Response is missing field 'image_id'")
        confidence = data.get("face_confidence")
        return cls(
            processed_image_id=str(processed_id),
            processed_image=str(data.get("processed_image") or ""),
            before_image=data.get("before_image"),
            after_image=data.get("after_image"),
            face_confidence=None if confidence is None else float(confidence),
        )


@dataclass(frozen=True)
class SheetPreview:
    """
    Composited sheet preview.

    Attributes:
        preview_image: Preview (data URL or URL)
        photo_count: Photos on the sheet, when reported
        orientation: "landscape" / "portrait", when reported
        dimensions: Size description such as "1800x1200"
        dpi: Sheet resolution, when reported
    """

    preview_image: str
    photo_count: Optional[int] = None
    orientation: Optional[str] = None
    dimensions: str = ""
    dpi: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SheetPreview":
        info = data.get("layout_info") or {}
        count = info.get("photo_count", data.get("photo_count"))
        dpi = data.get("dpi")
        return cls(
            preview_image=str(_require(data, "preview", "preview_sheet", "preview_image")),
            photo_count=None if count is None else int(count),
            orientation=info.get("orientation", data.get("orientation")),
            dimensions=str(data.get("dimensions") or ""),
            dpi=None if dpi is None else int(dpi),
        )


@dataclass(frozen=True)
class SheetFile:
    """
    Downloadable sheet.

    Attributes:
        file_url: Sheet file (data URL or URL)
        filename: Suggested file name
        size_bytes: Reported file size
        dimensions: Size description
        dpi: Sheet resolution, when reported
    """

    file_url: str
    filename: str
    size_bytes: int = 0
    dimensions: str = ""
    dpi: Optional[int] = None

    @property
    def size_kb(self) -> float:
        return self.size_bytes / 1024

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SheetFile":
        dpi = data.get("dpi")
        return cls(
            file_url=str(_require(data, "file", "file_url")),
            filename=str(data.get("filename") or "photo_sheet.png"),
            size_bytes=int(data.get("size_bytes") or 0),
            dimensions=str(data.get("dimensions") or ""),
            dpi=None if dpi is None else int(dpi),
        )


@dataclass(frozen=True)
class PrintResult:
    """Outcome of printSheet."""

    status: str
    printer_used: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrintResult":
        return cls(
            status=str(data.get("status") or "sent"),
            printer_used=str(data.get("printer_used") or data.get("printer") or ""),
            message=str(data.get("message") or ""),
        )


@dataclass(frozen=True)
class PrinterInfo:
    """
    A printer offered by the collaborator.

    Attributes:
        id: Identifier passed back to printSheet
        name: Display name
        is_default: True for the system default printer
        supports_color: None when the collaborator does not report it
        status: Collaborator-reported state such as "idle" or "offline"
    """

    id: str
    name: str
    is_default: bool = False
    supports_color: Optional[bool] = None
    status: str = ""

    @property
    def label(self) -> str:
        notes = []
        if self.is_default:
            notes.append("default")
        if self.supports_color is False:
            notes.append("black & white")
        if self.status:
            notes.append(self.status)
        return f"{self.name} ({', '.join(notes)})" if notes else self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrinterInfo":
        printer_id = str(_require(data, "id", "name"))
        color = data.get("supports_color", data.get("supportsColor"))
        return cls(
            id=printer_id,
            name=str(data.get("name") or printer_id),
            is_default=bool(data.get("is_default", data.get("isDefault", False))),
            supports_color=None if color is None else bool(color),
            status=str(data.get("status") or ""),
        )
