"""
Module: client.http

Purpose:
    HTTP implementation of ProcessingClient using urllib. JSON bodies for
    every call except upload, which is sent as multipart/form-data with a
    single "file" field.

    Failures are mapped to the package taxonomy:
    - Print endpoint answering 503 or error code "no_printer"
      -> PrinterUnavailableError
    - Any other HTTP error, connection error, timeout or malformed body
      -> CollaboratorError

Key Classes:
    - HttpProcessingClient: urllib-based collaborator client

Key Functions:
    - decode_data_url(): Decode a base64 data URL
    - fetch_bytes(): Bytes behind a data URL or http(s) URL
    - save_sheet(): Write a downloaded sheet to a folder

Dependencies:
    - urllib.request (std)

Used By:
    - gui.main_window: Production client
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import mimetypes
import socket
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from photosheet.core.models import CaptionSet, CropRegion
from photosheet.errors import CollaboratorError, PrinterUnavailableError
from photosheet.layout import PaperLayoutSpec

from .config import ClientConfig
from .interface import ProcessingClient
from .models import CropResult, PrinterInfo, PrintResult, SheetFile, SheetPreview, UploadResult

logger = logging.getLogger(__name__)

NO_PRINTER_CODE = "no_printer"


# =============================================================================
# Data URL helpers
# =============================================================================

def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Decode a base64 data URL.

    Args:
        data_url: String such as "data:image/png;base64,iVBOR..."

    Returns:
        (mime_type, payload bytes)

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    if not data_url.startswith("data:"):
        raise ValueError("Not a data URL")
    header, sep, payload = data_url[5:].partition(",")
    if not sep:
        raise ValueError("Data URL has no payload")
    parts = header.split(";")
    if "base64" not in parts[1:]:
        raise ValueError("Only base64 data URLs are supported")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return (parts[0] or "application/octet-stream", data)


def fetch_bytes(url: str, timeout: float = 60.0) -> bytes:
    """
    Bytes behind a data URL or an http(s) URL.

    Raises:
        CollaboratorError: If the resource cannot be retrieved
    """
    if url.startswith("data:"):
        try:
            return decode_data_url(url)[1]
        except ValueError as e:
            raise CollaboratorError("fetch_image", str(e)) from e
    try:
        with urlopen(Request(url, method="GET"), timeout=timeout) as response:
            return response.read()
    except HTTPError as e:
        raise CollaboratorError("fetch_image", f"HTTP {e.code} for {url}", status=e.code) from e
    except (URLError, socket.timeout) as e:
        raise CollaboratorError("fetch_image", f"Connection failed for {url}: {e}") from e


def save_sheet(sheet: SheetFile, folder: Path, timeout: float = 60.0) -> Path:
    """
    Write a downloaded sheet into a folder.

    Existing files are not overwritten; a numeric suffix is added.

    Args:
        sheet: Sheet returned by download_sheet/download_caption_sheet
        folder: Target folder (created if missing)
        timeout: Timeout when the sheet is a remote URL

    Returns:
        Path of the written file
    """
    folder.mkdir(parents=True, exist_ok=True)
    name = Path(sheet.filename).name or "photo_sheet.png"
    target = folder / name
    counter = 1
    while target.exists():
        target = folder / f"{Path(name).stem}_{counter}{Path(name).suffix}"
        counter += 1
    data = fetch_bytes(sheet.file_url, timeout=timeout)
    target.write_bytes(data)
    logger.info(f"Saved sheet to {target} ({len(data) / 1024:.1f}KB)")
    return target


def _encode_multipart(field: str, path: Path, data: bytes) -> Tuple[bytes, str]:
    boundary = f"----photosheet{uuid.uuid4().hex}"
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{field}"; filename="{path.name}"\r\n'
        f"Content-Type: {mime}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
    return head + data + tail, f"multipart/form-data; boundary={boundary}"


def _error_detail(body: str) -> Tuple[str, str]:
    """(code, message) extracted from an error body."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return ("", body.strip()[:300])
    if not isinstance(parsed, dict):
        return ("", body.strip()[:300])
    detail = parsed.get("detail", parsed.get("error", ""))
    if isinstance(detail, dict):
        return (str(detail.get("code", "")), str(detail.get("message", "")))
    code = str(parsed.get("code") or "")
    if not code and detail == NO_PRINTER_CODE:
        code = NO_PRINTER_CODE
    return (code, str(parsed.get("message") or detail or ""))


# =============================================================================
# Client
# =============================================================================

class HttpProcessingClient(ProcessingClient):
    """
    Processing collaborator reached over HTTP.

    Example:
        >>> client = HttpProcessingClient(ClientConfig.from_env())
        >>> upload = client.upload_image(Path("portrait.jpg"))
        >>> upload.image_id
        'a1b2c3'
    """

    def __init__(self, config: Optional[ClientConfig] = None) -> None:
        self.config = config or ClientConfig()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(
        self,
        operation: str,
        path: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
        body: Optional[bytes] = None,
        content_type: str = "application/json",
        method: str = "POST",
    ) -> Any:
        url = self.config.endpoint(path)
        if payload is not None:
            body = json.dumps(payload).encode("utf-8")
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = content_type
        request = Request(url, data=body, headers=headers, method=method)

        logger.info(f"{operation}: {method} {url}")
        try:
            with urlopen(request, timeout=self.config.timeout_seconds) as response:
                raw = response.read().decode("utf-8")
        except HTTPError as e:
            try:
                details = e.read().decode("utf-8", errors="ignore")
            except OSError:
                details = ""
            code, message = _error_detail(details)
            if operation == "print_sheet" and (e.code == 503 or code == NO_PRINTER_CODE):
                if not message or message == NO_PRINTER_CODE:
                    message = "No printer available"
                raise PrinterUnavailableError(message) from e
            raise CollaboratorError(
                operation, message or f"HTTP {e.code}", status=e.code
            ) from e
        except (URLError, socket.timeout) as e:
            reason = getattr(e, "reason", e)
            raise CollaboratorError(operation, f"Connection failed for {url}: {reason}") from e

        try:
            return json.loads(raw) if raw else {}
        except ValueError as e:
            raise CollaboratorError(operation, "Response is not valid JSON") from e

    def _parse(self, operation: str, factory, data: Any, *args):
        if not isinstance(data, dict):
            raise CollaboratorError(operation, "Response is not a JSON object")
        if data.get("success") is False:
            raise CollaboratorError(operation, str(data.get("error") or "Request failed"))
        try:
            return factory(data, *args)
        except (ValueError, TypeError) as e:
            raise CollaboratorError(operation, f"Malformed response: {e}") from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def upload_image(self, path: Path) -> UploadResult:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CollaboratorError("upload_image", f"Cannot read {path.name}: {e}") from e
        body, content_type = _encode_multipart("file", path, data)
        response = self._send("upload_image", "/upload", body=body, content_type=content_type)
        result = self._parse("upload_image", UploadResult.from_dict, response)
        logger.info(
            f"Uploaded {path.name}: id={result.image_id} "
            f"{result.natural_width}x{result.natural_height} face={result.face_detected}"
        )
        return result

    def apply_crop(
        self,
        image_id: str,
        crop: CropRegion,
        mode: str = "passport",
        enhance_level: float = 0.40,
    ) -> CropResult:
        payload = {
            "image_id": image_id,
            "crop_data": crop.to_dict(),
            "mode": mode,
            "enhance_level": enhance_level,
            "background": "white",
        }
        response = self._send("apply_crop", "/process", payload=payload)
        return self._parse("apply_crop", CropResult.from_dict, response, image_id)

    def preview_sheet(self, image_id: str, layout: PaperLayoutSpec) -> SheetPreview:
        payload = {"image_id": image_id, "layout": layout.type.value, "layout_spec": layout.to_request()}
        response = self._send("preview_sheet", "/preview-sheet", payload=payload)
        return self._parse("preview_sheet", SheetPreview.from_dict, response)

    def download_sheet(self, image_id: str, layout: PaperLayoutSpec) -> SheetFile:
        payload = {"image_id": image_id, "layout": layout.type.value, "layout_spec": layout.to_request()}
        response = self._send("download_sheet", "/download-sheet", payload=payload)
        return self._parse("download_sheet", SheetFile.from_dict, response)

    def print_sheet(
        self,
        image_id: str,
        layout: PaperLayoutSpec,
        printer_id: Optional[str] = None,
        copies: int = 1,
        captions: Optional[CaptionSet] = None,
    ) -> PrintResult:
        payload: Dict[str, Any] = {
            "image_id": image_id,
            "layout": layout.type.value,
            "layout_spec": layout.to_request(),
            "printer": printer_id,
            "copies": copies,
        }
        if captions is not None:
            payload.update(captions.to_dict())
        response = self._send("print_sheet", "/print-sheet", payload=payload)
        if isinstance(response, dict) and response.get("status") == NO_PRINTER_CODE:
            raise PrinterUnavailableError(str(response.get("message") or "No printer available"))
        return self._parse("print_sheet", PrintResult.from_dict, response)

    def preview_caption_sheet(self, image_id: str, captions: CaptionSet) -> SheetPreview:
        payload = {"image_id": image_id, **captions.to_dict()}
        response = self._send("preview_caption_sheet", "/polaroid/preview", payload=payload)
        return self._parse("preview_caption_sheet", SheetPreview.from_dict, response)

    def download_caption_sheet(self, image_id: str, captions: CaptionSet) -> SheetFile:
        payload = {"image_id": image_id, **captions.to_dict()}
        response = self._send("download_caption_sheet", "/polaroid/download", payload=payload)
        return self._parse("download_caption_sheet", SheetFile.from_dict, response)

    def list_printers(self) -> List[PrinterInfo]:
        response = self._send("list_printers", "/printers", method="GET")
        entries = response.get("printers", []) if isinstance(response, dict) else response
        if not isinstance(entries, list):
            raise CollaboratorError("list_printers", "Response is not a printer list")
        printers = []
        for entry in entries:
            if isinstance(entry, str):
                printers.append(PrinterInfo(id=entry, name=entry))
            else:
                printers.append(self._parse("list_printers", PrinterInfo.from_dict, entry))
        return printers
