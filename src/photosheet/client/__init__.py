"""
Module: client

Purpose:
    Access to the external processing collaborator (upload storage, face
    detection, enhancement, compositing, printing).

Key Classes:
    - ProcessingClient: Abstract collaborator interface
    - HttpProcessingClient: urllib implementation
    - ClientConfig: Connection settings and upload limits
"""

from .config import ACCEPTED_FORMATS, MAX_UPLOAD_BYTES, ClientConfig
from .interface import ProcessingClient
from .models import CropResult, PrinterInfo, PrintResult, SheetFile, SheetPreview, UploadResult
from .http import HttpProcessingClient, decode_data_url, fetch_bytes, save_sheet

__all__ = [
    "ACCEPTED_FORMATS",
    "MAX_UPLOAD_BYTES",
    "ClientConfig",
    "ProcessingClient",
    "HttpProcessingClient",
    "CropResult",
    "PrinterInfo",
    "PrintResult",
    "SheetFile",
    "SheetPreview",
    "UploadResult",
    "decode_data_url",
    "fetch_bytes",
    "save_sheet",
]
