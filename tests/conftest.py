import os
import pytest
import sys
from pathlib import Path
from typing import List, Optional
from PIL import Image

# Run Qt headless when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import photosheet
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from photosheet.client import (  # noqa: E402
    CropResult,
    PrinterInfo,
    PrintResult,
    ProcessingClient,
    SheetFile,
    SheetPreview,
    UploadResult,
)

# 1x1 white PNG
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAIAAACQd1PeAAAADElEQVR4nGP4//8/AAX+Av4N70a4AAAAAElFTkSuQmCC"
)


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a portrait JPEG matching the 1200x1600 scenario."""
    img = Image.new("RGB", (1200, 1600), color="white")
    img_path = tmp_path / "portrait.jpg"
    img.save(img_path, format="JPEG")
    return img_path


@pytest.fixture
def sample_png(tmp_path: Path):
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


class FakeClient(ProcessingClient):
    """In-memory collaborator recording every call."""

    def __init__(self, natural_size=(1200, 1600)):
        self.natural_size = natural_size
        self.calls: List[tuple] = []
        self.fail_with: dict = {}
        self.printers: List[PrinterInfo] = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        error = self.fail_with.get(name)
        if error is not None:
            raise error

    def called(self, name) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def upload_image(self, path):
        self._record("upload_image", path)
        w, h = self.natural_size
        return UploadResult(image_id="img-1", natural_width=w, natural_height=h, face_detected=True)

    def apply_crop(self, image_id, crop, mode="passport", enhance_level=0.40):
        self._record("apply_crop", image_id, crop, mode, enhance_level)
        return CropResult(
            processed_image_id=f"{image_id}-p{self.called('apply_crop')}",
            processed_image=PNG_DATA_URL,
            before_image=PNG_DATA_URL,
            after_image=PNG_DATA_URL,
            face_confidence=0.9,
        )

    def preview_sheet(self, image_id, layout):
        self._record("preview_sheet", image_id, layout)
        return SheetPreview(preview_image=PNG_DATA_URL, photo_count=layout.photo_count)

    def download_sheet(self, image_id, layout):
        self._record("download_sheet", image_id, layout)
        return SheetFile(file_url=PNG_DATA_URL, filename="photo_sheet.png", size_bytes=70)

    def print_sheet(self, image_id, layout, printer_id=None, copies=1, captions=None):
        self._record("print_sheet", image_id, layout, printer_id, copies, captions)
        return PrintResult(status="sent", printer_used=printer_id or "default", message="Sent")

    def preview_caption_sheet(self, image_id, captions):
        self._record("preview_caption_sheet", image_id, captions)
        return SheetPreview(preview_image=PNG_DATA_URL, photo_count=2)

    def download_caption_sheet(self, image_id, captions):
        self._record("download_caption_sheet", image_id, captions)
        return SheetFile(file_url=PNG_DATA_URL, filename="polaroid_sheet.png", size_bytes=70)

    def list_printers(self) -> List[PrinterInfo]:
        self._record("list_printers")
        return list(self.printers)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def png_data_url() -> str:
    return PNG_DATA_URL
