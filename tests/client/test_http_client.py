"""
Tests for HttpProcessingClient.

The transport is mocked at urlopen; requests are inspected through the
Request object the client builds.
"""

import io
import json
import socket
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from photosheet.client import (
    ClientConfig,
    HttpProcessingClient,
    SheetFile,
    decode_data_url,
    fetch_bytes,
    save_sheet,
)
from photosheet.core.models import CaptionSet, CropRegion
from photosheet.errors import CollaboratorError, PrinterUnavailableError
from photosheet.layout import PaperType, layout_for

URLOPEN = "photosheet.client.http.urlopen"


def response(payload, raw=None):
    """Context-manager mock standing in for an HTTP response."""
    body = raw if raw is not None else json.dumps(payload).encode("utf-8")
    resp = MagicMock()
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


def http_error(code, payload=None):
    body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return HTTPError("http://test/x", code, "error", {}, io.BytesIO(body))


def sent_request(mock_urlopen):
    request = mock_urlopen.call_args[0][0]
    return request


def sent_json(mock_urlopen):
    return json.loads(sent_request(mock_urlopen).data.decode("utf-8"))


@pytest.fixture
def client():
    return HttpProcessingClient(ClientConfig(base_url="http://test:8000/", timeout_seconds=5))


@pytest.fixture
def crop():
    return CropRegion(0.1, 0.2, 0.5, 0.4, 1200, 1600, zoom=1.5)


class TestUpload:
    def test_multipart_body(self, client, sample_image):
        with patch(URLOPEN, return_value=response(
            {"success": True, "image_id": "abc", "dimensions": [1200, 1600], "face_detected": True}
        )) as mock_urlopen:
            result = client.upload_image(sample_image)

        assert result.image_id == "abc"
        assert (result.natural_width, result.natural_height) == (1200, 1600)
        assert result.face_detected is True

        request = sent_request(mock_urlopen)
        assert request.full_url == "http://test:8000/upload"
        assert request.get_method() == "POST"
        content_type = request.get_header("Content-type")
        assert content_type.startswith("multipart/form-data; boundary=")
        assert b'name="file"; filename="portrait.jpg"' in request.data
        assert b"Content-Type: image/jpeg" in request.data
        assert mock_urlopen.call_args[1]["timeout"] == 5

    def test_unreadable_file(self, client, tmp_path):
        with patch(URLOPEN) as mock_urlopen:
            with pytest.raises(CollaboratorError):
                client.upload_image(tmp_path / "gone.jpg")
        mock_urlopen.assert_not_called()

    def test_missing_dimensions(self, client, sample_image):
        with patch(URLOPEN, return_value=response({"image_id": "abc"})):
            with pytest.raises(CollaboratorError, match="dimensions"):
                client.upload_image(sample_image)


class TestProcessing:
    def test_apply_crop_payload(self, client, crop):
        with patch(URLOPEN, return_value=response(
            {"success": True, "processed_image": "data:image/png;base64,AAAA", "face_confidence": 0.8}
        )) as mock_urlopen:
            result = client.apply_crop("abc", crop, "studio", 0.6)

        payload = sent_json(mock_urlopen)
        assert payload["image_id"] == "abc"
        assert payload["mode"] == "studio"
        assert payload["enhance_level"] == 0.6
        assert payload["crop_data"]["naturalWidth"] == 1200
        assert payload["crop_data"]["zoom"] == 1.5
        # No new id in the response: the source id is reused
        assert result.processed_image_id == "abc"
        assert result.face_confidence == 0.8

    def test_preview_sheet(self, client):
        layout = layout_for(PaperType.STANDARD)
        with patch(URLOPEN, return_value=response(
            {"preview": "data:image/png;base64,AAAA", "layout_info": {"photo_count": 8}}
        )) as mock_urlopen:
            preview = client.preview_sheet("abc", layout)

        assert sent_request(mock_urlopen).full_url.endswith("/preview-sheet")
        payload = sent_json(mock_urlopen)
        assert payload["layout"] == "standard"
        assert payload["layout_spec"]["photo_count"] == 8
        assert preview.photo_count == 8

    def test_caption_sheet_payload(self, client):
        captions = CaptionSet("Hello", "World", "script_01")
        with patch(URLOPEN, return_value=response(
            {"file": "data:image/png;base64,AAAA", "filename": "polaroid.png"}
        )) as mock_urlopen:
            sheet = client.download_caption_sheet("abc", captions)

        assert sent_request(mock_urlopen).full_url.endswith("/polaroid/download")
        assert sent_json(mock_urlopen) == {
            "image_id": "abc", "text1": "Hello", "text2": "World", "font_name": "script_01"
        }
        assert sheet.filename == "polaroid.png"


class TestErrors:
    def test_http_error_keeps_status(self, client, crop):
        with patch(URLOPEN, side_effect=http_error(500, {"detail": "Processing crashed"})):
            with pytest.raises(CollaboratorError) as info:
                client.apply_crop("abc", crop)
        assert info.value.status == 500
        assert info.value.operation == "apply_crop"
        assert "Processing crashed" in str(info.value)
        assert info.value.retryable

    def test_connection_error(self, client):
        with patch(URLOPEN, side_effect=URLError("refused")):
            with pytest.raises(CollaboratorError, match="Connection failed"):
                client.preview_sheet("abc", layout_for("standard"))

    def test_timeout(self, client):
        with patch(URLOPEN, side_effect=socket.timeout("timed out")):
            with pytest.raises(CollaboratorError):
                client.list_printers()

    def test_invalid_json(self, client):
        with patch(URLOPEN, return_value=response(None, raw=b"<html>oops</html>")):
            with pytest.raises(CollaboratorError, match="not valid JSON"):
                client.preview_sheet("abc", layout_for("standard"))

    def test_success_false(self, client):
        with patch(URLOPEN, return_value=response({"success": False, "error": "No face"})):
            with pytest.raises(CollaboratorError, match="No face"):
                client.preview_sheet("abc", layout_for("standard"))

    def test_not_an_object(self, client):
        with patch(URLOPEN, return_value=response([1, 2])):
            with pytest.raises(CollaboratorError):
                client.download_sheet("abc", layout_for("standard"))


class TestPrinting:
    def test_print_payload(self, client):
        with patch(URLOPEN, return_value=response(
            {"status": "sent", "printer_used": "Office", "message": "Queued"}
        )) as mock_urlopen:
            result = client.print_sheet("abc", layout_for("custom"), printer_id="Office", copies=3)

        payload = sent_json(mock_urlopen)
        assert payload["printer"] == "Office"
        assert payload["copies"] == 3
        assert "text1" not in payload
        assert result.printer_used == "Office"

    def test_print_with_captions(self, client):
        with patch(URLOPEN, return_value=response({"status": "sent"})) as mock_urlopen:
            client.print_sheet("abc", layout_for("polaroid"), captions=CaptionSet("a", "b"))
        assert sent_json(mock_urlopen)["text1"] == "a"

    def test_503_means_no_printer(self, client):
        with patch(URLOPEN, side_effect=http_error(503)):
            with pytest.raises(PrinterUnavailableError) as info:
                client.print_sheet("abc", layout_for("standard"))
        assert info.value.fallback == "download"

    def test_no_printer_code(self, client):
        error = http_error(400, {"detail": {"code": "no_printer", "message": "Printer offline"}})
        with patch(URLOPEN, side_effect=error):
            with pytest.raises(PrinterUnavailableError, match="Printer offline"):
                client.print_sheet("abc", layout_for("standard"))

    def test_no_printer_status(self, client):
        with patch(URLOPEN, return_value=response({"status": "no_printer"})):
            with pytest.raises(PrinterUnavailableError):
                client.print_sheet("abc", layout_for("standard"))

    def test_503_elsewhere_is_collaborator_error(self, client):
        with patch(URLOPEN, side_effect=http_error(503)):
            with pytest.raises(CollaboratorError) as info:
                client.preview_sheet("abc", layout_for("standard"))
        assert info.value.status == 503

    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"printers": [{"id": "p1", "name": "Office", "is_default": True}]}, [("p1", "Office", True)]),
            ([{"name": "Lab"}], [("Lab", "Lab", False)]),
            ({"printers": ["Front Desk"]}, [("Front Desk", "Front Desk", False)]),
            ({}, []),
        ],
    )
    def test_list_printers(self, client, payload, expected):
        with patch(URLOPEN, return_value=response(payload)) as mock_urlopen:
            printers = client.list_printers()
        assert sent_request(mock_urlopen).get_method() == "GET"
        assert [(p.id, p.name, p.is_default) for p in printers] == expected


class TestDataUrls:
    def test_decode(self, png_data_url):
        mime, data = decode_data_url(png_data_url)
        assert mime == "image/png"
        assert data.startswith(b"\x89PNG")

    @pytest.mark.parametrize(
        "value",
        ["http://x/y.png", "data:image/png,raw", "data:image/png;base64", "data:image/png;base64,@@@"],
    )
    def test_decode_rejects(self, value):
        with pytest.raises(ValueError):
            decode_data_url(value)

    def test_fetch_data_url(self, png_data_url):
        assert fetch_bytes(png_data_url).startswith(b"\x89PNG")

    def test_fetch_remote(self):
        with patch(URLOPEN, return_value=response(None, raw=b"bytes")):
            assert fetch_bytes("http://test/a.png") == b"bytes"

    def test_fetch_remote_error(self):
        with patch(URLOPEN, side_effect=http_error(404)):
            with pytest.raises(CollaboratorError) as info:
                fetch_bytes("http://test/a.png")
        assert info.value.status == 404


class TestSaveSheet:
    def test_writes_file(self, tmp_path, png_data_url):
        sheet = SheetFile(file_url=png_data_url, filename="sheet.png")
        target = save_sheet(sheet, tmp_path / "out")
        assert target == tmp_path / "out" / "sheet.png"
        assert target.read_bytes().startswith(b"\x89PNG")

    def test_never_overwrites(self, tmp_path, png_data_url):
        sheet = SheetFile(file_url=png_data_url, filename="sheet.png")
        first = save_sheet(sheet, tmp_path)
        second = save_sheet(sheet, tmp_path)
        assert first.name == "sheet.png"
        assert second.name == "sheet_1.png"

    def test_strips_directories_from_name(self, tmp_path, png_data_url):
        sheet = SheetFile(file_url=png_data_url, filename="../../evil.png")
        assert save_sheet(sheet, tmp_path).parent == tmp_path
