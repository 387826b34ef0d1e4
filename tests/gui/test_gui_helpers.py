"""Tests for GUI helper functions."""
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from photosheet.gui.utils.helpers import (
    format_size,
    is_remote,
    load_local_pixmap,
    open_folder_in_browser,
)


class TestOpenFolder(unittest.TestCase):
    def test_missing_folder(self):
        success, error = open_folder_in_browser(Path("/nonexistent/photosheet/folder"))
        self.assertFalse(success)
        self.assertIn("does not exist", error)

    def test_file_is_not_a_folder(self):
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "sheet.png"
            path.write_bytes(b"x")
            success, error = open_folder_in_browser(path)
        self.assertFalse(success)
        self.assertIn("not a directory", error)


@pytest.mark.parametrize(
    "size, expected",
    [(512, "512 B"), (2048, "2.0 KB"), (3 * 1024 * 1024, "3.0 MB")],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("http://host/a.png", True),
        ("https://host/a.png", True),
        ("data:image/png;base64,AAAA", False),
        ("/tmp/a.png", False),
        (None, False),
        ("", False),
    ],
)
def test_is_remote(source, expected):
    assert is_remote(source) is expected


class TestLoadLocalPixmap:
    def test_data_url(self, qtbot, png_data_url):
        pixmap = load_local_pixmap(png_data_url)
        assert not pixmap.isNull()
        assert (pixmap.width(), pixmap.height()) == (1, 1)

    def test_file_url_and_path(self, qtbot, sample_png):
        assert load_local_pixmap(sample_png.resolve().as_uri()).width() == 200
        assert load_local_pixmap(str(sample_png)).height() == 100

    def test_unusable_sources(self, qtbot):
        assert load_local_pixmap(None).isNull()
        assert load_local_pixmap("http://host/a.png").isNull()
        assert load_local_pixmap("data:image/png;base64,@@@").isNull()
