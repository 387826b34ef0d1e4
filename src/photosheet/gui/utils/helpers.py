"""
Helper utilities for the PhotoSheet GUI.
"""
import logging
import platform
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from PySide6.QtCore import QUrl
from PySide6.QtGui import QPixmap

from photosheet.client import decode_data_url

logger = logging.getLogger(__name__)


def open_folder_in_browser(folder_path: Path) -> Tuple[bool, Optional[str]]:
    """
    Open a folder in the system's file browser.

    Args:
        folder_path: Path to the folder to open

    Returns:
        Tuple of (success: bool, error_message: Optional[str])
    """
    if not folder_path.exists():
        return False, f"Folder does not exist: {folder_path}"

    if not folder_path.is_dir():
        return False, f"Path is not a directory: {folder_path}"

    system = platform.system()
    try:
        if system == "Darwin":  # macOS
            subprocess.Popen(["open", str(folder_path)])
        elif system == "Windows":
            subprocess.Popen(["explorer", str(folder_path)])
        else:  # Linux
            subprocess.Popen(["xdg-open", str(folder_path)])
        return True, None
    except FileNotFoundError:
        return False, f"File browser command not found for {system}"
    except PermissionError:
        return False, f"Permission denied when opening folder: {folder_path}"
    except OSError as e:
        return False, f"Failed to open folder: {e}"


def is_remote(source: Optional[str]) -> bool:
    """True for http(s) image sources, which must be fetched off the UI thread."""
    return bool(source) and source.startswith(("http://", "https://"))


def pixmap_from_bytes(data: bytes) -> QPixmap:
    pixmap = QPixmap()
    if not pixmap.loadFromData(data):
        logger.warning("Received image data that could not be decoded")
    return pixmap


def load_local_pixmap(source: Optional[str]) -> QPixmap:
    """
    Pixmap for a data URL, file URL or plain file path.

    Remote URLs return a null pixmap; use an ImageLoader for those.
    """
    if not source or is_remote(source):
        return QPixmap()
    if source.startswith("data:"):
        try:
            return pixmap_from_bytes(decode_data_url(source)[1])
        except ValueError as e:
            logger.warning(f"Could not decode image: {e}")
            return QPixmap()
    path = QUrl(source).toLocalFile() if source.startswith("file:") else source
    return QPixmap(path)


def format_size(size_bytes: int) -> str:
    """Human readable byte count."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"
