"""
Path utilities for handling dev vs production (frozen) file locations.

Dev mode: Uses local workspace/ directory
Frozen mode: Uses system-standard paths (AppData, Pictures)
"""
from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths

APP_NAME = "PhotoSheet"


def is_frozen() -> bool:
    """Check if running as a frozen (PyInstaller) application."""
    return getattr(sys, 'frozen', False) or hasattr(sys, '_MEIPASS')


def get_app_data_dir() -> Path:
    """
    Get the application data directory for internal state files.

    Frozen: ~/Library/Application Support/PhotoSheet (macOS)
            or %LOCALAPPDATA%/PhotoSheet (Windows)
    Dev: workspace/
    """
    if is_frozen():
        return Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.AppLocalDataLocation
        ))
    return Path.cwd() / "workspace"


def get_default_download_dir() -> Path:
    """
    Folder that receives downloaded photo sheets.

    Frozen: ~/Pictures/PhotoSheet
    Dev: workspace/sheets
    """
    if is_frozen():
        pictures = Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.PicturesLocation
        ))
        return pictures / APP_NAME
    return Path.cwd() / "workspace" / "sheets"


def get_settings_path() -> Path:
    """Get the path for storing GUI settings."""
    return get_app_data_dir() / "gui_settings.json"


def ensure_directories() -> None:
    """Create the app data and default download folders."""
    get_app_data_dir().mkdir(parents=True, exist_ok=True)
    get_default_download_dir().mkdir(parents=True, exist_ok=True)
