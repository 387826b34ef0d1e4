"""
Persisted preferences for the PhotoSheet window.

Stored as one JSON object. Unreadable or malformed values are ignored
and the built-in defaults are used instead; the user is asked once at
startup whether a damaged file may be overwritten.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from photosheet.core.models.captions import AVAILABLE_FONTS, DEFAULT_FONT_ID
from photosheet.workflow import DEFAULT_ENHANCE_LEVEL

logger = logging.getLogger(__name__)


class SettingsStore(QObject):
    """JSON file of user preferences (service URL, folders, defaults, window state)."""

    apiUrlChanged = Signal(str)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None
        self._load()

    def _load(self) -> None:
        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
            except OSError as e:
                self._load_error = f"Settings file could not be read:\n{e}"
            else:
                if not isinstance(self.data, dict):
                    self._load_error = "Settings file does not contain an object"
        if self._load_error:
            self.data = {}
        self.data.setdefault("version", self.CURRENT_VERSION)

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def check_load_error(self) -> bool:
        """
        Ask whether a damaged settings file may be replaced with defaults.

        Must run once a QApplication exists. Returns False when the user
        declines, in which case the app should quit without touching the file.
        """
        if not self._load_error:
            return True

        from PySide6.QtWidgets import QMessageBox

        box = QMessageBox()
        box.setIcon(QMessageBox.Icon.Warning)
        box.setWindowTitle("PhotoSheet Settings")
        box.setText("Your saved preferences could not be loaded.")
        box.setInformativeText(f"{self._load_error}\n\nStart with default preferences?")
        box.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
        box.setDefaultButton(QMessageBox.StandardButton.Yes)
        if box.exec() != QMessageBox.StandardButton.Yes:
            return False
        self._save()
        self._load_error = None
        return True

    # ------------------------------------------------------------------
    # Processing service
    # ------------------------------------------------------------------

    def get_api_url(self) -> Optional[str]:
        """URL override for the processing service, None to use the environment."""
        val = self.data.get("api_url")
        if isinstance(val, str) and val.startswith(("http://", "https://")):
            return val
        return None

    def set_api_url(self, value: Optional[str]) -> None:
        if value:
            self.data["api_url"] = value
        else:
            self.data.pop("api_url", None)
        self._save()
        self.apiUrlChanged.emit(value or "")

    # ------------------------------------------------------------------
    # Sheet defaults
    # ------------------------------------------------------------------

    def get_download_dir(self) -> Optional[str]:
        val = self.data.get("download_dir")
        return val if isinstance(val, str) and val else None

    def set_download_dir(self, value: str) -> None:
        self._set("download_dir", value)

    def get_default_font(self) -> str:
        val = self.data.get("default_font")
        return val if val in AVAILABLE_FONTS else DEFAULT_FONT_ID

    def set_default_font(self, font_id: str) -> None:
        if font_id not in AVAILABLE_FONTS:
            logger.warning(f"Ignoring unknown font {font_id!r}")
            return
        self._set("default_font", font_id)

    def get_enhance_level(self) -> float:
        try:
            level = float(self.data.get("enhance_level", DEFAULT_ENHANCE_LEVEL))
        except (ValueError, TypeError):
            return DEFAULT_ENHANCE_LEVEL
        return level if 0.0 <= level <= 1.0 else DEFAULT_ENHANCE_LEVEL

    def set_enhance_level(self, level: float) -> None:
        self._set("enhance_level", max(0.0, min(1.0, float(level))))

    # ------------------------------------------------------------------
    # Window state
    # ------------------------------------------------------------------

    def get_window_geometry(self) -> Optional[str]:
        return self._get_hex("window_geometry")

    def set_window_geometry(self, geometry: str) -> None:
        self._set("window_geometry", geometry)

    def get_splitter_state(self) -> Optional[str]:
        return self._get_hex("splitter_state")

    def set_splitter_state(self, state: str) -> None:
        self._set("splitter_state", state)

    def get_dark_mode(self) -> bool:
        ui = self.data.get("ui")
        return bool(ui.get("dark_mode", False)) if isinstance(ui, dict) else False

    def set_dark_mode(self, enabled: bool) -> None:
        ui = self.data.get("ui")
        if not isinstance(ui, dict):
            ui = self.data["ui"] = {}
        ui["dark_mode"] = enabled
        self._save()

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _get_hex(self, key: str) -> Optional[str]:
        """Saved Qt state blob, None unless it is a valid hex string."""
        val = self.data.get(key)
        if not isinstance(val, str):
            return None
        try:
            bytes.fromhex(val)
        except ValueError:
            logger.warning(f"Ignoring malformed {key} in settings")
            return None
        return val

    def _set(self, key: str, value: Any) -> None:
        self.data[key] = value
        self._save()

    def _save(self) -> None:
        """Write through a sibling temp file so a crash never truncates the real one."""
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Could not save settings to {self.path}: {e}")
            temp_path.unlink(missing_ok=True)
