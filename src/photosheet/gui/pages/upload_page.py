"""
Upload step: choose a JPEG or PNG portrait.
"""
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFileDialog, QLabel

from photosheet.client import ClientConfig
from photosheet.errors import InvalidImageFileError
from photosheet.workflow import WorkflowSession, validate_upload_file

from .base import StepPage, error_label, show_error


class UploadPage(StepPage):
    def __init__(self, config: ClientConfig, parent=None):
        limit_mb = config.max_upload_bytes // (1024 * 1024)
        super().__init__(
            "Upload a Photo",
            f"Choose a clear, front-facing portrait. JPEG or PNG, up to {limit_mb} MB. "
            "You can also drop a file here.",
            parent,
        )
        self.config = config
        self._path: Optional[Path] = None
        self.setAcceptDrops(True)

        self.file_label = QLabel("No file selected")
        self.file_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.body.addStretch()
        self.body.addWidget(self.file_label)
        self.error = error_label()
        self.body.addWidget(self.error)
        self.body.addStretch()

        self.primary_btn.setText("Choose Photo…")

    def _on_primary(self) -> None:
        filename, _ = QFileDialog.getOpenFileName(
            self, "Choose Photo", str(Path.home()), "Images (*.jpg *.jpeg *.png)"
        )
        if filename:
            self.select_file(Path(filename))

    def select_file(self, path: Path) -> None:
        """Pre-check the file so obvious mistakes never reach the service."""
        try:
            candidate = validate_upload_file(path, self.config)
        except InvalidImageFileError as e:
            self._path = None
            self.file_label.setText("No file selected")
            show_error(self.error, str(e))
            return
        show_error(self.error, None)
        self._path = candidate.path
        self.file_label.setText(f"{candidate.path.name} ({candidate.width}×{candidate.height})")
        self.request("upload", path=candidate.path)

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        if session.is_empty:
            self._path = None
            self.file_label.setText("No file selected")
            show_error(self.error, None)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        urls = event.mimeData().urls()
        if urls and urls[0].isLocalFile() and not self._busy:
            self.select_file(Path(urls[0].toLocalFile()))
