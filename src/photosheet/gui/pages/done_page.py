"""
Final step: where the sheet went.
"""
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QLabel, QPushButton

from photosheet.gui.utils.helpers import format_size
from photosheet.workflow import WorkflowSession

from .base import StepPage


class DonePage(StepPage):
    openFolderRequested = Signal(object)  # Path

    def __init__(self, parent=None):
        super().__init__("All Done", "", parent)
        self.summary_label = QLabel()
        self.summary_label.setWordWrap(True)
        self.body.addStretch()
        self.body.addWidget(self.summary_label)
        self.open_btn = QPushButton("Open Folder")
        self.open_btn.clicked.connect(self._on_open)
        self.body.addWidget(self.open_btn)
        self.body.addStretch()
        self.reset_btn.hide()
        self.primary_btn.setText("New Photo")
        self._folder = None

    def _on_primary(self) -> None:
        self.resetRequested.emit()

    def _on_open(self) -> None:
        if self._folder is not None:
            self.openFolderRequested.emit(self._folder)

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        self.reset_btn.hide()
        lines = []
        if session.saved_path is not None:
            size = session.sheet_file.size_bytes if session.sheet_file else 0
            suffix = f" ({format_size(size)})" if size else ""
            lines.append(f"Saved {session.saved_path.name}{suffix} to {session.saved_path.parent}")
            self._folder = session.saved_path.parent
        elif session.sheet_file is not None:
            lines.append(f"Downloaded {session.sheet_file.filename}")
            self._folder = None
        else:
            self._folder = None
        if session.print_result is not None:
            result = session.print_result
            lines.append(result.message or f"Sent to printer ({result.status})")
        self.summary_label.setText("\n".join(lines))
        self.open_btn.setVisible(self._folder is not None)
