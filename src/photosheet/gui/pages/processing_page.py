"""
Shown while the sheet is being composed.
"""
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QProgressBar

from photosheet.workflow import WorkflowSession

from .base import StepPage


class ProcessingPage(StepPage):
    def __init__(self, parent=None):
        super().__init__("Processing", "Creating your photo sheet…", parent)
        self.status_label = QLabel()
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.progress = QProgressBar()
        self.progress.setRange(0, 0)  # Indeterminate
        self.body.addStretch()
        self.body.addWidget(self.status_label)
        self.body.addWidget(self.progress)
        self.body.addStretch()
        self.primary_btn.hide()
        self.back_btn.setText("Cancel")

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        name = (session.pending or "").replace("_", " ")
        self.status_label.setText(f"Working: {name}" if name else "")
