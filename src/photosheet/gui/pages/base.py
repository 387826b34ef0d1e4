"""
Base class for workflow step pages.
"""
from typing import Any, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from photosheet.gui.styles.theme import mark_primary
from photosheet.workflow import WorkflowSession


class StepPage(QWidget):
    """
    Title, hint, body and a footer with Back / Start Over / primary action.

    Pages never touch the workflow directly: they emit `requested` with a
    transition name and its parameters and MainWindow fires it.
    """

    requested = Signal(str, object)  # transition name, params dict
    backRequested = Signal()
    resetRequested = Signal()

    def __init__(self, title: str, hint: str = "", parent=None):
        super().__init__(parent)
        self._busy = False

        outer = QVBoxLayout(self)
        outer.setContentsMargins(32, 24, 32, 24)
        outer.setSpacing(12)

        self.title_label = QLabel(title)
        self.title_label.setObjectName("pageTitle")
        outer.addWidget(self.title_label)

        self.hint_label = QLabel(hint)
        self.hint_label.setObjectName("hint")
        self.hint_label.setWordWrap(True)
        self.hint_label.setVisible(bool(hint))
        outer.addWidget(self.hint_label)

        self.body = QVBoxLayout()
        self.body.setSpacing(12)
        outer.addLayout(self.body, 1)

        footer = QHBoxLayout()
        self.back_btn = QPushButton("Back")
        self.back_btn.clicked.connect(self.backRequested.emit)
        footer.addWidget(self.back_btn)

        self.reset_btn = QPushButton("Start Over")
        self.reset_btn.clicked.connect(self.resetRequested.emit)
        footer.addWidget(self.reset_btn)
        footer.addStretch()

        self.primary_btn = QPushButton("Continue")
        mark_primary(self.primary_btn)
        self.primary_btn.clicked.connect(self._on_primary)
        footer.addWidget(self.primary_btn)
        outer.addLayout(footer)

    def request(self, name: str, **params: Any) -> None:
        self.requested.emit(name, params)

    def _on_primary(self) -> None:
        """Override to emit the page's forward transition."""

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        """Sync widgets from the session; subclasses call super()."""
        self.back_btn.setVisible(can_go_back)
        self.reset_btn.setVisible(not session.is_empty)

    def set_busy(self, busy: bool) -> None:
        """Disable forward actions while a call is in flight."""
        self._busy = busy
        self.primary_btn.setEnabled(not busy and self.can_continue())

    def can_continue(self) -> bool:
        return True

    def update_primary(self) -> None:
        self.primary_btn.setEnabled(not self._busy and self.can_continue())


def error_label() -> QLabel:
    label = QLabel()
    label.setObjectName("fieldError")
    label.setWordWrap(True)
    label.setVisible(False)
    return label


def show_error(label: QLabel, message: Optional[str]) -> None:
    label.setText(message or "")
    label.setVisible(bool(message))


def centered(widget: QWidget) -> QHBoxLayout:
    row = QHBoxLayout()
    row.addStretch()
    row.addWidget(widget, 0, Qt.AlignmentFlag.AlignCenter)
    row.addStretch()
    return row
