"""
Paper type step.
"""
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout

from photosheet.layout import PaperType, layout_for
from photosheet.workflow import Variant, WorkflowSession

from .base import StepPage

PAPER_CHOICES = (
    (Variant.PASSPORT, "Passport / ID", "3.5 × 4.5 cm photos", PaperType.STANDARD),
    (Variant.POLAROID, "Polaroid", "Two captioned prints", PaperType.POLAROID),
)


class PaperPage(StepPage):
    def __init__(self, parent=None):
        super().__init__("Choose Paper Type", "What would you like to print?", parent)
        self.primary_btn.hide()
        self.buttons = {}

        row = QHBoxLayout()
        row.addStretch()
        for variant, title, subtitle, paper in PAPER_CHOICES:
            spec = layout_for(paper)
            col = QVBoxLayout()
            btn = QPushButton(title)
            btn.setMinimumSize(180, 120)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _=False, v=variant: self.request("choose_paper", variant=v))
            col.addWidget(btn)
            col.addWidget(QLabel(f"{subtitle}\n{spec.sheet_label} sheet"))
            row.addLayout(col)
            self.buttons[variant] = btn
        row.addStretch()
        self.body.addStretch()
        self.body.addLayout(row)
        self.body.addStretch()

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        for variant, btn in self.buttons.items():
            btn.setChecked(variant is session.variant)

    def set_busy(self, busy: bool) -> None:
        super().set_busy(busy)
        for btn in self.buttons.values():
            btn.setEnabled(not busy)
