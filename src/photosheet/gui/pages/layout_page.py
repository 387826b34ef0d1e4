"""
Layout step (identity photos): choose the sheet arrangement.
"""
from PySide6.QtWidgets import QButtonGroup, QHBoxLayout, QLabel, QRadioButton, QVBoxLayout

from photosheet.gui.widgets.layout_preview import LayoutPreview
from photosheet.layout import PaperType, available_layouts
from photosheet.workflow import WorkflowSession

from .base import StepPage


class LayoutPage(StepPage):
    def __init__(self, parent=None):
        super().__init__("Choose Layout", "How should the photos be arranged on the sheet?", parent)
        self.group = QButtonGroup(self)
        self.options = {}

        row = QHBoxLayout()
        row.addStretch()
        for spec in available_layouts(caption_print=False):
            col = QVBoxLayout()
            col.addWidget(LayoutPreview(spec))
            radio = QRadioButton(f"{spec.photo_count} photos ({spec.cols}×{spec.rows})")
            self.group.addButton(radio)
            col.addWidget(radio)
            col.addWidget(QLabel(f"{spec.sheet_label}, {spec.orientation.value}, {spec.dpi} DPI"))
            row.addLayout(col)
            self.options[spec.type] = radio
        row.addStretch()
        self.body.addStretch()
        self.body.addLayout(row)
        self.body.addStretch()

        self.options[PaperType.STANDARD].setChecked(True)
        self.primary_btn.setText("Create Sheet")

    def selected(self) -> PaperType:
        for paper_type, radio in self.options.items():
            if radio.isChecked():
                return paper_type
        return PaperType.STANDARD

    def _on_primary(self) -> None:
        self.request("choose_layout", layout=self.selected())

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        if session.layout is not None and session.layout.type in self.options:
            self.options[session.layout.type].setChecked(True)
