"""
Preview step: check the composed sheet, then download or print.
"""
from typing import List

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QSpinBox

from photosheet.client import PrinterInfo
from photosheet.gui.widgets.image_view import ImageView
from photosheet.workflow import WorkflowSession

from .base import StepPage

DEFAULT_PRINTER_LABEL = "Default printer"


class PreviewPage(StepPage):
    def __init__(self, parent=None):
        super().__init__("Preview", "", parent)

        self.warning_label = QLabel()
        self.warning_label.setObjectName("warningBanner")
        self.warning_label.setWordWrap(True)
        self.warning_label.hide()
        self.body.addWidget(self.warning_label)

        self.sheet_view = ImageView("Preview unavailable")
        self.body.addWidget(self.sheet_view, 1)

        self.info_label = QLabel()
        self.info_label.setObjectName("hint")
        self.body.addWidget(self.info_label)

        print_row = QHBoxLayout()
        print_row.addWidget(QLabel("Printer:"))
        self.printer_combo = QComboBox()
        self.printer_combo.addItem(DEFAULT_PRINTER_LABEL, None)
        print_row.addWidget(self.printer_combo, 1)
        print_row.addWidget(QLabel("Copies:"))
        self.copies_spin = QSpinBox()
        self.copies_spin.setRange(1, 99)
        print_row.addWidget(self.copies_spin)
        self.print_btn = QPushButton("Print")
        self.print_btn.clicked.connect(self._on_print)
        print_row.addWidget(self.print_btn)
        self.body.addLayout(print_row)

        self.primary_btn.setText("Download")

    def set_printers(self, printers: List[PrinterInfo]) -> None:
        current = self.printer_combo.currentData()
        self.printer_combo.clear()
        self.printer_combo.addItem(DEFAULT_PRINTER_LABEL, None)
        for printer in printers:
            self.printer_combo.addItem(printer.label, printer.id)
        index = self.printer_combo.findData(current)
        self.printer_combo.setCurrentIndex(max(index, 0))

    def _on_primary(self) -> None:
        # MainWindow adds the download folder
        self.request("download")

    def _on_print(self) -> None:
        self.request("print", printer_id=self.printer_combo.currentData(), copies=self.copies_spin.value())

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        self.warning_label.setText(session.preview_warning or "")
        self.warning_label.setVisible(bool(session.preview_warning))
        self.sheet_view.set_source(session.preview_image)
        layout = session.layout
        if layout is not None:
            self.info_label.setText(
                f"{layout.photo_count} photos on a {layout.sheet_label} sheet at {layout.dpi} DPI"
            )
        else:
            self.info_label.setText("")
        if session.printers:
            self.set_printers(session.printers)

    def set_busy(self, busy: bool) -> None:
        super().set_busy(busy)
        self.print_btn.setEnabled(not busy)
