"""
Caption step (polaroid prints): two captions and a font.
"""
from PySide6.QtWidgets import QComboBox, QFormLayout, QHBoxLayout, QLineEdit, QPushButton

from photosheet.captions import MAX_CAPTION_LENGTH, copy_first_to_second, validate
from photosheet.core.models import CaptionSet
from photosheet.core.models.captions import AVAILABLE_FONTS, DEFAULT_FONT_ID
from photosheet.gui.widgets.image_view import ImageView
from photosheet.workflow import WorkflowSession

from .base import StepPage, error_label, show_error


class CaptionPage(StepPage):
    def __init__(self, default_font: str = DEFAULT_FONT_ID, parent=None):
        super().__init__(
            "Add Captions",
            f"Optional text under each photo, up to {MAX_CAPTION_LENGTH} characters.",
            parent,
        )
        self.default_font = default_font
        self._loaded_key = None

        self.photo_view = ImageView()
        self.body.addWidget(self.photo_view, 1)

        form = QFormLayout()
        self.text1_edit = QLineEdit()
        self.text1_edit.setPlaceholderText("Caption for the first photo")
        self.text1_error = error_label()
        self.text2_edit = QLineEdit()
        self.text2_edit.setPlaceholderText("Caption for the second photo")
        self.text2_error = error_label()
        form.addRow("Caption 1:", self.text1_edit)
        form.addRow("", self.text1_error)
        form.addRow("Caption 2:", self.text2_edit)
        form.addRow("", self.text2_error)

        self.font_combo = QComboBox()
        for font_id, name in AVAILABLE_FONTS.items():
            self.font_combo.addItem(name, font_id)
        form.addRow("Font:", self.font_combo)
        self.body.addLayout(form)

        actions = QHBoxLayout()
        self.copy_btn = QPushButton("Copy to Second")
        self.copy_btn.clicked.connect(self.copy_first_to_second)
        actions.addWidget(self.copy_btn)
        self.clear_btn = QPushButton("Clear Both")
        self.clear_btn.clicked.connect(self.clear_captions)
        actions.addWidget(self.clear_btn)
        actions.addStretch()
        self.body.addLayout(actions)

        self.text1_edit.textChanged.connect(self._revalidate)
        self.text2_edit.textChanged.connect(self._revalidate)
        self.primary_btn.setText("Preview Sheet")

    def captions(self) -> CaptionSet:
        return CaptionSet(
            self.text1_edit.text(),
            self.text2_edit.text(),
            self.font_combo.currentData() or DEFAULT_FONT_ID,
        )

    def set_captions(self, captions: CaptionSet) -> None:
        self.text1_edit.setText(captions.text1)
        self.text2_edit.setText(captions.text2)
        index = self.font_combo.findData(captions.font_id)
        self.font_combo.setCurrentIndex(max(index, 0))

    def copy_first_to_second(self) -> None:
        updated, _ = copy_first_to_second(self.captions())
        self.text2_edit.setText(updated.text2)

    def clear_captions(self) -> None:
        cleared = self.captions().cleared()
        self.text1_edit.setText(cleared.text1)
        self.text2_edit.setText(cleared.text2)

    def can_continue(self) -> bool:
        return validate(self.text1_edit.text()) is None and validate(self.text2_edit.text()) is None

    def _revalidate(self) -> None:
        for edit, label in ((self.text1_edit, self.text1_error), (self.text2_edit, self.text2_error)):
            issue = validate(edit.text())
            show_error(label, issue.message if issue else None)
        self.update_primary()

    def _on_primary(self) -> None:
        self.request("submit_captions", captions=self.captions())

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        self.photo_view.set_source(session.processed_image)
        # Keep what the user typed when a preview attempt failed
        key = (session.generation, session.processed_image_id)
        if key != self._loaded_key:
            captions = session.captions
            if captions.is_blank and captions.font_id == DEFAULT_FONT_ID:
                captions = CaptionSet(font_id=self.default_font)
            self.set_captions(captions)
            self._loaded_key = key
        self._revalidate()
