"""
Enhancement step (identity photos): compare before/after, adjust and accept.
"""
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QSlider, QVBoxLayout

from photosheet.gui.widgets.image_view import ImageView
from photosheet.workflow import PROCESSING_MODES, WorkflowSession

from .base import StepPage

MODE_LABELS = {"passport": "Passport (plain background)", "studio": "Studio"}


class EnhancePage(StepPage):
    def __init__(self, parent=None):
        super().__init__("Enhance", "Compare the result and adjust the enhancement if needed.", parent)
        self._loaded_key = None

        images = QHBoxLayout()
        for attr, caption in (("before_view", "Before"), ("after_view", "After")):
            col = QVBoxLayout()
            col.addWidget(QLabel(caption), 0, Qt.AlignmentFlag.AlignHCenter)
            view = ImageView()
            setattr(self, attr, view)
            col.addWidget(view, 1)
            images.addLayout(col)
        self.body.addLayout(images, 1)

        self.confidence_label = QLabel()
        self.confidence_label.setObjectName("hint")
        self.body.addWidget(self.confidence_label)

        controls = QHBoxLayout()
        controls.addWidget(QLabel("Mode:"))
        self.mode_combo = QComboBox()
        for mode in PROCESSING_MODES:
            self.mode_combo.addItem(MODE_LABELS.get(mode, mode), mode)
        controls.addWidget(self.mode_combo)
        controls.addSpacing(16)
        controls.addWidget(QLabel("Enhancement:"))
        self.level_slider = QSlider(Qt.Orientation.Horizontal)
        self.level_slider.setRange(0, 100)
        self.level_slider.valueChanged.connect(self._on_level_changed)
        controls.addWidget(self.level_slider, 1)
        self.level_label = QLabel("40%")
        controls.addWidget(self.level_label)
        self.apply_btn = QPushButton("Re-apply")
        self.apply_btn.clicked.connect(self._on_reapply)
        controls.addWidget(self.apply_btn)
        self.body.addLayout(controls)

        self.primary_btn.setText("Use This Photo")

    @property
    def enhance_level(self) -> float:
        return self.level_slider.value() / 100

    @property
    def mode(self) -> str:
        return self.mode_combo.currentData()

    def _on_level_changed(self, value: int) -> None:
        self.level_label.setText(f"{value}%")

    def _on_reapply(self) -> None:
        self.request("reapply_enhancement", mode=self.mode, enhance_level=self.enhance_level)

    def _on_primary(self) -> None:
        self.request("accept_enhancement")

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        self.before_view.set_source(session.before_image)
        self.after_view.set_source(session.after_image or session.processed_image)
        key = (session.generation, session.processed_image_id)
        if key != self._loaded_key:
            index = self.mode_combo.findData(session.processing_mode)
            if index >= 0:
                self.mode_combo.setCurrentIndex(index)
            self.level_slider.setValue(round(session.enhance_level * 100))
            self._loaded_key = key
        if session.face_confidence is not None:
            self.confidence_label.setText(f"Face confidence: {session.face_confidence:.0%}")
        else:
            self.confidence_label.setText("")

    def set_busy(self, busy: bool) -> None:
        super().set_busy(busy)
        self.apply_btn.setEnabled(not busy)
