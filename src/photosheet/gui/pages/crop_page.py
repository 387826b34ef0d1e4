"""
Crop step: position the photo inside the frame.
"""
import logging

from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton

from photosheet.gui.utils.helpers import load_local_pixmap
from photosheet.gui.widgets.crop_view import CropView
from photosheet.viewport import PASSPORT_FRAME
from photosheet.workflow import Variant, WorkflowSession

from .base import StepPage, centered, error_label, show_error

logger = logging.getLogger(__name__)


class CropPage(StepPage):
    def __init__(self, parent=None):
        super().__init__(
            "Crop",
            "Drag to position the face inside the frame. Scroll or use the buttons to zoom.",
            parent,
        )
        self._image_key = None

        self.view = CropView(PASSPORT_FRAME)
        self.view.zoomChanged.connect(self._on_zoom_changed)
        self.body.addLayout(centered(self.view))

        controls = QHBoxLayout()
        controls.addStretch()
        self.zoom_out_btn = QPushButton("−")
        self.zoom_out_btn.setFixedWidth(40)
        self.zoom_out_btn.clicked.connect(self.view.zoom_out)
        controls.addWidget(self.zoom_out_btn)
        self.zoom_label = QLabel("100%")
        controls.addWidget(self.zoom_label)
        self.zoom_in_btn = QPushButton("+")
        self.zoom_in_btn.setFixedWidth(40)
        self.zoom_in_btn.clicked.connect(self.view.zoom_in)
        controls.addWidget(self.zoom_in_btn)
        self.reset_view_btn = QPushButton("Reset View")
        self.reset_view_btn.clicked.connect(self.view.reset_view)
        controls.addWidget(self.reset_view_btn)
        controls.addStretch()
        self.body.addLayout(controls)

        self.face_label = QLabel()
        self.face_label.setObjectName("hint")
        self.body.addWidget(self.face_label)
        self.error = error_label()
        self.body.addWidget(self.error)

        self.primary_btn.setText("Crop Photo")

    def _on_zoom_changed(self, zoom: float) -> None:
        self.zoom_label.setText(f"{zoom * 100:.0f}%")

    def _on_primary(self) -> None:
        region = self.view.crop_region()
        if region is None:
            show_error(self.error, "The frame must overlap the photo.")
            return
        show_error(self.error, None)
        self.request("confirm_crop", crop=region)

    def refresh(self, session: WorkflowSession, can_go_back: bool) -> None:
        super().refresh(session, can_go_back)
        variant = session.variant or Variant.PASSPORT
        self.view.set_frame(variant.frame)
        self.primary_btn.setText("Crop Photo" if variant is Variant.POLAROID else "Crop & Enhance")

        image = session.image
        key = (session.generation, image.id) if image else None
        if image is None:
            self.view.clear_image()
        elif key != self._image_key:
            pixmap = load_local_pixmap(image.display_url)
            if pixmap.isNull():
                logger.warning(f"Could not display {image.display_url}")
            self.view.set_image(pixmap, image.natural_width, image.natural_height)
        self._image_key = key

        if session.face_detected is False:
            self.face_label.setText("No face was detected. You can still crop manually.")
        else:
            self.face_label.setText("")
        show_error(self.error, None)
