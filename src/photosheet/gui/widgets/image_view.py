"""
Label that shows an image from a data URL, file path or remote URL.
"""
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QLabel, QSizePolicy

from photosheet.gui.utils.helpers import is_remote, load_local_pixmap, pixmap_from_bytes
from photosheet.gui.workers import ImageLoader


class ImageView(QLabel):
    """
    Aspect-preserving image label.

    Remote sources are fetched on an ImageLoader thread; a result for a
    source that has since been replaced is ignored.
    """

    def __init__(self, placeholder: str = "No image", parent=None):
        super().__init__(placeholder, parent)
        self._placeholder = placeholder
        self._source: Optional[str] = None
        self._pixmap = QPixmap()
        self._loader: Optional[ImageLoader] = None
        self.timeout = 60.0
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setMinimumSize(160, 160)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    @property
    def source(self) -> Optional[str]:
        return self._source

    def set_source(self, source: Optional[str]) -> None:
        if source == self._source:
            return
        self._source = source
        if is_remote(source):
            self._show(QPixmap())
            self.setText("Loading…")
            loader = ImageLoader(source, self.timeout, self)
            loader.loaded.connect(self._on_loaded)
            loader.failed.connect(self._on_failed)
            loader.finished.connect(loader.deleteLater)
            self._loader = loader
            loader.start()
            return
        self._show(load_local_pixmap(source))

    def pixmap_image(self) -> QPixmap:
        return self._pixmap

    def _on_loaded(self, source: str, data: bytes) -> None:
        if source == self._source:
            self._show(pixmap_from_bytes(data))

    def _on_failed(self, source: str, message: str) -> None:
        if source == self._source:
            self._show(QPixmap())
            self.setText(f"Image unavailable: {message}")

    def _show(self, pixmap: QPixmap) -> None:
        self._pixmap = pixmap
        if pixmap.isNull():
            self.clear()
            self.setText(self._placeholder)
            return
        self._rescale()

    def _rescale(self) -> None:
        if self._pixmap.isNull():
            return
        self.setPixmap(self._pixmap.scaled(
            self.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._rescale()
