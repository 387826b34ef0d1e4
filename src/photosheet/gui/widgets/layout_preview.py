"""
Miniature sheet painter for a PaperLayoutSpec.
"""
from typing import Optional

from PySide6.QtCore import QRectF, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from photosheet.gui.styles.theme import get_colors
from photosheet.layout import PaperLayoutSpec, cell_boxes


class LayoutPreview(QWidget):
    """Paints the sheet outline and every cell of a layout, scaled to fit."""

    def __init__(self, spec: Optional[PaperLayoutSpec] = None, parent=None):
        super().__init__(parent)
        self._spec = spec
        self.setMinimumSize(150, 100)

    def sizeHint(self) -> QSize:
        return QSize(180, 130)

    def set_spec(self, spec: Optional[PaperLayoutSpec]) -> None:
        self._spec = spec
        self.update()

    def paintEvent(self, event):
        if self._spec is None:
            return
        C = get_colors()
        spec = self._spec
        margin = 6
        avail_w = self.width() - 2 * margin
        avail_h = self.height() - 2 * margin
        scale = min(avail_w / spec.sheet_width_px, avail_h / spec.sheet_height_px)
        sheet_w = spec.sheet_width_px * scale
        sheet_h = spec.sheet_height_px * scale
        ox = (self.width() - sheet_w) / 2
        oy = (self.height() - sheet_h) / 2

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(QPen(QColor(C.BORDER)))
        painter.setBrush(QColor("#ffffff"))
        painter.drawRect(QRectF(ox, oy, sheet_w, sheet_h))

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(C.PRIMARY))
        for box in cell_boxes(spec):
            painter.drawRect(QRectF(
                ox + box.left * scale,
                oy + box.top * scale,
                box.width * scale,
                box.height * scale,
            ))
        painter.end()
