"""
Crop canvas: paints the viewport and feeds pointer input to a ViewportEngine.

Dragging uses a PointerGrab, an application-wide event filter that is only
installed while a drag is active. It is removed on button release, on
Escape, when the window loses focus and when the view is hidden, so no
global filter outlives the interaction that created it.
"""
import logging
from typing import Optional

from PySide6.QtCore import QEvent, QObject, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen, QPixmap
from PySide6.QtWidgets import QApplication, QSizePolicy, QWidget

from photosheet.core.models import CropRegion
from photosheet.errors import PhotoSheetError
from photosheet.gui.styles.theme import get_colors
from photosheet.viewport import FrameSpec, Rect, ViewportEngine

logger = logging.getLogger(__name__)


def _qrect(rect: Rect) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


class PointerGrab(QObject):
    """
    Application-wide mouse capture for one drag.

    Routes mouse moves and the release to the owning CropView even when
    the pointer leaves the widget. Use install()/release(); release() is
    idempotent.
    """

    def __init__(self, view: "CropView"):
        super().__init__(view)
        self._view = view
        self._installed = False

    @property
    def active(self) -> bool:
        return self._installed

    def install(self) -> None:
        app = QApplication.instance()
        if app is None or self._installed:
            return
        app.installEventFilter(self)
        self._installed = True

    def release(self) -> None:
        if not self._installed:
            return
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        self._installed = False

    def eventFilter(self, watched, event) -> bool:
        kind = event.type()
        if kind == QEvent.Type.MouseMove:
            local = self._view.mapFromGlobal(event.globalPosition())
            self._view.drag_to(local)
            return True
        if kind == QEvent.Type.MouseButtonRelease and event.button() == Qt.MouseButton.LeftButton:
            self._view.end_drag()
            return True
        if kind == QEvent.Type.KeyPress and event.key() == Qt.Key.Key_Escape:
            self._view.cancel_drag()
            return True
        if kind == QEvent.Type.ApplicationDeactivate:
            self._view.cancel_drag()
        return False


class CropView(QWidget):
    """Interactive crop canvas for one frame."""

    zoomChanged = Signal(float)
    viewportChanged = Signal()

    def __init__(self, frame: FrameSpec, parent=None):
        super().__init__(parent)
        self._pixmap = QPixmap()
        self.engine = ViewportEngine(frame)
        self.grab = PointerGrab(self)

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setFixedSize(*frame.canvas_size)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    @property
    def frame(self) -> FrameSpec:
        return self.engine.frame

    def set_frame(self, frame: FrameSpec) -> None:
        """Switch frame (paper type change); keeps the current image."""
        if frame is self.engine.frame:
            return
        self.cancel_drag()
        natural = self.engine.natural_size
        self.engine = ViewportEngine(frame)
        self.setFixedSize(*frame.canvas_size)
        if natural is not None:
            self.engine.set_image(*natural)
        self._notify()

    def set_image(self, pixmap: QPixmap, natural_width: int, natural_height: int) -> None:
        """Show a new image and reset the viewport."""
        self.cancel_drag()
        self._pixmap = pixmap
        self.engine.set_image(natural_width, natural_height)
        self._notify()

    def clear_image(self) -> None:
        self.cancel_drag()
        self._pixmap = QPixmap()
        self.engine.clear_image()
        self._notify()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def zoom_in(self) -> None:
        self.engine.zoom_in()
        self._notify()

    def zoom_out(self) -> None:
        self.engine.zoom_out()
        self._notify()

    def set_zoom(self, zoom: float) -> None:
        self.engine.on_zoom_change(zoom)
        self._notify()

    def reset_view(self) -> None:
        self.engine.reset()
        self._notify()

    def crop_region(self) -> Optional[CropRegion]:
        """Current crop, or None (logged) when it cannot be computed."""
        try:
            return self.engine.compute_crop_region()
        except PhotoSheetError as e:
            logger.warning(f"Cannot compute crop: {e}")
            return None

    # ------------------------------------------------------------------
    # Drag lifecycle
    # ------------------------------------------------------------------

    def begin_drag(self, pos: QPointF) -> None:
        if not self.engine.loaded:
            return
        self.engine.on_drag_start((pos.x(), pos.y()))
        self.grab.install()
        self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def drag_to(self, pos: QPointF) -> None:
        if not self.engine.is_dragging:
            return
        self.engine.on_drag_move((pos.x(), pos.y()))
        self._notify(zoom=False)

    def end_drag(self) -> None:
        self.grab.release()
        if self.engine.is_dragging:
            self.engine.on_drag_end()
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def cancel_drag(self) -> None:
        self.grab.release()
        if self.engine.is_dragging:
            self.engine.on_drag_cancel()
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.setFocus()
            self.begin_drag(event.position())
            event.accept()
            return
        super().mousePressEvent(event)

    def wheelEvent(self, event):
        delta = event.angleDelta().y()
        if delta > 0:
            self.zoom_in()
        elif delta < 0:
            self.zoom_out()
        event.accept()

    def keyPressEvent(self, event):
        key = event.key()
        if key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.zoom_in()
        elif key == Qt.Key.Key_Minus:
            self.zoom_out()
        elif key == Qt.Key.Key_0:
            self.reset_view()
        else:
            super().keyPressEvent(event)

    def focusOutEvent(self, event):
        self.cancel_drag()
        super().focusOutEvent(event)

    def hideEvent(self, event):
        self.cancel_drag()
        super().hideEvent(event)

    def resizeEvent(self, event):
        self.engine.set_container_size(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        C = get_colors()
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(C.CANVAS))

        image_rect = self.engine.image_rect()
        if image_rect is not None and not self._pixmap.isNull():
            painter.drawPixmap(_qrect(image_rect), self._pixmap, QRectF(self._pixmap.rect()))

        # Dim everything outside the frame
        frame_rect = _qrect(self.engine.frame_rect())
        mask = QPainterPath()
        mask.setFillRule(Qt.FillRule.OddEvenFill)
        mask.addRect(QRectF(self.rect()))
        mask.addRect(frame_rect)
        painter.fillPath(mask, QColor(C.CROP_MASK))

        pen = QPen(QColor(C.CROP_FRAME))
        pen.setWidth(2)
        painter.setPen(pen)
        painter.drawRect(frame_rect)
        painter.end()

    def _notify(self, zoom: bool = True) -> None:
        if zoom:
            self.zoomChanged.emit(self.engine.zoom)
        self.viewportChanged.emit()
        self.update()
