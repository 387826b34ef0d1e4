"""Tests for the crop canvas and its pointer grab."""

import pytest
from PySide6.QtCore import QPoint, QPointF, Qt
from PySide6.QtGui import QPixmap
from PySide6.QtTest import QTest

from photosheet.gui.widgets.crop_view import CropView
from photosheet.viewport import PASSPORT_FRAME, POLAROID_FRAME


@pytest.fixture
def view(qtbot):
    widget = CropView(PASSPORT_FRAME)
    qtbot.addWidget(widget)
    pixmap = QPixmap(120, 160)
    pixmap.fill(Qt.GlobalColor.gray)
    widget.set_image(pixmap, 1200, 1600)
    widget.show()
    qtbot.waitExposed(widget)
    return widget


class TestPointerGrab:
    def test_press_installs_grab(self, view):
        QTest.mousePress(view, Qt.MouseButton.LeftButton, pos=QPoint(100, 100))
        assert view.grab.active
        assert view.engine.is_dragging
        view.end_drag()
        assert not view.grab.active
        assert not view.engine.is_dragging

    def test_no_grab_without_image(self, qtbot):
        widget = CropView(PASSPORT_FRAME)
        qtbot.addWidget(widget)
        widget.begin_drag(QPointF(10, 10))
        assert not widget.grab.active

    def test_drag_moves_image(self, view):
        view.begin_drag(QPointF(100, 100))
        view.drag_to(QPointF(50, 70))
        view.end_drag()
        assert view.engine.state.pan == (-50.0, -30.0)

    def test_escape_cancels(self, view):
        view.begin_drag(QPointF(100, 100))
        QTest.keyClick(view, Qt.Key.Key_Escape)
        assert not view.grab.active
        assert not view.engine.is_dragging

    def test_hide_releases(self, view):
        view.begin_drag(QPointF(100, 100))
        view.hide()
        assert not view.grab.active

    def test_release_is_idempotent(self, view):
        view.begin_drag(QPointF(100, 100))
        view.grab.release()
        view.grab.release()
        view.cancel_drag()
        assert not view.grab.active

    def test_new_image_cancels_drag(self, view):
        view.begin_drag(QPointF(100, 100))
        view.set_image(QPixmap(10, 10), 800, 600)
        assert not view.grab.active
        assert view.engine.natural_size == (800, 600)


class TestZoom:
    def test_buttons_and_keys(self, view, qtbot):
        with qtbot.waitSignal(view.zoomChanged, timeout=1000) as blocker:
            view.zoom_in()
        assert blocker.args == [pytest.approx(1.1)]
        QTest.keyClick(view, Qt.Key.Key_Minus)
        assert view.engine.zoom == pytest.approx(1.0)
        view.set_zoom(10)
        assert view.engine.zoom == PASSPORT_FRAME.zoom_max
        QTest.keyClick(view, Qt.Key.Key_0)
        assert view.engine.zoom == 1.0

    def test_crop_region(self, view):
        region = view.crop_region()
        assert region is not None
        assert region.pixel_aspect == pytest.approx(3.5 / 4.5, abs=1e-6)

    def test_crop_region_without_image(self, qtbot):
        widget = CropView(PASSPORT_FRAME)
        qtbot.addWidget(widget)
        assert widget.crop_region() is None


def test_switch_frame_keeps_image(view):
    view.set_frame(POLAROID_FRAME)
    assert view.frame is POLAROID_FRAME
    assert view.engine.natural_size == (1200, 1600)
    assert (view.width(), view.height()) == POLAROID_FRAME.canvas_size
