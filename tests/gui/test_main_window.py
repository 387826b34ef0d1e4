"""
Integration tests for the main window.

The window runs against the in-memory FakeClient; collaborator calls still
go through CollaboratorWorker threads.
"""
import pytest

from photosheet.errors import CollaboratorError
from photosheet.gui.main_window import MainWindow
from photosheet.gui.models.settings import SettingsStore
from photosheet.workflow import Step


@pytest.fixture
def window(qtbot, tmp_path, fake_client):
    settings = SettingsStore(tmp_path / "settings.json")
    settings.set_download_dir(str(tmp_path / "sheets"))
    win = MainWindow(settings=settings, client=fake_client)
    qtbot.addWidget(win)
    yield win
    for worker in list(win._workers):
        worker.wait(2000)


def wait_for_step(qtbot, window, step):
    qtbot.waitUntil(lambda: window.machine.step is step and not window.machine.busy, timeout=5000)


def upload_and_choose(qtbot, window, sample_image, variant="passport"):
    window.pages[Step.UPLOAD].select_file(sample_image)
    wait_for_step(qtbot, window, Step.PAPER_TYPE)
    window.pages[Step.PAPER_TYPE].request("choose_paper", variant=variant)
    assert window.machine.step is Step.CROP


class TestMainWindow:
    def test_starts_on_upload(self, window):
        assert window.stack.currentWidget() is window.pages[Step.UPLOAD]
        assert not window.new_action.isEnabled()
        assert window.step_header.current_text() == "1. Upload"

    def test_passport_flow_to_done(self, qtbot, window, sample_image, tmp_path, fake_client):
        upload_and_choose(qtbot, window, sample_image)
        assert window.stack.currentWidget() is window.pages[Step.CROP]

        window.pages[Step.CROP].primary_btn.click()
        wait_for_step(qtbot, window, Step.ENHANCE)
        assert fake_client.called("apply_crop") == 1

        window.pages[Step.ENHANCE].primary_btn.click()
        assert window.machine.step is Step.LAYOUT_SELECT

        window.pages[Step.LAYOUT_SELECT].request("choose_layout", layout="standard")
        wait_for_step(qtbot, window, Step.PREVIEW)
        assert window.stack.currentWidget() is window.pages[Step.PREVIEW]

        window.pages[Step.PREVIEW].primary_btn.click()
        wait_for_step(qtbot, window, Step.DONE)
        saved = window.machine.session.saved_path
        assert saved is not None
        assert saved.parent == tmp_path / "sheets"

    def test_failure_reported_and_step_kept(self, qtbot, window, sample_image, fake_client, monkeypatch):
        reported = []
        monkeypatch.setattr(window, "_report_failure", lambda pending, error: reported.append(error))
        fake_client.fail_with["apply_crop"] = CollaboratorError("apply_crop", "offline")

        upload_and_choose(qtbot, window, sample_image)
        window.pages[Step.CROP].primary_btn.click()
        qtbot.waitUntil(lambda: bool(reported), timeout=5000)

        assert window.machine.step is Step.CROP
        assert isinstance(reported[0], CollaboratorError)
        assert window.machine.session.failed_transition == "confirm_crop"

    def test_back_and_reset(self, qtbot, window, sample_image):
        upload_and_choose(qtbot, window, sample_image)
        window.pages[Step.CROP].back_btn.click()
        assert window.machine.step is Step.PAPER_TYPE

        assert window.new_action.isEnabled()
        window.new_action.trigger()
        assert window.machine.step is Step.UPLOAD
        assert window.machine.session.is_empty

    def test_busy_request_rejected(self, qtbot, window, sample_image, fake_client):
        upload_and_choose(qtbot, window, sample_image)
        window.pages[Step.CROP].primary_btn.click()
        window._fire("confirm_crop", {"crop": None})
        wait_for_step(qtbot, window, Step.ENHANCE)
        assert fake_client.called("apply_crop") == 1

    def test_log_messages_reach_console(self, qtbot, window):
        window.machine.reset()
        qtbot.waitUntil(lambda: "reset" in window.console.text_edit.toPlainText(), timeout=3000)

    def test_close_saves_geometry(self, qtbot, window):
        window.show()
        qtbot.waitExposed(window)
        window.close()
        assert window.settings.get_window_geometry() is not None
        assert window.settings.get_splitter_state() is not None
