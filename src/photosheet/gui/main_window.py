"""
Main Window for the PhotoSheet GUI.
"""
import logging
import queue
from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QSplitter, QStackedWidget, QLabel, QStatusBar,
    QApplication, QMessageBox, QInputDialog, QFileDialog
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QKeySequence

from photosheet import __version__
from photosheet.client import ClientConfig, HttpProcessingClient, PrinterInfo, ProcessingClient
from photosheet.errors import (
    BusyError,
    CollaboratorError,
    PhotoSheetError,
    PrinterUnavailableError,
    TransitionError,
    ValidationError,
)
from photosheet.gui.models.settings import SettingsStore
from photosheet.gui.pages import (
    CaptionPage, CropPage, DonePage, EnhancePage, LayoutPage, PaperPage,
    PreviewPage, ProcessingPage, StepPage, UploadPage,
)
from photosheet.gui.styles.theme import apply_theme
from photosheet.gui.utils.helpers import open_folder_in_browser
from photosheet.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler
from photosheet.gui.utils.paths import get_default_download_dir, get_settings_path
from photosheet.gui.widgets.console_widget import ConsoleWidget
from photosheet.gui.widgets.step_header import StepHeader
from photosheet.gui.workers import CollaboratorWorker, PrinterListWorker
from photosheet.workflow import PendingCall, Step, WorkflowMachine
from photosheet.workflow.transitions import PREVIEW_TRANSITIONS

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        client: Optional[ProcessingClient] = None,
    ):
        super().__init__()

        self.settings = settings or SettingsStore(get_settings_path())
        self.config = ClientConfig.from_env(base_url=self.settings.get_api_url())
        self.client = client or HttpProcessingClient(self.config)
        self.machine = WorkflowMachine(self.config, enhance_level=self.settings.get_enhance_level())

        # Threads are kept referenced until they finish
        self._workers: List[object] = []
        self._printers_generation: Optional[int] = None

        self.setWindowTitle("PhotoSheet")
        self.resize(1100, 860)
        self.setMinimumSize(900, 720)

        self._build_menus()

        # Initialize Logging
        self.log_queue = queue.Queue()
        self.log_handler = attach_queue_handler(self.log_queue)
        self.log_timer = QTimer(self)
        self.log_timer.timeout.connect(self._drain_log_queue)
        self.log_timer.start(100)

        # Central Widget
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # --- Header ---
        header = QWidget()
        header.setObjectName("mainHeader")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(24, 12, 12, 0)
        title = QLabel("PhotoSheet")
        title.setObjectName("mainTitle")
        header_layout.addWidget(title)
        header_layout.addStretch()
        main_layout.addWidget(header)

        self.step_header = StepHeader()
        main_layout.addWidget(self.step_header)

        # --- Pages + console ---
        self.splitter = QSplitter(Qt.Orientation.Vertical)
        self.splitter.setHandleWidth(8)
        self.splitter.setChildrenCollapsible(False)

        self.stack = QStackedWidget()
        self.pages: Dict[Step, StepPage] = {
            Step.UPLOAD: UploadPage(self.config),
            Step.PAPER_TYPE: PaperPage(),
            Step.CROP: CropPage(),
            Step.ENHANCE: EnhancePage(),
            Step.CAPTION_TEXT: CaptionPage(self.settings.get_default_font()),
            Step.LAYOUT_SELECT: LayoutPage(),
            Step.PROCESSING: ProcessingPage(),
            Step.PREVIEW: PreviewPage(),
            Step.DONE: DonePage(),
        }
        for page in self.pages.values():
            page.requested.connect(self._fire)
            page.backRequested.connect(self._go_back)
            page.resetRequested.connect(self._reset)
            self.stack.addWidget(page)
        self.pages[Step.DONE].openFolderRequested.connect(self._open_folder)

        self.console = ConsoleWidget()
        self.splitter.addWidget(self.stack)
        self.splitter.addWidget(self.console)
        main_layout.addWidget(self.splitter)

        # Restore UI state with fallback for invalid settings
        geometry = self.settings.get_window_geometry()
        if geometry is None or not self.restoreGeometry(bytes.fromhex(geometry)):
            self._apply_default_geometry()
        splitter_state = self.settings.get_splitter_state()
        if splitter_state is None or not self.splitter.restoreState(bytes.fromhex(splitter_state)):
            # Console starts collapsed to its title bar
            self.splitter.setStretchFactor(0, 1)
            self.splitter.setStretchFactor(1, 0)
            self.splitter.setSizes([99999, 0])

        # --- Status Bar ---
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage(f"Service: {self.config.base_url}")

        is_dark = self.settings.get_dark_mode()
        self.dark_mode_action.setChecked(is_dark)
        self._apply_theme(is_dark)

        logger.info(f"PhotoSheet {__version__} using {self.config.base_url}")
        self._sync()

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("File")
        self.new_action = QAction("Start Over", self)
        self.new_action.setShortcut(QKeySequence.StandardKey.New)
        self.new_action.triggered.connect(self._reset)
        file_menu.addAction(self.new_action)
        file_menu.addSeparator()
        exit_action = QAction("Quit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        settings_menu = self.menuBar().addMenu("Settings")
        self.dark_mode_action = QAction("Dark Mode", self)
        self.dark_mode_action.setCheckable(True)
        self.dark_mode_action.triggered.connect(self._toggle_theme)
        settings_menu.addAction(self.dark_mode_action)
        settings_menu.addSeparator()

        folder_action = QAction("Download Folder…", self)
        folder_action.triggered.connect(self._choose_download_dir)
        settings_menu.addAction(folder_action)

        url_action = QAction("Processing Service…", self)
        url_action.triggered.connect(self._choose_service_url)
        settings_menu.addAction(url_action)

        help_menu = self.menuBar().addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _apply_default_geometry(self):
        """Apply sensible default window geometry when saved state is invalid."""
        self.resize(1100, 860)
        if QApplication.primaryScreen():
            screen_geo = QApplication.primaryScreen().availableGeometry()
            x = (screen_geo.width() - self.width()) // 2
            y = (screen_geo.height() - self.height()) // 2
            self.move(max(0, x), max(0, y))

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    @property
    def current_page(self) -> StepPage:
        return self.pages[self.machine.step]

    def _sync(self):
        """Show the page for the current step and refresh it from the session."""
        session = self.machine.session
        page = self.pages[session.step]
        self.stack.setCurrentWidget(page)
        self.step_header.set_position(session.step, session.variant)
        page.refresh(session, self.machine.can_go_back())
        page.set_busy(self.machine.busy)
        self.new_action.setEnabled(not session.is_empty)
        if session.step is Step.PREVIEW:
            self._load_printers()

    def _download_dir(self) -> Path:
        configured = self.settings.get_download_dir()
        return Path(configured) if configured else get_default_download_dir()

    def _fire(self, name: str, params: Optional[dict] = None):
        params = dict(params or {})
        if name == "download":
            params.setdefault("folder", self._download_dir())
        try:
            pending = self.machine.fire(name, **params)
        except BusyError as e:
            self.status_bar.showMessage(str(e), 5000)
            logger.warning(str(e))
            return
        except ValidationError as e:
            logger.warning(f"{name}: {e}")
            QMessageBox.warning(self, "Check Your Input", str(e))
            return
        except TransitionError as e:
            logger.error(f"{name}: {e}")
            return
        if pending is not None:
            if name == "reapply_enhancement":
                self._remember_enhance_level(pending.args["enhance_level"])
            self._start(pending)
        self._sync()

    def _remember_enhance_level(self, level: float):
        self.machine.default_enhance_level = level
        self.settings.set_enhance_level(level)

    def _start(self, pending: PendingCall):
        worker = CollaboratorWorker(pending, self.client, self)
        worker.succeeded.connect(self._on_call_succeeded)
        worker.failed.connect(self._on_call_failed)
        self._track(worker)
        self.status_bar.showMessage(f"Working: {pending.operation}…")
        worker.start()

    def _track(self, worker):
        self._workers.append(worker)

        def _finished():
            if worker in self._workers:
                self._workers.remove(worker)
            worker.deleteLater()

        worker.finished.connect(_finished)

    def _on_call_succeeded(self, pending: PendingCall, result):
        try:
            applied = self.machine.complete(pending, result)
        except CollaboratorError as e:
            self._sync()
            self._report_failure(pending, e)
            return
        if applied:
            self.status_bar.showMessage("Ready", 3000)
            self._sync()

    def _on_call_failed(self, pending: PendingCall, error: PhotoSheetError):
        if not self.machine.fail(pending, error):
            return
        self._sync()
        self._report_failure(pending, error)

    def _report_failure(self, pending: PendingCall, error: PhotoSheetError):
        self.status_bar.showMessage("Request failed", 5000)

        if isinstance(error, PrinterUnavailableError):
            answer = QMessageBox.question(
                self,
                "No Printer Available",
                f"{error}\n\nDownload the sheet instead?",
            )
            if answer == QMessageBox.StandardButton.Yes:
                self._fire(error.fallback)
            return

        msg = QMessageBox(self)
        msg.setIcon(QMessageBox.Icon.Warning)
        msg.setWindowTitle("Something Went Wrong")
        msg.setText(str(error))
        retry_btn = None
        if getattr(error, "retryable", False):
            retry_btn = msg.addButton("Retry", QMessageBox.ButtonRole.AcceptRole)
        fallback_btn = None
        if pending.name in PREVIEW_TRANSITIONS and self.machine.session.processed_image:
            fallback_btn = msg.addButton("Use Processed Photo", QMessageBox.ButtonRole.ActionRole)
        msg.addButton(QMessageBox.StandardButton.Cancel)
        msg.exec()

        clicked = msg.clickedButton()
        if retry_btn is not None and clicked == retry_btn:
            self._retry()
        elif fallback_btn is not None and clicked == fallback_btn:
            self._fire("use_processed_photo")

    def _retry(self):
        try:
            pending = self.machine.retry()
        except TransitionError as e:
            logger.error(f"Retry failed: {e}")
            return
        self._start(pending)
        self._sync()

    def _go_back(self):
        try:
            self.machine.back()
        except TransitionError as e:
            logger.warning(str(e))
            return
        self._sync()

    def _reset(self):
        self.machine.reset()
        self.status_bar.showMessage("Started over", 3000)
        self._sync()

    def _load_printers(self):
        generation = self.machine.session.generation
        if self._printers_generation == generation:
            return
        self._printers_generation = generation
        worker = PrinterListWorker(self.client, self)
        worker.printers_ready.connect(
            lambda printers, g=generation: self._on_printers(g, printers)
        )
        self._track(worker)
        worker.start()

    def _on_printers(self, generation: int, printers: List[PrinterInfo]):
        session = self.machine.session
        if generation != session.generation:
            return
        session.printers = list(printers)
        preview = self.pages[Step.PREVIEW]
        preview.set_printers(session.printers)

    def _open_folder(self, folder: Path):
        success, error = open_folder_in_browser(folder)
        if not success:
            QMessageBox.warning(self, "Cannot Open Folder", error or str(folder))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _toggle_theme(self, checked: bool):
        """Handle dark mode toggle."""
        self._apply_theme(checked)
        self.settings.set_dark_mode(checked)

    def _apply_theme(self, is_dark: bool):
        apply_theme(QApplication.instance(), is_dark)
        self.console.update_theme()
        self.update()

    def _choose_download_dir(self):
        folder = QFileDialog.getExistingDirectory(self, "Download Folder", str(self._download_dir()))
        if folder:
            self.settings.set_download_dir(folder)
            logger.info(f"Sheets will be saved to {folder}")

    def _choose_service_url(self):
        url, ok = QInputDialog.getText(
            self, "Processing Service", "Service URL:", text=self.config.base_url
        )
        if not ok:
            return
        try:
            config = ClientConfig.from_env(base_url=url.strip() or None)
        except ValueError as e:
            QMessageBox.warning(self, "Invalid URL", str(e))
            return
        self.settings.set_api_url(url.strip() or None)
        self.config = config
        self.client = HttpProcessingClient(config)
        self.machine.config = config
        self._printers_generation = None
        self.status_bar.showMessage(f"Service: {config.base_url}")
        logger.info(f"Processing service set to {config.base_url}")

    def _show_about(self):
        QMessageBox.about(
            self,
            "About PhotoSheet",
            f"<h3>PhotoSheet</h3><p>Version {__version__}</p>"
            "<p>Crop portraits and lay them out on printable photo sheets.</p>",
        )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _drain_log_queue(self):
        while True:
            try:
                msg = self.log_queue.get_nowait()
                if isinstance(msg, tuple) and len(msg) == 2:
                    text, level = msg
                    self.console.append_log(level, text)
                else:
                    self.console.append_log("INFO", str(msg))
                self.log_queue.task_done()
            except queue.Empty:
                break

    def closeEvent(self, event):
        """Save UI state on close."""
        for worker in list(self._workers):
            worker.wait(int(self.config.timeout_seconds * 1000))
        self.settings.set_window_geometry(self.saveGeometry().toHex().data().decode())
        self.settings.set_splitter_state(self.splitter.saveState().toHex().data().decode())
        self.log_timer.stop()
        detach_queue_handler(self.log_handler)
        super().closeEvent(event)
