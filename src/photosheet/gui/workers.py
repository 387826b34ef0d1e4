"""
Background threads for collaborator calls.

Workers only perform I/O. Results are handed back through signals and
applied to the workflow on the UI thread.
"""
import logging

from PySide6.QtCore import QThread, Signal

from photosheet.client import ProcessingClient, fetch_bytes
from photosheet.errors import PhotoSheetError
from photosheet.workflow import PendingCall, fetch_printers

logger = logging.getLogger(__name__)


class CollaboratorWorker(QThread):
    """Executes one PendingCall off the UI thread."""

    succeeded = Signal(object, object)  # PendingCall, result
    failed = Signal(object, object)     # PendingCall, PhotoSheetError

    def __init__(self, pending: PendingCall, client: ProcessingClient, parent=None):
        super().__init__(parent)
        self.pending = pending
        self.client = client

    def run(self):
        try:
            result = self.pending.execute(self.client)
        except PhotoSheetError as e:
            self.failed.emit(self.pending, e)
            return
        self.succeeded.emit(self.pending, result)


class PrinterListWorker(QThread):
    """Fetches the printer list; an unavailable listing yields []."""

    printers_ready = Signal(list)

    def __init__(self, client: ProcessingClient, parent=None):
        super().__init__(parent)
        self.client = client

    def run(self):
        self.printers_ready.emit(fetch_printers(self.client))


class ImageLoader(QThread):
    """
    Downloads a remote image.

    Emits raw bytes; the pixmap is built on the UI thread.
    """

    loaded = Signal(str, object)  # source, bytes
    failed = Signal(str, str)

    def __init__(self, source: str, timeout: float = 60.0, parent=None):
        super().__init__(parent)
        self.source = source
        self.timeout = timeout

    def run(self):
        try:
            data = fetch_bytes(self.source, timeout=self.timeout)
        except PhotoSheetError as e:
            logger.warning(f"Image download failed: {e}")
            self.failed.emit(self.source, str(e))
            return
        self.loaded.emit(self.source, data)
