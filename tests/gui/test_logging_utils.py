"""Tests for routing log records to the GUI console."""
from __future__ import annotations

import logging
import queue
import threading

from photosheet.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler


class TestQueueHandler:
    """Records reach the queue as (message, level) tuples."""

    def test_records_forwarded(self):
        log_queue = queue.Queue()
        handler = attach_queue_handler(log_queue, "photosheet.test_queue")
        try:
            logging.getLogger("photosheet.test_queue.child").warning("No printer found")
            assert log_queue.get_nowait() == ("No printer found", "WARNING")
        finally:
            detach_queue_handler(handler, "photosheet.test_queue")

    def test_debug_below_threshold_dropped(self):
        log_queue = queue.Queue()
        handler = attach_queue_handler(log_queue, "photosheet.test_level", level=logging.INFO)
        try:
            logging.getLogger("photosheet.test_level").debug("noise")
            assert log_queue.empty()
        finally:
            detach_queue_handler(handler, "photosheet.test_level")

    def test_debug_shown_as_info(self):
        log_queue = queue.Queue()
        handler = attach_queue_handler(log_queue, "photosheet.test_debug", level=logging.DEBUG)
        try:
            logging.getLogger("photosheet.test_debug").debug("details")
            assert log_queue.get_nowait() == ("details", "INFO")
        finally:
            detach_queue_handler(handler, "photosheet.test_debug")

    def test_worker_thread_records(self):
        """Records logged off the UI thread still arrive."""
        log_queue = queue.Queue()
        handler = attach_queue_handler(log_queue, "photosheet.test_thread")
        try:
            worker = threading.Thread(
                target=lambda: logging.getLogger("photosheet.test_thread").info("uploaded")
            )
            worker.start()
            worker.join()
            assert log_queue.get_nowait() == ("uploaded", "INFO")
        finally:
            detach_queue_handler(handler, "photosheet.test_thread")

    def test_detach(self):
        log_queue = queue.Queue()
        handler = attach_queue_handler(log_queue, "photosheet.test_detach")
        detach_queue_handler(handler, "photosheet.test_detach")
        logging.getLogger("photosheet.test_detach").error("gone")
        assert log_queue.empty()
