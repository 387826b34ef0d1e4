"""
Routing of `photosheet` log records to the GUI console.

Records may be emitted on CollaboratorWorker threads; they are only put on a
queue here and drained on the UI thread by MainWindow.
"""
from __future__ import annotations

import logging
from queue import Queue
from typing import Optional

PACKAGE_LOGGER = "photosheet"


class QueueLogHandler(logging.Handler):
    """Puts (message, level name) tuples on a queue."""

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # The console has no DEBUG color; show it as INFO
            level = "INFO" if record.levelno <= logging.DEBUG else record.levelname
            self.log_queue.put((self.format(record), level))
        except Exception:
            self.handleError(record)


def attach_queue_handler(
    log_queue: Queue,
    logger_name: Optional[str] = PACKAGE_LOGGER,
    level: int = logging.INFO,
) -> QueueLogHandler:
    """
    Forward records from a logger (and its children) to log_queue.

    Lowers the logger's own level to `level` when it would otherwise
    filter those records out.

    Returns:
        The attached handler, for detach_queue_handler()
    """
    logger = logging.getLogger(logger_name)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    handler = QueueLogHandler(log_queue, level)
    logger.addHandler(handler)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = PACKAGE_LOGGER) -> None:
    logging.getLogger(logger_name).removeHandler(handler)
