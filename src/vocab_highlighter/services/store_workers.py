"""Workers that run store requests off the dispatcher's thread."""

import logging
from typing import Any, Callable, Dict

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from vocab_highlighter.core import VocabularyError

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Dict[str, Any]], Dict[str, Any]]


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal(int, object)  # request id, response dict


class StoreRequestWorker(QRunnable):
    """
    Worker that answers one dispatcher request in a background thread.

    Store errors become ``{"success": False, "message": ...}`` responses;
    the worker always emits exactly one result.
    """

    def __init__(self, request_id: int, handler: RequestHandler, request: Dict[str, Any]):
        super().__init__()
        self.request_id = request_id
        self.handler = handler
        self.request = request
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the store request in background thread."""
        try:
            response = self.handler(self.request)
        except VocabularyError as e:
            response = {"success": False, "message": str(e)}
        except Exception as e:
            # Catch any unexpected exceptions not handled by the store
            logger.exception("Unexpected error handling %r", self.request.get("action"))
            response = {"success": False, "message": f"Unexpected store error: {e}"}
        self.signals.finished.emit(self.request_id, response)
