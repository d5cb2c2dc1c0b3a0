"""Change Notifier - best-effort fan-out of favorite changes to open pages."""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from PySide6.QtCore import QObject, Signal, Slot

from vocab_highlighter.core import BroadcastFailure

logger = logging.getLogger(__name__)

FAVORITES_CHANGED = "favoritesChanged"

MessageHandler = Callable[[Dict[str, Any]], None]


class PageEndpoint(QObject):
    """Receiving end of broadcasts for one page.

    ``post`` may be called from any thread; the message is re-emitted through a
    Qt signal so the handler runs on the thread the endpoint lives in.
    """

    message_posted = Signal(object)

    def __init__(self, name: str, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.name = name
        self._handler: Optional[MessageHandler] = None
        self._closed = False
        self.message_posted.connect(self._on_message_posted)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def listen(self, handler: MessageHandler) -> None:
        self._handler = handler

    def close(self) -> None:
        self._closed = True
        self._handler = None

    def post(self, message: Dict[str, Any]) -> None:
        """Queue a message for the page.

        Raises:
            BroadcastFailure: If the page is closed or nobody listens.
        """
        if self._closed:
            raise BroadcastFailure(f"Page '{self.name}' is closed")
        if self._handler is None:
            raise BroadcastFailure(f"Page '{self.name}' has no listener")
        self.message_posted.emit(dict(message))

    @Slot(object)
    def _on_message_posted(self, message: Dict[str, Any]) -> None:
        # The page may have closed while the message was queued
        if self._handler is not None:
            self._handler(message)


class ChangeNotifier:
    """Broadcasts ``favoritesChanged`` to every registered page endpoint.

    Delivery is at-most-once with no acknowledgment; an unreachable page is
    logged and skipped so the triggering write never fails.
    """

    def __init__(self) -> None:
        self._endpoints: List[PageEndpoint] = []
        self._lock = threading.Lock()

    def register(self, endpoint: PageEndpoint) -> None:
        with self._lock:
            if endpoint not in self._endpoints:
                self._endpoints.append(endpoint)

    def unregister(self, endpoint: PageEndpoint) -> None:
        with self._lock:
            if endpoint in self._endpoints:
                self._endpoints.remove(endpoint)

    @property
    def endpoint_count(self) -> int:
        with self._lock:
            return len(self._endpoints)

    def notify_favorites_changed(self) -> int:
        return self.broadcast({"action": FAVORITES_CHANGED})

    def broadcast(self, message: Dict[str, Any]) -> int:
        """Post ``message`` to all endpoints. Returns how many accepted it."""
        with self._lock:
            endpoints = list(self._endpoints)

        delivered = 0
        for endpoint in endpoints:
            try:
                endpoint.post(message)
            except BroadcastFailure as e:
                logger.warning("Broadcast of %s skipped: %s", message.get("action"), e)
                continue
            except RuntimeError as e:
                # Underlying Qt object already deleted
                logger.warning("Dropping dead page endpoint: %s", e)
                self.unregister(endpoint)
                continue
            delivered += 1
        logger.debug("Broadcast %s reached %d/%d pages", message.get("action"), delivered, len(endpoints))
        return delivered
