"""Page Controller - per-page highlighting session."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

from bs4 import BeautifulSoup
from PySide6.QtCore import QObject, QTimer, Signal, Slot

from vocab_highlighter.coordinators.popup_controller import PopupController
from vocab_highlighter.services import (
    FAVORITES_CHANGED,
    HighlightEngine,
    HighlightMarker,
    PageEndpoint,
    StoreClient,
    normalize_word,
    parse_document,
)

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]


class PageSurface(Protocol):
    """What the controller needs from the widget displaying the page."""

    def render_document(self, html: str, base_path: Optional[Path] = None) -> None: ...

    def fill_popup(self, payload: Dict[str, Any]) -> None: ...


class PageController(QObject):
    """
    Owns one page's highlighting session.

    Responsibilities:
    - Fetch the favorite set and annotate the document
    - Re-run the scan whenever ``favoritesChanged`` arrives
    - Retry once, after a delay, if the page was not ready
    - Fill the popup with the record of the word it shows

    Signals:
    - highlighted: emitted with the number of markers after each pass
    """

    highlighted = Signal(int)

    def __init__(
        self,
        surface: PageSurface,
        client: StoreClient,
        endpoint: PageEndpoint,
        engine: HighlightEngine,
        popup: PopupController,
        reinit_delay_ms: int = 1000,
        scheduler: Optional[Scheduler] = None,
    ):
        super().__init__()

        self.surface = surface
        self.client = client
        self.endpoint = endpoint
        self.engine = engine
        self.popup = popup
        self.reinit_delay_ms = reinit_delay_ms
        self._schedule = scheduler if scheduler is not None else QTimer.singleShot

        # Page state
        self.document: Optional[BeautifulSoup] = None
        self.base_path: Optional[Path] = None
        self.favorites: frozenset = frozenset()
        self.markers: List[HighlightMarker] = []

        # Bumped on every initialize(); replies from older rounds are ignored
        self._generation = 0
        self._retry_scheduled = False

        self.endpoint.listen(self.handle_message)
        self.popup.popup_shown.connect(self._on_popup_shown)

    def load_document(self, html: str, base_path: Optional[Path] = None) -> None:
        """Replace the page content and highlight it."""
        self.popup.hide()
        self.document = parse_document(html)
        self.base_path = base_path
        self.markers = []
        self.surface.render_document(str(self.document), self.base_path)
        self.initialize()

    @Slot(Path)
    def handle_document_opened(self, path: Path):
        html = Path(path).read_text(encoding="utf-8", errors="replace")
        self.load_document(html, Path(path).parent)

    def initialize(self) -> None:
        """Fetch the favorite set and re-annotate the page."""
        if self.document is None:
            self._schedule_retry("document not loaded")
            return

        self._generation += 1
        generation = self._generation
        self.client.get_favorite_words(
            lambda records: self._on_favorites_loaded(generation, records),
            lambda message: self._on_favorites_failed(generation, message),
        )

    def handle_message(self, message: Dict[str, Any]) -> None:
        if message.get("action") == FAVORITES_CHANGED:
            logger.info("Favorites changed, re-highlighting page")
            self.initialize()

    def close(self) -> None:
        self.popup.hide()
        self.endpoint.close()

    def _on_favorites_loaded(self, generation: int, records: Optional[List[Dict[str, Any]]]) -> None:
        if generation != self._generation:
            logger.debug("Ignoring favorites from stale round %d", generation)
            return
        if self.document is None:
            return

        words = {normalize_word(record.get("word", "")) for record in records or []}
        words.discard("")
        self.favorites = frozenset(words)
        logger.info("Loaded %d favorite words", len(self.favorites))

        had_markers = bool(self.markers)
        self.markers = self.engine.highlight(self.document, self.favorites)
        if not self.markers and not had_markers:
            # Nothing to show and nothing to take away
            self.highlighted.emit(0)
            return

        # The old popup anchors into DOM that is about to be replaced
        self.popup.hide()
        self.surface.render_document(str(self.document), self.base_path)
        self.highlighted.emit(len(self.markers))

    def _on_favorites_failed(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        logger.error("Failed to load favorite words: %s", message)
        self._schedule_retry(message)

    def _schedule_retry(self, reason: str) -> None:
        if self._retry_scheduled:
            logger.warning("Page still not ready (%s), giving up", reason)
            return
        self._retry_scheduled = True
        logger.info("Page not ready (%s), retrying in %d ms", reason, self.reinit_delay_ms)
        self._schedule(self.reinit_delay_ms, self.initialize)

    @Slot(str)
    def _on_popup_shown(self, word: str):
        self.client.get_word(
            word,
            lambda record: self._fill_popup(word, record),
            lambda message: self._fill_popup(word, None, message),
        )

    def _fill_popup(self, word: str, record: Optional[Dict[str, Any]],
                    error: Optional[str] = None) -> None:
        # The popup may have moved on while the lookup was in flight
        if self.popup.current_word != word:
            return
        record = record or {}
        self.surface.fill_popup(
            {
                "word": record.get("word") or word,
                "meaning": record.get("meaning") or "",
                "image": record.get("image") or "",
                "occurrenceCount": record.get("occurrenceCount") or 0,
                "statusChecked": bool(record.get("statusChecked")),
                "notFound": not record,
                "error": error,
            }
        )
