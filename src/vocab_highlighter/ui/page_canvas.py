"""Page Canvas - Renders a web page with word highlights using QWebEngineView."""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QVBoxLayout, QWidget

from vocab_highlighter.coordinators.popup_controller import AnchorRect

# Template directory
TEMPLATES_DIR = Path(__file__).parent / "assets"

QWEBCHANNEL_SCRIPT = "qrc:///qtwebchannel/qwebchannel.js"

_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)


class PageBridge(QObject):
    """Receives DOM events from the page script and re-emits them as signals."""

    marker_entered = Signal(int, str, float, float, float, float)
    marker_left = Signal(int)
    popup_entered = Signal()
    popup_left = Signal()
    document_clicked = Signal(int, int)  # marker id, 1 when inside the popup
    close_requested = Signal()

    @Slot(int, str, float, float, float, float)
    def markerEntered(self, marker_id, word, left, top, width, height):  # noqa: N802 - JS name
        self.marker_entered.emit(marker_id, word, left, top, width, height)

    @Slot(int)
    def markerLeft(self, marker_id):  # noqa: N802
        self.marker_left.emit(marker_id)

    @Slot()
    def popupEntered(self):  # noqa: N802
        self.popup_entered.emit()

    @Slot()
    def popupLeft(self):  # noqa: N802
        self.popup_left.emit()

    @Slot(int, int)
    def documentClicked(self, marker_id, inside_popup):  # noqa: N802
        self.document_clicked.emit(marker_id, 1 if inside_popup else 0)

    @Slot()
    def closeRequested(self):  # noqa: N802
        self.close_requested.emit()


class PageCanvas(QWidget):
    """Displays an annotated document and hosts the word detail popup."""

    def __init__(self):
        super().__init__()

        # Create layout
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Create web view for rendering
        self.web_view = QWebEngineView()
        layout.addWidget(self.web_view)

        # Bridge for marker/popup events coming from the page
        self.bridge = PageBridge(self)
        self.channel = QWebChannel(self.web_view.page())
        self.channel.registerObject("bridge", self.bridge)
        self.web_view.page().setWebChannel(self.channel)

    def connect_popup(self, popup) -> None:
        """Wire bridge signals to a PopupController's slots."""
        self.bridge.marker_entered.connect(popup.handle_marker_entered)
        self.bridge.marker_left.connect(popup.handle_marker_left)
        self.bridge.popup_entered.connect(popup.handle_popup_entered)
        self.bridge.popup_left.connect(popup.handle_popup_left)
        self.bridge.document_clicked.connect(popup.handle_document_clicked)
        self.bridge.close_requested.connect(popup.hide)

    def render_document(self, html: str, base_path: Optional[Path] = None) -> None:
        """
        Render a document with the highlight stylesheet and bridge injected.

        Args:
            html: Document markup (already annotated)
            base_path: Directory used to resolve relative resources
        """
        base_url = QUrl.fromLocalFile(str(base_path) + "/") if base_path else QUrl()
        self.web_view.setHtml(self._compose_html(html), base_url)

    def mount_popup(self, word: str, anchor: AnchorRect) -> None:
        x, y = anchor.popup_position()
        self._run_js("showWordPopup", {"word": word, "x": x, "y": y})

    def unmount_popup(self) -> None:
        self._run_js("hideWordPopup")

    def fill_popup(self, payload: Dict[str, Any]) -> None:
        self._run_js("fillWordPopup", payload)

    def clear(self):
        """Clear the canvas."""
        self.web_view.setHtml("<html><body></body></html>")

    def _run_js(self, function: str, payload: Optional[Dict[str, Any]] = None) -> None:
        argument = json.dumps(payload, ensure_ascii=False) if payload is not None else ""
        self.web_view.page().runJavaScript(f"{function}({argument});")

    def _compose_html(self, html: str) -> str:
        """Append stylesheet and scripts just before the closing body tag."""
        injected = (
            f"<style>{self._load_template('highlight.css')}</style>\n"
            f'<script src="{QWEBCHANNEL_SCRIPT}"></script>\n'
            f"<script>{self._load_template('page_bridge.js')}</script>\n"
        )
        matches = list(_BODY_CLOSE.finditer(html))
        if not matches:
            return html + injected
        position = matches[-1].start()
        return html[:position] + injected + html[position:]

    def _load_template(self, filename: str) -> str:
        """
        Load a template file from the assets directory.

        Args:
            filename: Name of the template file

        Returns:
            Template content as string
        """
        template_path = TEMPLATES_DIR / filename
        return template_path.read_text(encoding="utf-8")
