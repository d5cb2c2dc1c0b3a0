"""Main entry point for the vocab highlighter application."""

import sys
from pathlib import Path

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QApplication

from vocab_highlighter.coordinators import PageController, PopupController
from vocab_highlighter.io import WordStore
from vocab_highlighter.logging_config import configure_logging, get_logger
from vocab_highlighter.services import (
    ChangeNotifier,
    HighlightEngine,
    PageEndpoint,
    RpcDispatcher,
    SettingsManager,
    StoreClient,
    WordService,
)
from vocab_highlighter.ui import MainWindow, PageCanvas


def main():
    """
    Bootstrap the application following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    # 1. Settings and logging
    settings = SettingsManager()
    configure_logging(settings.get_log_level())
    logger = get_logger(__name__)

    # 2. Initialize Application
    app = QApplication(sys.argv)
    app.setApplicationName("Vocab Highlighter")
    app.setOrganizationName("VocabHighlighter")

    # 3. Store side (opened lazily on the first request)
    store = WordStore(settings.get_db_path())
    notifier = ChangeNotifier()
    word_service = WordService(store, notifier)
    dispatcher = RpcDispatcher(word_service)

    # 4. Construct UI
    canvas = PageCanvas()
    main_window = MainWindow()
    main_window.set_canvas(canvas)

    # 5. Page side
    endpoint = PageEndpoint("main")
    notifier.register(endpoint)
    popup = PopupController(canvas, hide_delay_ms=settings.get_popup_hide_delay_ms())
    canvas.connect_popup(popup)
    controller = PageController(
        surface=canvas,
        client=StoreClient(dispatcher, page_name="main"),
        endpoint=endpoint,
        engine=HighlightEngine(),
        popup=popup,
        reinit_delay_ms=settings.get_reinit_delay_ms(),
    )

    # 6. Signal Wiring
    def open_document(path: Path):
        try:
            controller.handle_document_opened(path)
        except OSError as e:
            logger.error("Could not open %s: %s", path, e)
            main_window.show_error("Open Failed", f"Could not open:\n{path}\n\n{e}")

    main_window.document_opened.connect(open_document)
    if len(sys.argv) > 1:
        open_document(Path(sys.argv[1]))

    # 7. Show UI and start event loop
    main_window.show()
    exit_code = app.exec()

    controller.close()
    notifier.unregister(endpoint)
    QThreadPool.globalInstance().waitForDone()
    store.close()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
