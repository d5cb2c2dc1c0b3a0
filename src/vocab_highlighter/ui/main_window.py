"""Main Window - Application shell with menus."""

from pathlib import Path

from PySide6.QtCore import Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox, QVBoxLayout, QWidget


class MainWindow(QMainWindow):
    """Provides the application shell and the File menu."""

    # Signal emitted when user selects an HTML document
    document_opened = Signal(Path)

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Vocab Highlighter")
        self.setGeometry(100, 100, 1200, 800)

        self._setup_ui()
        self._create_menu_bar()

    def _setup_ui(self):
        """Initialize the main UI layout."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        self.main_layout = QVBoxLayout(central_widget)
        self.main_layout.setContentsMargins(0, 0, 0, 0)

    def _create_menu_bar(self):
        """Create the application menu bar."""
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")

        open_action = QAction("&Open Page...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open_document)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _on_open_document(self):
        """Handle the Open Page menu action."""
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Web Page",
            str(Path.home()),
            "HTML files (*.html *.htm);;All files (*)",
        )
        if file_path:
            self.document_opened.emit(Path(file_path))

    def set_canvas(self, canvas):
        """Set the page canvas widget in the main layout."""
        self.main_layout.addWidget(canvas)

    def show_error(self, title: str, message: str):
        """Display an error message to the user."""
        QMessageBox.critical(self, title, message)
