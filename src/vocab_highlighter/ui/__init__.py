"""UI layer - PySide6 presentation components."""

from .main_window import MainWindow
from .page_canvas import PageBridge, PageCanvas

__all__ = ["MainWindow", "PageCanvas", "PageBridge"]
