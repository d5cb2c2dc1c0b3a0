"""Coordinators - Orchestration layer connecting pages with the word store."""

from .popup_controller import AnchorRect, PopupController, PopupHost, VisiblePopup
from .page_controller import PageController

__all__ = [
    "AnchorRect",
    "PopupController",
    "PopupHost",
    "VisiblePopup",
    "PageController",
]
