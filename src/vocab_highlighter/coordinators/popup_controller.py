"""Popup Controller - hover/click state machine for the word detail popup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from PySide6.QtCore import QObject, QTimer, Signal, Slot

logger = logging.getLogger(__name__)

POPUP_VERTICAL_OFFSET = 10


@dataclass(frozen=True)
class AnchorRect:
    """Viewport rectangle of a highlighted marker."""

    left: float
    top: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def popup_position(self) -> tuple[float, float]:
        """Where the popup's top-left corner goes: just below the marker."""
        return self.left, self.bottom + POPUP_VERTICAL_OFFSET


@dataclass(frozen=True)
class VisiblePopup:
    marker_id: int
    word: str
    anchor: AnchorRect


class PopupHost(Protocol):
    """Surface that can display one detail popup at a time."""

    def mount_popup(self, word: str, anchor: AnchorRect) -> None: ...

    def unmount_popup(self) -> None: ...


class HideTimer(Protocol):
    """The subset of QTimer the controller relies on."""

    timeout: Signal

    def setSingleShot(self, single_shot: bool) -> None: ...

    def setInterval(self, msec: int) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def isActive(self) -> bool: ...


class PopupController(QObject):
    """
    Single-slot popup state machine.

    States are Hidden (``state is None``) and Visible(marker, word, anchor).
    Every transition first clears a pending hide, and every transition into
    Hidden unmounts the view that was showing.

    Signals:
    - popup_shown: emitted with the word after a popup is mounted
    - popup_hidden: emitted after the popup is unmounted
    """

    popup_shown = Signal(str)
    popup_hidden = Signal()

    def __init__(
        self,
        host: PopupHost,
        hide_delay_ms: int = 300,
        timer: Optional[HideTimer] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.host = host
        self.hide_delay_ms = hide_delay_ms
        self._state: Optional[VisiblePopup] = None

        self._hide_timer = timer if timer is not None else QTimer(self)
        self._hide_timer.setSingleShot(True)
        self._hide_timer.setInterval(hide_delay_ms)
        self._hide_timer.timeout.connect(self._on_hide_timeout)

    @property
    def state(self) -> Optional[VisiblePopup]:
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._state is not None

    @property
    def current_word(self) -> Optional[str]:
        return self._state.word if self._state else None

    @property
    def hide_pending(self) -> bool:
        return self._hide_timer.isActive()

    @Slot(int, str, float, float, float, float)
    def handle_marker_entered(
        self, marker_id: int, word: str, left: float, top: float, width: float, height: float
    ):
        self.show_for_marker(marker_id, word, AnchorRect(left, top, width, height))

    def show_for_marker(self, marker_id: int, word: str, anchor: AnchorRect) -> None:
        """Hover-enter on a marker."""
        self._cancel_hide()
        if self._state is not None and self._state.marker_id == marker_id:
            return
        if self._state is not None:
            self._unmount()

        self.host.mount_popup(word, anchor)
        self._state = VisiblePopup(marker_id=marker_id, word=word, anchor=anchor)
        logger.debug("Popup shown for %r (marker %d)", word, marker_id)
        self.popup_shown.emit(word)

    @Slot(int)
    def handle_marker_left(self, marker_id: int):
        self._schedule_hide()

    @Slot()
    def handle_popup_entered(self):
        self._cancel_hide()

    @Slot()
    def handle_popup_left(self):
        self._schedule_hide()

    @Slot(int, int)
    def handle_document_clicked(self, marker_id: int, inside_popup: int):
        """Click anywhere in the page.

        Args:
            marker_id: Marker under the click, or -1 when none.
            inside_popup: 1 when the click landed inside the popup, else 0. No
                bool-typed arguments cross the page bridge.
        """
        if inside_popup:
            return
        if self._state is not None and marker_id == self._state.marker_id:
            return
        if marker_id >= 0:
            # Hover-enter on that marker already switched the popup
            return
        self.hide()

    @Slot()
    def hide(self):
        """Immediate transition to Hidden."""
        self._cancel_hide()
        if self._state is not None:
            self._unmount()

    def _schedule_hide(self) -> None:
        if self._state is None:
            return
        self._hide_timer.stop()
        self._hide_timer.start()

    def _cancel_hide(self) -> None:
        if self._hide_timer.isActive():
            self._hide_timer.stop()

    @Slot()
    def _on_hide_timeout(self):
        if self._state is not None:
            self._unmount()

    def _unmount(self) -> None:
        previous = self._state
        self._state = None
        self.host.unmount_popup()
        logger.debug("Popup hidden for %r", previous.word if previous else None)
        self.popup_hidden.emit()
