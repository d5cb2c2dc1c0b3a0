"""Store Client - page-side helpers for talking to the dispatcher."""

import logging
from typing import Any, Callable, Dict, List, Optional

from vocab_highlighter.io.word_store import utc_now_iso
from vocab_highlighter.services.rpc_dispatcher import (
    DELETE_WORD,
    GET_ALL_WORDS,
    GET_DICTS_DATA,
    GET_FAVORITE_WORDS,
    GET_WORD,
    IMPORT_WORDS,
    SET_DICTS_DATA,
    UPSERT_WORD,
    RpcDispatcher,
)

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[str], None]


class StoreClient:
    """
    Callback-based client used by a page to reach the word store.

    Each call sends one request and returns immediately; ``on_success`` or
    ``on_error`` runs once the dispatcher replies.
    """

    def __init__(self, dispatcher: RpcDispatcher, page_name: str = "page"):
        self._dispatcher = dispatcher
        self._page_name = page_name

    def get_word(self, word: str, on_success: SuccessCallback,
                 on_error: Optional[ErrorCallback] = None) -> None:
        """Fetch one record dict (or None when the word is unknown)."""
        self._send({"action": GET_WORD, "word": word}, "data", on_success, on_error)

    def get_favorite_words(self, on_success: Callable[[List[Dict[str, Any]]], None],
                           on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": GET_FAVORITE_WORDS}, "data", on_success, on_error)

    def get_all_words(self, on_success: Callable[[List[Dict[str, Any]]], None],
                      on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": GET_ALL_WORDS}, "data", on_success, on_error)

    def delete_word(self, word: str, on_success: SuccessCallback,
                    on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": DELETE_WORD, "word": word}, "message", on_success, on_error)

    def import_words(self, records: List[Dict[str, Any]], on_success: Callable[[int], None],
                     on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": IMPORT_WORDS, "data": records}, "count", on_success, on_error)

    def upsert_word(self, data: Dict[str, Any], on_success: SuccessCallback,
                    on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": UPSERT_WORD, "data": data}, "data", on_success, on_error)

    def get_dicts_data(self, on_success: Callable[[Dict[str, Any]], None],
                       on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": GET_DICTS_DATA}, "data", on_success, on_error)

    def set_dicts_data(self, data: Dict[str, Any], on_success: SuccessCallback,
                       on_error: Optional[ErrorCallback] = None) -> None:
        self._send({"action": SET_DICTS_DATA, "data": data}, "message", on_success, on_error)

    def update_word_status(self, word: str, status_check: bool, status_fav: bool,
                           on_success: SuccessCallback,
                           on_error: Optional[ErrorCallback] = None) -> None:
        """Record the word in the field bag, then send the legacy status message."""
        fields = {
            "dicts_word": word,
            "dicts_status_check": status_check,
            "dicts_status_fav": status_fav,
            "dicts_update_time": utc_now_iso(),
        }
        legacy = {"word": word, "statusCheck": status_check, "statusFav": status_fav}

        def _send_status(_message: Any) -> None:
            self._send(legacy, "message", on_success, on_error)

        self.set_dicts_data(fields, _send_status, on_error)

    def _send(
        self,
        request: Dict[str, Any],
        result_key: str,
        on_success: SuccessCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        def _on_reply(response: Dict[str, Any]) -> None:
            if response and response.get("success"):
                on_success(response.get(result_key))
                return
            message = (response or {}).get("message") or "Request failed"
            if on_error is not None:
                on_error(message)
            else:
                logger.error("[%s] %s failed: %s", self._page_name,
                             request.get("action", "status update"), message)

        self._dispatcher.dispatch(request, _on_reply)
