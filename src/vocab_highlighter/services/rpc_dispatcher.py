"""RPC Dispatcher - routes page requests to the single word service."""

import itertools
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from PySide6.QtCore import QObject, QThreadPool, Slot

from vocab_highlighter.core import DictsData, MalformedInput, WordPatch
from vocab_highlighter.core.word_record import optional_flag
from vocab_highlighter.services.store_workers import (
    RequestHandler,
    StoreRequestWorker,
    WorkerSignals,
)
from vocab_highlighter.services.word_service import WordService

logger = logging.getLogger(__name__)

ReplyCallback = Callable[[Dict[str, Any]], None]

GET_WORD = "getWord"
DELETE_WORD = "deleteWord"
GET_FAVORITE_WORDS = "getFavoriteWords"
GET_ALL_WORDS = "getAllWords"
IMPORT_WORDS = "importWords"
GET_DICTS_DATA = "getDictsData"
SET_DICTS_DATA = "setDictsData"
UPSERT_WORD = "upsertWord"

_STATUS_CHECK_KEYS = ("statusCheck", "status_check")
_STATUS_FAV_KEYS = ("statusFav", "status_fav")


def _first_present(request: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[bool]:
    for key in keys:
        try:
            value = optional_flag(request, key)
        except ValueError as e:
            raise MalformedInput(str(e)) from e
        if value is not None:
            return value
    return None


def is_legacy_status_request(request: Dict[str, Any]) -> bool:
    """``{word, statusCheck, statusFav}`` without an action."""
    if request.get("action"):
        return False
    return "word" in request and any(
        key in request for key in _STATUS_CHECK_KEYS + _STATUS_FAV_KEYS
    )


class RpcDispatcher(QObject):
    """
    Answers asynchronous requests from any number of pages.

    Every accepted request is executed on the thread pool and its reply
    delivered later on the dispatcher's thread, so callers must never assume
    the reply callback ran before ``dispatch`` returned.
    """

    def __init__(
        self,
        word_service: WordService,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.word_service = word_service
        self._pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()
        self._request_ids = itertools.count(1)
        self._pending: Dict[int, Tuple[ReplyCallback, WorkerSignals]] = {}
        self._handlers: Dict[str, RequestHandler] = {
            GET_WORD: self._handle_get_word,
            DELETE_WORD: self._handle_delete_word,
            GET_FAVORITE_WORDS: self._handle_get_favorite_words,
            GET_ALL_WORDS: self._handle_get_all_words,
            IMPORT_WORDS: self._handle_import_words,
            GET_DICTS_DATA: self._handle_get_dicts_data,
            SET_DICTS_DATA: self._handle_set_dicts_data,
            UPSERT_WORD: self._handle_upsert_word,
        }

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(self, request: Dict[str, Any], reply: ReplyCallback) -> bool:
        """Accept a request.

        Returns True when the reply will arrive later. Requests that cannot be
        routed are answered right away and return False.
        """
        if not isinstance(request, dict):
            reply({"success": False, "message": "Request must be an object"})
            return False

        if is_legacy_status_request(request):
            handler: Optional[RequestHandler] = self._handle_legacy_status
        else:
            handler = self._handlers.get(request.get("action") or "")
        if handler is None:
            reply({"success": False, "message": f"Unknown action: {request.get('action')!r}"})
            return False

        request_id = next(self._request_ids)
        worker = StoreRequestWorker(request_id, handler, dict(request))
        self._pending[request_id] = (reply, worker.signals)
        worker.signals.finished.connect(self._deliver)
        self._pool.start(worker)
        return True

    @Slot(int, object)
    def _deliver(self, request_id: int, response: Dict[str, Any]) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None:
            logger.warning("Dropping reply for unknown request %d", request_id)
            return
        reply, _signals = pending
        try:
            reply(response)
        except Exception:
            logger.exception("Reply callback for request %d failed", request_id)

    # Handlers run on the worker thread

    def _handle_get_word(self, request: Dict[str, Any]) -> Dict[str, Any]:
        word = self._require_word(request)
        record = self.word_service.get_word(word)
        if record is None:
            return {"success": True, "data": None, "message": f"Word not found: {word}"}
        return {"success": True, "data": record.to_dict()}

    def _handle_delete_word(self, request: Dict[str, Any]) -> Dict[str, Any]:
        word = self._require_word(request)
        deleted = self.word_service.delete_word(word)
        message = f"Deleted '{word}'" if deleted else f"Word not found: {word}"
        return {"success": True, "data": deleted, "message": message}

    def _handle_get_favorite_words(self, request: Dict[str, Any]) -> Dict[str, Any]:
        records = self.word_service.list_favorites()
        return {"success": True, "data": [record.to_dict() for record in records]}

    def _handle_get_all_words(self, request: Dict[str, Any]) -> Dict[str, Any]:
        records = self.word_service.list_all()
        return {"success": True, "data": [record.to_dict() for record in records]}

    def _handle_import_words(self, request: Dict[str, Any]) -> Dict[str, Any]:
        entries = request.get("data")
        if not isinstance(entries, list):
            raise MalformedInput("Import data must be a list of records")
        count = self.word_service.import_words(entries)
        return {"success": True, "count": count, "message": f"Imported {count} words"}

    def _handle_get_dicts_data(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "data": self.word_service.get_dicts_data().to_dict()}

    def _handle_set_dicts_data(self, request: Dict[str, Any]) -> Dict[str, Any]:
        data = request.get("data")
        if not isinstance(data, dict):
            raise MalformedInput("Field data must be an object")
        self.word_service.set_dicts_data(DictsData.from_dict(data))
        return {"success": True, "message": "Field data saved"}

    def _handle_upsert_word(self, request: Dict[str, Any]) -> Dict[str, Any]:
        data = request.get("data")
        if not isinstance(data, dict):
            raise MalformedInput("Word data must be an object")
        try:
            patch = WordPatch.from_dict(data)
        except ValueError as e:
            raise MalformedInput(str(e)) from e
        record = self.word_service.upsert(patch)
        return {"success": True, "data": record.to_dict(), "message": f"Saved '{record.word}'"}

    def _handle_legacy_status(self, request: Dict[str, Any]) -> Dict[str, Any]:
        message = self.word_service.update_word_status(
            str(request.get("word") or ""),
            _first_present(request, _STATUS_CHECK_KEYS),
            _first_present(request, _STATUS_FAV_KEYS),
        )
        return {"success": True, "message": message}

    @staticmethod
    def _require_word(request: Dict[str, Any]) -> str:
        word = str(request.get("word") or "").strip()
        if not word:
            raise MalformedInput("Word is required")
        return word
