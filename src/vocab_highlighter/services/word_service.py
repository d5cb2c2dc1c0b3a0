"""Word Service - the store engine as seen by the dispatcher."""

import logging
import threading
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from vocab_highlighter.core import (
    DictsData,
    MalformedInput,
    StoreUnavailable,
    WordPatch,
    WordRecord,
)
from vocab_highlighter.io import WordStore
from vocab_highlighter.services.change_notifier import ChangeNotifier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WordService:
    """Application service for word records.

    Depends on WordStore for persistence and ChangeNotifier for telling pages
    that the favorite set moved. A store that has not been opened yet is opened
    on first use and the operation retried once.
    """

    def __init__(self, store: WordStore, notifier: Optional[ChangeNotifier] = None) -> None:
        self._store = store
        self._notifier = notifier
        self._open_lock = threading.Lock()

    def upsert(self, patch: WordPatch) -> WordRecord:
        record = self._with_store(lambda: self._store.upsert(patch))
        if patch.touches_favorite:
            self._notify()
        return record

    def get_word(self, word: str) -> Optional[WordRecord]:
        return self._with_store(lambda: self._store.get(word))

    def delete_word(self, word: str) -> bool:
        # Only writes carrying statusFavorite notify pages
        return self._with_store(lambda: self._store.delete(word))

    def list_favorites(self) -> List[WordRecord]:
        return self._with_store(self._store.list_favorites)

    def list_all(self) -> List[WordRecord]:
        return self._with_store(self._store.list_all)

    def import_words(self, entries: Sequence[Any]) -> int:
        count = self._with_store(lambda: self._store.bulk_import(entries))
        logger.info("Imported %d of %d word records", count, len(entries))
        self._notify()
        return count

    def get_dicts_data(self) -> DictsData:
        return self._with_store(self._store.get_dicts_data)

    def set_dicts_data(self, data: DictsData) -> None:
        self._with_store(lambda: self._store.set_dicts_data(data))

    def update_word_status(
        self,
        word: str,
        status_check: Optional[bool],
        status_fav: Optional[bool],
    ) -> str:
        """Apply the legacy status message.

        Either flag true upserts the word with the current field bag's meaning and
        image; both flags explicitly false delete it.

        Raises:
            MalformedInput: If the word is empty or no change was requested.
        """
        word = (word or "").strip()
        if not word:
            raise MalformedInput("Word is required")

        if status_check or status_fav:
            bag = self.get_dicts_data()
            self.upsert(
                WordPatch(
                    word=word,
                    meaning=bag.dicts_meaning,
                    image=bag.dicts_image,
                    status_checked=status_check,
                    status_favorite=status_fav,
                )
            )
            return f"Saved '{word}'"

        if status_check is False and status_fav is False:
            deleted = self.delete_word(word)
            # The request carried statusFav=false
            self._notify()
            return f"Deleted '{word}'" if deleted else f"Word not found: {word}"

        raise MalformedInput("No status change requested")

    def _with_store(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except StoreUnavailable:
            logger.info("Word store not open yet, opening and retrying")
            with self._open_lock:
                self._store.open()
            return operation()

    def _notify(self) -> None:
        if self._notifier is not None:
            self._notifier.notify_favorites_changed()
