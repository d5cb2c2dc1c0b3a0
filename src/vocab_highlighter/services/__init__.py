"""Services layer - store access, messaging and page annotation."""

from vocab_highlighter.services.change_notifier import (
    FAVORITES_CHANGED,
    ChangeNotifier,
    PageEndpoint,
)
from vocab_highlighter.services.word_service import WordService
from vocab_highlighter.services.rpc_dispatcher import RpcDispatcher
from vocab_highlighter.services.store_client import StoreClient
from vocab_highlighter.services.settings_manager import SettingsManager

# Text processing services
from vocab_highlighter.services.text_processing import WordMatch, WordMatcher, normalize_word
from vocab_highlighter.services.highlight_engine import (
    MARKER_CLASS,
    POPUP_CLASS,
    HighlightEngine,
    HighlightMarker,
    parse_document,
)

__all__ = [
    "FAVORITES_CHANGED",
    "ChangeNotifier",
    "PageEndpoint",
    "WordService",
    "RpcDispatcher",
    "StoreClient",
    "SettingsManager",
    "WordMatch",
    "WordMatcher",
    "normalize_word",
    "MARKER_CLASS",
    "POPUP_CLASS",
    "HighlightEngine",
    "HighlightMarker",
    "parse_document",
]
