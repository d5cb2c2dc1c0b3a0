"""Text processing services - word matching and text normalization."""

from vocab_highlighter.services.text_processing.text_normalization import normalize_word
from vocab_highlighter.services.text_processing.word_matcher import WordMatch, WordMatcher

__all__ = ["WordMatcher", "WordMatch", "normalize_word"]
