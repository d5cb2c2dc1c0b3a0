"""Whole-word, case-insensitive matching of favorite words in plain text."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from vocab_highlighter.services.text_processing.text_normalization import normalize_word


@dataclass(frozen=True)
class WordMatch:
    """A single match found within a block of text."""

    start: int
    end: int
    word: str  # canonical (lowercased) form
    text: str  # as it appears on the page

    @property
    def length(self) -> int:
        return self.end - self.start


class WordMatcher:
    """Scans text for a fixed set of words respecting whole-word boundaries.

    Boundaries are "no word character on either side" rather than ``\\b``, so
    entries that start or end with punctuation (``c++``) still match whole.
    Longer entries win when two overlap at the same position.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._words: frozenset = frozenset()
        self._pattern: Optional[Pattern[str]] = None
        self.rebuild(words)

    @property
    def words(self) -> frozenset:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def rebuild(self, words: Iterable[str]) -> None:
        """Reconstruct the pattern from the provided word list."""
        normalized = {normalize_word(word) for word in words}
        normalized.discard("")
        self._words = frozenset(normalized)
        if not self._words:
            self._pattern = None
            return
        alternatives = "|".join(
            re.escape(word) for word in sorted(self._words, key=lambda w: (-len(w), w))
        )
        self._pattern = re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE)

    def find_in_text(self, text: str) -> List[WordMatch]:
        """Return disjoint matches in order of appearance."""
        if not text or self._pattern is None:
            return []
        return [
            WordMatch(start=m.start(), end=m.end(), word=m.group(0).lower(), text=m.group(0))
            for m in self._pattern.finditer(text)
        ]
