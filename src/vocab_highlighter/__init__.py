"""
Vocab Highlighter - a personal vocabulary companion for reading web pages.

This package provides a desktop application that:
- Persists marked words with meaning, image and review/favorite status
- Highlights favorite words on rendered pages
- Shows word details in a hover popup
"""

__version__ = "0.1.0"

# Make key components available at package level
from vocab_highlighter.core import DictsData, WordPatch, WordRecord
from vocab_highlighter.io import WordStore

__all__ = [
    "WordRecord",
    "WordPatch",
    "DictsData",
    "WordStore",
]
