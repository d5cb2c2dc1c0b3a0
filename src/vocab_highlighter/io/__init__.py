"""I/O layer - Data access for word persistence."""

from .word_store import WordStore

__all__ = ["WordStore"]
