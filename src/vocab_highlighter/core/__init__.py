"""Domain layer - Pure entities representing vocabulary records."""

from .errors import (
    BroadcastFailure,
    MalformedInput,
    StoreUnavailable,
    VocabularyError,
    WriteFailure,
)
from .word_record import DictsData, WordPatch, WordRecord

__all__ = [
    "WordRecord",
    "WordPatch",
    "DictsData",
    "VocabularyError",
    "StoreUnavailable",
    "WriteFailure",
    "MalformedInput",
    "BroadcastFailure",
]
