"""Text normalization utilities for consistent word keying."""

import re


def normalize_word(text: str) -> str:
    """
    Normalize a word for matching against page text.

    Rules:
    - Trim leading and trailing whitespace
    - Collapse runs of whitespace to single spaces (multi-word entries)
    - Lowercase

    Args:
        text: Original word as stored.

    Returns:
        Normalized word, possibly empty.
    """
    text = (text or "").strip()
    text = re.sub(r"\s+", " ", text)
    return text.lower()
