"""Error taxonomy shared by the store, dispatcher and notifier."""


class VocabularyError(Exception):
    """Base class for all vocabulary store errors."""


class StoreUnavailable(VocabularyError):
    """Raised when the store is used before it has been opened."""


class WriteFailure(VocabularyError):
    """Raised when the underlying database rejects a write."""


class MalformedInput(VocabularyError):
    """Raised when a single-record operation is missing its word."""


class BroadcastFailure(VocabularyError):
    """Raised when a page endpoint cannot receive a notification."""
