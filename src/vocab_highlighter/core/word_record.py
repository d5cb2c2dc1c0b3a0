"""Vocabulary entities used across services, persistence and the message protocol."""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


def optional_flag(data: Dict[str, Any], key: str) -> Optional[bool]:
    """Read a status flag, ``None`` when absent.

    Only real booleans are accepted.

    Raises:
        ValueError: If the value is present but not a bool.
    """
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise ValueError(f"{key} must be true or false, got {value!r}")


def _optional_timestamp(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"{key} must be an ISO timestamp string, got {value!r}")


@dataclass
class WordRecord:
    """A persisted word keyed by its (trimmed) text."""

    word: str
    meaning: Optional[str] = None
    image: Optional[str] = None
    status_checked: bool = False
    status_favorite: bool = False
    occurrence_count: int = 1
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape used on the message channel."""
        return {
            "word": self.word,
            "meaning": self.meaning,
            "image": self.image,
            "statusChecked": self.status_checked,
            "statusFavorite": self.status_favorite,
            "occurrenceCount": self.occurrence_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordRecord":
        """Build a record from a message payload.

        Raises:
            KeyError: If the payload has no ``word``.
            ValueError: If ``occurrenceCount`` is not an integer, a status flag is
                not a bool, or a timestamp is not a string.
        """
        count = data.get("occurrenceCount")
        return cls(
            word=str(data["word"]),
            meaning=data.get("meaning"),
            image=data.get("image"),
            status_checked=bool(optional_flag(data, "statusChecked")),
            status_favorite=bool(optional_flag(data, "statusFavorite")),
            occurrence_count=max(1, int(count)) if count is not None else 1,
            created_at=_optional_timestamp(data, "createdAt"),
            updated_at=_optional_timestamp(data, "updatedAt"),
        )


@dataclass
class WordPatch:
    """A partial record for upserts.

    ``None`` means "not provided": the existing value is preserved on merge.
    This matters for the two booleans, where ``False`` is a real value.
    """

    word: str
    meaning: Optional[str] = None
    image: Optional[str] = None
    status_checked: Optional[bool] = None
    status_favorite: Optional[bool] = None

    @property
    def touches_favorite(self) -> bool:
        return self.status_favorite is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordPatch":
        """Build a patch from a message payload.

        Raises:
            ValueError: If a status flag is present but not a bool.
        """
        return cls(
            word=str(data.get("word") or ""),
            meaning=data.get("meaning"),
            image=data.get("image"),
            status_checked=optional_flag(data, "statusChecked"),
            status_favorite=optional_flag(data, "statusFavorite"),
        )


@dataclass
class DictsData:
    """Auxiliary field bag holding the word currently being edited."""

    dicts_word: Optional[str] = None
    dicts_meaning: Optional[str] = None
    dicts_image: Optional[str] = None
    dicts_status_check: Optional[bool] = None
    dicts_status_fav: Optional[bool] = None
    dicts_count: Optional[int] = None
    dicts_create_time: Optional[str] = None
    dicts_update_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def provided_fields(self) -> Dict[str, Any]:
        """Return only the fields that carry a value."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictsData":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
