"""SQLite-backed word record persistence."""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from vocab_highlighter.core import (
    DictsData,
    MalformedInput,
    StoreUnavailable,
    WordPatch,
    WordRecord,
    WriteFailure,
)

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def lookup_candidates(word: str) -> List[str]:
    """Casings tried by ``get``: literal, lower, upper, then title-case.

    Duplicates are dropped while keeping the order.
    """
    title = word[:1].upper() + word[1:].lower()
    candidates: List[str] = []
    for candidate in (word, word.lower(), word.upper(), title):
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


class WordStore:
    """Owns the SQLite connection, schema, and word record persistence.

    One connection is shared by all threads and guarded by a lock. Writes run in
    ``BEGIN IMMEDIATE`` transactions so the read-modify-write of ``upsert`` is
    linearizable per key, also against other processes using the same file.
    """

    _COLUMNS = (
        "word, meaning, image, status_checked, status_favorite, "
        "occurrence_count, created_at, updated_at"
    )

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self.connection is not None

    def open(self) -> None:
        """Connect to the database file and create the schema if needed."""
        with self._lock:
            if self.connection is not None:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(
                self.db_path, check_same_thread=False, isolation_level=None
            )
            connection.row_factory = sqlite3.Row
            self.connection = connection
            self.ensure_schema()
            logger.info("Opened word store at %s", self.db_path)

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._transaction() as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS words (
                    word TEXT PRIMARY KEY,
                    meaning TEXT,
                    image TEXT,
                    status_checked INTEGER NOT NULL DEFAULT 0,
                    status_favorite INTEGER NOT NULL DEFAULT 0,
                    occurrence_count INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS dicts_fields (
                    key TEXT PRIMARY KEY,
                    value TEXT
                );
                """
            )
            for column in ("status_favorite", "status_checked", "created_at", "updated_at"):
                cur.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_words_{column} ON words({column});"
                )

    def close(self) -> None:
        with self._lock:
            if self.connection is not None:
                self.connection.close()
                self.connection = None

    def upsert(self, patch: WordPatch) -> WordRecord:
        """Create or merge a record.

        Omitted fields (``None``) keep their stored value. An existing record has its
        occurrence count bumped by one; a new one starts at one.

        Raises:
            MalformedInput: If the word is empty after trimming or a status flag
                is not a bool.
            WriteFailure: If the database rejects the write.
        """
        word = (patch.word or "").strip()
        if not word:
            raise MalformedInput("Word is required")
        flags = (("statusChecked", patch.status_checked), ("statusFavorite", patch.status_favorite))
        for name, flag in flags:
            if flag is not None and not isinstance(flag, bool):
                raise MalformedInput(f"{name} must be true or false, got {flag!r}")

        with self._transaction() as cur:
            cur.execute(f"SELECT {self._COLUMNS} FROM words WHERE word = ?", (word,))
            row = cur.fetchone()
            now = utc_now_iso()
            if row is None:
                record = WordRecord(
                    word=word,
                    meaning=patch.meaning,
                    image=patch.image,
                    status_checked=bool(patch.status_checked),
                    status_favorite=bool(patch.status_favorite),
                    occurrence_count=1,
                    created_at=now,
                    updated_at=now,
                )
            else:
                record = self._row_to_record(row)
                if patch.meaning is not None:
                    record.meaning = patch.meaning
                if patch.image is not None:
                    record.image = patch.image
                if patch.status_checked is not None:
                    record.status_checked = patch.status_checked
                if patch.status_favorite is not None:
                    record.status_favorite = patch.status_favorite
                record.occurrence_count += 1
                record.updated_at = max(now, record.created_at or now)
            self._write_record(cur, record)
        return record

    def get(self, word: str) -> Optional[WordRecord]:
        """Case-insensitive lookup; returns the first casing that exists.

        Surrounding whitespace is stripped first, then the literal input is tried
        before the lower, upper and title-case forms.
        """
        word = (word or "").strip()
        if not word:
            return None
        with self._locked_cursor() as cur:
            for candidate in lookup_candidates(word):
                cur.execute(f"SELECT {self._COLUMNS} FROM words WHERE word = ?", (candidate,))
                row = cur.fetchone()
                if row is not None:
                    return self._row_to_record(row)
        return None

    def delete(self, word: str) -> bool:
        """Delete the record keyed by exactly ``word``. Returns False if absent.

        Surrounding whitespace is stripped; casing is matched literally.
        """
        word = (word or "").strip()
        if not word:
            return False
        with self._transaction() as cur:
            cur.execute("DELETE FROM words WHERE word = ?", (word,))
            return cur.rowcount > 0

    def list_favorites(self) -> List[WordRecord]:
        with self._locked_cursor() as cur:
            cur.execute(
                f"""
                SELECT {self._COLUMNS} FROM words
                WHERE status_favorite = 1
                ORDER BY updated_at DESC, word ASC
                """
            )
            return [self._row_to_record(row) for row in cur.fetchall()]

    def list_all(self) -> List[WordRecord]:
        with self._locked_cursor() as cur:
            cur.execute(
                f"SELECT {self._COLUMNS} FROM words ORDER BY updated_at DESC, word ASC"
            )
            return [self._row_to_record(row) for row in cur.fetchall()]

    def bulk_import(self, entries: Sequence[Any]) -> int:
        """Replace records wholesale from exported payloads.

        Keys are lowercased. Entries without a usable word are skipped, and a failed
        write only skips its own entry. Returns the number of records written.
        """
        written = 0
        for entry in entries:
            record = self._record_from_import(entry)
            if record is None:
                continue
            try:
                with self._transaction() as cur:
                    self._write_record(cur, record)
            except WriteFailure as e:
                logger.warning("Skipping import of %r: %s", record.word, e)
                continue
            written += 1
        return written

    def get_dicts_data(self) -> DictsData:
        with self._locked_cursor() as cur:
            cur.execute("SELECT key, value FROM dicts_fields")
            values = {row["key"]: json.loads(row["value"]) for row in cur.fetchall()}
        return DictsData.from_dict(values)

    def set_dicts_data(self, data: DictsData) -> None:
        """Store the provided fields of ``data``; missing fields are left alone."""
        provided = data.provided_fields()
        if not provided:
            return
        with self._transaction() as cur:
            cur.executemany(
                """
                INSERT INTO dicts_fields (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                [(key, json.dumps(value, ensure_ascii=False)) for key, value in provided.items()],
            )

    @contextmanager
    def _locked_cursor(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            if self.connection is None:
                raise StoreUnavailable("Word store is not open")
            yield self.connection.cursor()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        with self._locked_cursor() as cur:
            try:
                cur.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise WriteFailure(f"Could not start transaction: {e}") from e
            try:
                yield cur
            except sqlite3.Error as e:
                self._rollback(cur)
                raise WriteFailure(str(e)) from e
            except BaseException:
                self._rollback(cur)
                raise
            else:
                try:
                    cur.execute("COMMIT")
                except sqlite3.Error as e:
                    self._rollback(cur)
                    raise WriteFailure(f"Commit failed: {e}") from e

    def _rollback(self, cur: sqlite3.Cursor) -> None:
        # SQLite may already have rolled back on its own
        if self.connection is not None and self.connection.in_transaction:
            cur.execute("ROLLBACK")

    def _write_record(self, cur: sqlite3.Cursor, record: WordRecord) -> None:
        cur.execute(
            f"""
            INSERT OR REPLACE INTO words ({self._COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.word,
                record.meaning,
                record.image,
                int(record.status_checked),
                int(record.status_favorite),
                record.occurrence_count,
                record.created_at,
                record.updated_at,
            ),
        )

    @staticmethod
    def _record_from_import(entry: Any) -> Optional[WordRecord]:
        if isinstance(entry, WordRecord):
            payload: Dict[str, Any] = entry.to_dict()
        elif isinstance(entry, dict):
            payload = entry
        else:
            return None
        word = str(payload.get("word") or "").strip().lower()
        if not word:
            return None
        try:
            record = WordRecord.from_dict({**payload, "word": word})
        except (TypeError, ValueError):
            return None
        now = utc_now_iso()
        record.created_at = record.created_at or now
        record.updated_at = max(record.updated_at or now, record.created_at)
        return record

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> WordRecord:
        return WordRecord(
            word=row["word"],
            meaning=row["meaning"],
            image=row["image"],
            status_checked=bool(row["status_checked"]),
            status_favorite=bool(row["status_favorite"]),
            occurrence_count=row["occurrence_count"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
