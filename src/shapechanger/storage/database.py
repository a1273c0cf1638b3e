"""SQLite persistence for character documents.

Each character is stored as one JSON document row. Patching and item
edits happen in memory through DocumentCharacterStore; this module only
reads and writes whole documents.

Storage location: ``settings.storage.database_path`` (data/shapechanger.db).
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from shapechanger.core.config import get_settings
from shapechanger.core.exceptions import StorageError
from shapechanger.core.logging import get_logger
from shapechanger.models.character import CharacterRecord
from shapechanger.storage.store import DocumentCharacterStore


logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class CharacterRow:
    """Summary of a stored character.

    Attributes:
        id: Character id.
        name: Display name.
        owner: Owning user, if any.
        updated_at: When the document was last written.
    """

    id: str
    name: str
    owner: str | None
    updated_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> CharacterRow:
        """Create from database row."""
        return cls(
            id=row[0],
            name=row[1],
            owner=row[2],
            updated_at=datetime.fromisoformat(row[3]),
        )


# =============================================================================
# Database Store
# =============================================================================


class SQLiteCharacterStore(DocumentCharacterStore):
    """CharacterStore backed by a SQLite file.

    Every write runs in its own transaction; a failed write rolls back and
    the error propagates as StorageError. Store operations run in a worker
    thread, one at a time, so a read-modify-write never interleaves with
    another and sqlite3 never blocks the event loop.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        self.db_path = Path(db_path) if db_path is not None else get_settings().storage.database_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()
        logger.info("Character database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StorageError(
                f"Cannot open character database: {exc}",
                details={"path": str(self.db_path)},
            ) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(
                f"Character database error: {exc}",
                details={"path": str(self.db_path)},
            ) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    owner TEXT,
                    document TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_characters_owner
                ON characters(owner)
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # =========================================================================
    # Document Access
    # =========================================================================

    async def _run(self, func: Callable[..., T], /, *args: Any) -> T:
        return await asyncio.to_thread(self._locked, func, *args)

    def _locked(self, func: Callable[..., T], *args: Any) -> T:
        with self._lock:
            return func(*args)

    def _load(self, actor_id: str) -> dict[str, Any] | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT document FROM characters WHERE id = ?", (actor_id,)
            ).fetchone()
        return json.loads(row[0]) if row else None

    def _save(self, actor_id: str, document: dict[str, Any]) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO characters (id, name, owner, document, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    owner = excluded.owner,
                    document = excluded.document,
                    updated_at = excluded.updated_at
                """,
                (
                    actor_id,
                    document["name"],
                    document.get("owner"),
                    json.dumps(document),
                    datetime.now().isoformat(),
                ),
            )

    # =========================================================================
    # Character Operations
    # =========================================================================

    def add(self, record: CharacterRecord) -> None:
        """Insert or replace a character."""
        self._save(record.id, record.document())
        logger.info("Saved character", actor_id=record.id, name=record.name)

    def list_characters(self, owner: str | None = None) -> list[CharacterRow]:
        """List stored characters, optionally only those owned by ``owner``."""
        query = "SELECT id, name, owner, updated_at FROM characters"
        params: tuple[Any, ...] = ()
        if owner is not None:
            query += " WHERE owner = ?"
            params = (owner,)
        with self._get_connection() as conn:
            rows = conn.execute(query + " ORDER BY name", params).fetchall()
        return [CharacterRow.from_row(tuple(row)) for row in rows]

    def delete_character(self, actor_id: str) -> bool:
        """Delete a character.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            deleted = conn.execute("DELETE FROM characters WHERE id = ?", (actor_id,)).rowcount > 0
        if deleted:
            logger.info("Deleted character", actor_id=actor_id)
        return deleted


# Global instance
_store_instance: SQLiteCharacterStore | None = None


def get_character_store() -> SQLiteCharacterStore:
    """Get the global database-backed store.

    Returns:
        SQLiteCharacterStore singleton instance.
    """
    global _store_instance

    if _store_instance is None:
        _store_instance = SQLiteCharacterStore()

    return _store_instance


__all__ = [
    "CharacterRow",
    "SQLiteCharacterStore",
    "get_character_store",
]
