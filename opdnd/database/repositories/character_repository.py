"""Repository for character records."""

import json
import logging
from typing import Any, Dict, List

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CharacterRepository(BaseRepository):
    """Key/value storage of character records, one JSON blob per id."""

    def create_table(self):
        with self._guard("create characters table"):
            self._execute(
                """CREATE TABLE IF NOT EXISTS characters (
                       id TEXT PRIMARY KEY,
                       data TEXT NOT NULL,
                       version INTEGER NOT NULL DEFAULT 1,
                       updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                   )"""
            )
            self._commit()

    def list_characters(self) -> List[Dict[str, Any]]:
        """All stored records in insertion order. Unreadable rows are skipped."""
        with self._guard("list characters"):
            rows = self._fetchall("SELECT id, data FROM characters ORDER BY rowid")

        records = []
        for row in rows:
            try:
                records.append(json.loads(row["data"]))
            except json.JSONDecodeError:
                logger.warning(f"Skipping character:{row['id']} with unreadable data")
        return records

    def upsert(self, character_id: str, record: Dict[str, Any]) -> int:
        """Create or overwrite a record. Returns the new version number."""
        data = json.dumps(record)
        with self._guard(f"upsert character:{character_id}"):
            cursor = self._execute(
                """INSERT INTO characters (id, data, version)
                   VALUES (?, ?, 1)
                   ON CONFLICT(id)
                   DO UPDATE SET
                       data = excluded.data,
                       version = version + 1,
                       updated_at = CURRENT_TIMESTAMP
                   RETURNING version""",
                (character_id, data),
            )
            row = cursor.fetchone()
            self._commit()
        return row["version"] if row else 1

    def insert(self, character_id: str, record: Dict[str, Any]) -> None:
        """Create a record; an existing id is rejected as a permanent failure."""
        with self._guard(f"insert character:{character_id}"):
            self._execute(
                "INSERT INTO characters (id, data, version) VALUES (?, ?, 1)",
                (character_id, json.dumps(record)),
            )
            self._commit()

    def delete(self, character_id: str) -> None:
        with self._guard(f"delete character:{character_id}"):
            self._execute("DELETE FROM characters WHERE id = ?", (character_id,))
            self._commit()

