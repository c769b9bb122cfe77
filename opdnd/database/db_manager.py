import sqlite3
import threading
from typing import Optional

from opdnd.database.repositories import CharacterRepository


class DBManager:
    """
    Database connection manager with repository-based access.

    Usage:
        with DBManager("opdnd.db") as db:
            db.create_tables()
            records = db.characters.list_characters()
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.conn = None
        self._lock = threading.RLock()

        # Repositories (initialized in __enter__)
        self.characters: Optional[CharacterRepository] = None

    def __enter__(self):
        # Threads wait up to 30s on a locked database instead of failing at once
        self.conn = sqlite3.connect(self.db_path, timeout=30.0, check_same_thread=False)

        if self.db_path != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL;")

        self.conn.row_factory = sqlite3.Row

        self.characters = CharacterRepository(self.conn, self._lock)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            self.conn.close()
            self.conn = None

    def create_tables(self):
        """Initialize all database tables."""
        if not self.conn:
            with self as db:
                db._create_all_tables()
        else:
            self._create_all_tables()

    def _create_all_tables(self):
        for repo in [self.characters]:
            if repo:
                repo.create_table()
