"""Base repository for database operations."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import sqlite3
import threading
from typing import List, Optional

from opdnd.errors import PersistenceFailure


class BaseRepository(ABC):
    """Base class for all repositories with common DB operations."""

    def __init__(self, connection: sqlite3.Connection, lock: Optional[threading.RLock] = None):
        self.conn = connection
        # One connection is shared by every repository of a DBManager
        self._lock = lock or threading.RLock()

    @abstractmethod
    def create_table(self):
        """
        Creates the necessary table(s) for this repository.
        This method should be implemented by all subclasses.
        """
        pass

    @contextmanager
    def _guard(self, action: str):
        """Serialize access and turn sqlite errors into PersistenceFailure."""
        with self._lock:
            try:
                yield
            except sqlite3.IntegrityError as e:
                self._rollback()
                raise PersistenceFailure(f"{action} rejected: {e}", transient=False) from e
            except sqlite3.OperationalError as e:
                # "database is locked" / busy: worth a retry
                self._rollback()
                raise PersistenceFailure(f"{action} failed: {e}", transient=True) from e
            except sqlite3.Error as e:
                self._rollback()
                raise PersistenceFailure(f"{action} failed: {e}", transient=False) from e

    def _execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a query and return cursor."""
        return self.conn.execute(query, params)

    def _fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute and fetch one result."""
        cursor = self._execute(query, params)
        return cursor.fetchone()

    def _fetchall(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        """Execute and fetch all results."""
        cursor = self._execute(query, params)
        return cursor.fetchall()

    def _commit(self):
        """Commit transaction."""
        self.conn.commit()

    def _rollback(self):
        if self.conn.in_transaction:
            self.conn.rollback()
