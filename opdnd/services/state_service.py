"""
Persistence boundary.

Every store call made by the services goes through here so retry policy and
logging live in one place. Transient failures are retried with exponential
backoff; permanent ones propagate on the first attempt.
"""

import logging
import time
from typing import Any, Callable, Dict, List, TypeVar

from opdnd.database.store import CharacterStore
from opdnd.errors import PersistenceFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def persist(
    operation: Callable[[], T],
    description: str,
    retries: int = 3,
    backoff: float = 0.2,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run a store operation, retrying transient failures.

    Args:
        operation: Zero-argument callable doing the actual store call
        description: Used in log lines, e.g. "upsert character:abc"
        retries: Total attempts (>= 1)
        backoff: Delay before the second attempt; doubles every attempt after
        sleep: Injected for tests

    Raises:
        PersistenceFailure: the last failure once attempts run out, or the first
            permanent one
    """
    attempts = max(1, retries)
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except PersistenceFailure as e:
            if not e.transient:
                logger.error(f"{description} failed permanently: {e}")
                raise
            if attempt == attempts:
                logger.error(f"{description} failed after {attempts} attempts: {e}")
                raise
            delay = backoff * (2 ** (attempt - 1))
            logger.warning(f"{description} attempt {attempt}/{attempts} failed ({e}); retrying in {delay:.2f}s")
            sleep(delay)


def load_all(store: CharacterStore, retries: int = 3, backoff: float = 0.2) -> List[Dict[str, Any]]:
    """Get every stored record."""
    return persist(store.list_characters, "list characters", retries, backoff)


def save(store: CharacterStore, character_id: str, record: Dict[str, Any], retries: int = 3, backoff: float = 0.2):
    """Create or overwrite one record."""
    persist(lambda: store.upsert(character_id, record), f"upsert character:{character_id}", retries, backoff)
    logger.debug(f"Saved character:{character_id}")


def create(store: CharacterStore, character_id: str, record: Dict[str, Any], retries: int = 3, backoff: float = 0.2):
    """Insert a brand new record; fails if the id already exists."""
    persist(lambda: store.insert(character_id, record), f"insert character:{character_id}", retries, backoff)
    logger.debug(f"Created character:{character_id}")


def remove(store: CharacterStore, character_id: str, retries: int = 3, backoff: float = 0.2):
    """Delete a record."""
    persist(lambda: store.delete(character_id), f"delete character:{character_id}", retries, backoff)
    logger.debug(f"Deleted character:{character_id}")
