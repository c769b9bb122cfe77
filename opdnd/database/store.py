"""
Character store contract.

Any backend works as long as it behaves as a key/value store keyed by character
id with last-write-wins upserts. Records are plain JSON-ready dicts
(``Character.to_record()``). Implementations raise ``PersistenceFailure`` on any
error, with ``transient=True`` when a retry may succeed.

Note: there is no concurrency token. Two server instances writing the same id
race with last-write-wins; multi-instance deployments need a version check at
the store level before that is safe.
"""

from typing import Any, Dict, List, Protocol, runtime_checkable


@runtime_checkable
class CharacterStore(Protocol):
    def list_characters(self) -> List[Dict[str, Any]]:
        """Every stored record."""
        ...

    def upsert(self, character_id: str, record: Dict[str, Any]) -> None:
        """Create or overwrite the record for ``character_id``."""
        ...

    def insert(self, character_id: str, record: Dict[str, Any]) -> None:
        """Create the record; fails if ``character_id`` already exists."""
        ...

    def delete(self, character_id: str) -> None:
        """Remove the record. Deleting a missing id is not an error."""
        ...
