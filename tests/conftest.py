import copy
import random

import pytest

from opdnd.data.reference_data import ReferenceData
from opdnd.errors import PersistenceFailure
from opdnd.services.character_service import CharacterService


class MockCharacterStore:
    """In-memory CharacterStore with failure injection."""

    def __init__(self):
        self.records = {}
        self.calls = []
        # queue of PersistenceFailure to raise on the next write calls
        self.failures = []

    def _maybe_fail(self):
        if self.failures:
            raise self.failures.pop(0)

    def list_characters(self):
        self.calls.append(("list",))
        return [copy.deepcopy(r) for r in self.records.values()]

    def upsert(self, character_id, record):
        self.calls.append(("upsert", character_id))
        self._maybe_fail()
        self.records[character_id] = copy.deepcopy(record)

    def insert(self, character_id, record):
        self.calls.append(("insert", character_id))
        self._maybe_fail()
        if character_id in self.records:
            raise PersistenceFailure(f"duplicate id {character_id}")
        self.records[character_id] = copy.deepcopy(record)

    def delete(self, character_id):
        self.calls.append(("delete", character_id))
        self._maybe_fail()
        self.records.pop(character_id, None)

    def fail_next(self, count=1, transient=False):
        for _ in range(count):
            self.failures.append(PersistenceFailure("injected failure", transient=transient))


@pytest.fixture
def store():
    return MockCharacterStore()


@pytest.fixture
def reference():
    return ReferenceData.default()


@pytest.fixture
def service(store, reference):
    return CharacterService(store, reference, retries=3, backoff=0, rng=random.Random(1234))


@pytest.fixture
def human(service):
    """Level-1 Human with all stats at 10 and no fruit."""
    return service.create_character("Luffy", "1234", "Human")

