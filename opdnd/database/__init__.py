from .db_manager import DBManager
from .remote_store import RemoteCharacterStore
from .store import CharacterStore

__all__ = ["CharacterStore", "DBManager", "RemoteCharacterStore"]
