from .base_repository import BaseRepository
from .character_repository import CharacterRepository

__all__ = [
    "BaseRepository",
    "CharacterRepository",
]
