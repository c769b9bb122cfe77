"""
Error taxonomy for the character sheet engine.

Every failure raised by the services derives from ``CharacterSheetError`` so
callers (command layer, entry point) can catch one type. A raised error always
means the operation was aborted and no state changed.
"""


class CharacterSheetError(Exception):
    """Base class for all engine errors."""


class ValidationError(CharacterSheetError, ValueError):
    """Malformed mutation input (empty name, non-numeric value, bad index...)."""


class InvalidAmount(ValidationError):
    """A damage/heal/spend amount that is negative or not an integer."""


class CatalogLookupError(ValidationError, LookupError):
    """Reference to an entry that does not exist in a static table."""


class UnknownRace(CatalogLookupError):
    pass


class FruitNotFound(CatalogLookupError):
    pass


class UnknownStat(CatalogLookupError):
    pass


class InsufficientResource(CharacterSheetError):
    """Not enough skill points / resource to perform the operation."""


class AccessDenied(CharacterSheetError):
    """Wrong passcode, wrong DM PIN, or a DM-only command without DM rights."""


class CharacterNotFound(CharacterSheetError, KeyError):
    def __init__(self, character_id: str):
        super().__init__(character_id)
        self.character_id = character_id

    def __str__(self) -> str:
        return f"Character '{self.character_id}' not found."


class InvariantViolation(CharacterSheetError):
    """A reconciled record still breaks a character invariant."""

    def __init__(self, character_id: str, problems: list):
        self.character_id = character_id
        self.problems = list(problems)
        super().__init__(f"Character '{character_id}' violates invariants: {'; '.join(self.problems)}")


class PersistenceFailure(CharacterSheetError):
    """The store rejected or could not complete a read/write."""

    def __init__(self, message: str, transient: bool = False):
        super().__init__(message)
        self.transient = transient
