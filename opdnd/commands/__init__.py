from opdnd.commands.registry import CommandRegistry
from opdnd.commands.schemas import Command

__all__ = ["Command", "CommandRegistry"]
