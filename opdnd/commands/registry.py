import logging
from typing import Any, Dict, List, Type

import pydantic

from opdnd.commands import schemas as command_schemas
from opdnd.errors import AccessDenied, ValidationError

logger = logging.getLogger(__name__)


def _clean_schema(d: Any):
    """Recursively drop noise keys from a JSON schema."""
    if isinstance(d, dict):
        for key in ("title", "additionalProperties"):
            d.pop(key, None)
        for value in d.values():
            _clean_schema(value)
    elif isinstance(d, list):
        for item in d:
            _clean_schema(item)


class CommandRegistry:
    """
    Discovers command schemas and dispatches them to a CharacterService.

    Usage:
        registry = CommandRegistry(service)
        command = registry.parse({"name": "character.level_up", "character_id": "abc"})
        registry.execute(command)
    """

    def __init__(self, service):
        self.service = service
        self._types: Dict[str, Type[command_schemas.Command]] = {}
        self._discover_commands()

    def _discover_commands(self):
        for attr_name in dir(command_schemas):
            attr = getattr(command_schemas, attr_name)
            if (
                isinstance(attr, type)
                and issubclass(attr, command_schemas.Command)
                and "name" in attr.model_fields
            ):
                command_name = attr.model_fields["name"].default
                if not callable(getattr(self.service, attr.handler, None)):
                    raise TypeError(f"Command {command_name} points at missing handler '{attr.handler}'")
                self._types[command_name] = attr

        logger.debug(f"Registered {len(self._types)} commands")

    @property
    def command_names(self) -> List[str]:
        return sorted(self._types)

    def describe(self) -> List[Dict[str, Any]]:
        """Name, description, DM flag and parameter schema of every command."""
        described = []
        for command_name in self.command_names:
            command_type = self._types[command_name]
            schema = command_type.model_json_schema()
            properties = schema.get("properties", {}).copy()
            properties.pop("name", None)
            _clean_schema(properties)
            described.append(
                {
                    "name": command_name,
                    "description": (command_type.__doc__ or "").strip(),
                    "dm_only": command_type.dm_only,
                    "parameters": properties,
                    "required": [r for r in schema.get("required", []) if r != "name"],
                }
            )
        return described

    def parse(self, payload: Dict[str, Any]) -> command_schemas.Command:
        """Build a command from a plain dict; raises ValidationError when malformed."""
        if not isinstance(payload, dict):
            raise ValidationError("Command payload must be an object.")
        command_name = payload.get("name")
        command_type = self._types.get(command_name)
        if command_type is None:
            raise ValidationError(f"Unknown command '{command_name}'.")
        try:
            return command_type.model_validate(payload)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid '{command_name}' command: {e}") from e

    def execute(self, command: command_schemas.Command, as_dm: bool = False) -> Any:
        if command.name not in self._types:
            raise ValidationError(f"Unknown command type: {type(command).__name__}")
        if command.dm_only and not as_dm:
            logger.warning(f"Rejected DM-only command {command.name}")
            raise AccessDenied(f"'{command.name}' requires DM access.")

        handler = getattr(self.service, command.handler)
        logger.debug(f"Executing {command.name}")
        return handler(**command.arguments())
