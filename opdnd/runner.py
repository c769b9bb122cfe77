"""Command-line runner: open the configured store, load characters, run one command."""

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from typing import Any, List, Optional, TextIO

from pydantic import BaseModel

from opdnd.commands import CommandRegistry
from opdnd.config import Settings
from opdnd.database import DBManager, RemoteCharacterStore
from opdnd.database.store import CharacterStore
from opdnd.errors import AccessDenied, CharacterSheetError, ValidationError
from opdnd.services.character_service import CharacterService

logger = logging.getLogger(__name__)

# never echoed back to callers; still stored through Character.to_record()
PRIVATE_FIELDS = {"passcode"}


def open_store(settings: Settings, stack: ExitStack) -> CharacterStore:
    """The store named by the settings; SQLite connections close with ``stack``."""
    if settings.store == "rest":
        logger.info(f"Using remote store {settings.rest_url} (table {settings.table})")
        return RemoteCharacterStore(settings.rest_url, settings.rest_key, settings.table, settings.request_timeout)

    db = stack.enter_context(DBManager(settings.db_path))
    db.create_tables()
    logger.info(f"Using SQLite store {settings.db_path}")
    return db.characters


def to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", exclude=PRIVATE_FIELDS)
    if isinstance(result, (list, tuple)):
        return [to_jsonable(item) for item in result]
    if result is None:
        return {"status": "ok"}
    return result


def format_roster(service: CharacterService, include_hidden: bool = False) -> str:
    lines = []
    for c in service.list_characters(include_hidden=include_hidden):
        final = c.derived_final
        fruit = f" [{c.fruit.name}]" if c.fruit else ""
        hidden = " (hidden)" if c.hidden else ""
        lines.append(
            f"{c.name}{hidden} - {c.race} Lv {c.level}{fruit} | "
            f"HP {c.current_health}/{final.max_health} | "
            f"Resource {c.current_resource}/{final.max_resource} | "
            f"Reflex {final.reflex} | {c.id}"
        )
    return "\n".join(lines) if lines else "No characters yet."


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opdnd", description="Character sheet manager.")
    parser.add_argument("command", nargs="?", help="JSON command, e.g. '{\"name\": \"character.list\"}'")
    parser.add_argument("--dm", metavar="PIN", help="Act as DM (required for dm.* commands).")
    parser.add_argument("--list-commands", action="store_true", help="Print every command and its parameters.")
    return parser


def _fail(error: CharacterSheetError, out: TextIO) -> int:
    logger.error(f"{type(error).__name__}: {error}")
    print(json.dumps({"error": type(error).__name__, "message": str(error)}), file=out)
    return 1


def run(argv: Optional[List[str]] = None, settings: Optional[Settings] = None, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    args = _parser().parse_args(argv)
    try:
        settings = settings or Settings.from_env()
    except ValidationError as e:
        return _fail(e, out)

    with ExitStack() as stack:
        store = open_store(settings, stack)
        service = CharacterService.from_settings(store, settings)
        registry = CommandRegistry(service)

        if args.list_commands:
            print(json.dumps(registry.describe(), indent=2), file=out)
            return 0

        try:
            as_dm = False
            if args.dm is not None:
                if not service.verify_dm_pin(args.dm):
                    raise AccessDenied("Incorrect DM PIN.")
                as_dm = True

            service.reload()

            if not args.command:
                print(format_roster(service, include_hidden=as_dm), file=out)
                return 0

            try:
                payload = json.loads(args.command)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Command is not valid JSON: {e}") from e

            result = registry.execute(registry.parse(payload), as_dm=as_dm)
        except CharacterSheetError as e:
            return _fail(e, out)

        print(json.dumps(to_jsonable(result), indent=2), file=out)
        return 0
