import pytest

from opdnd.commands import CommandRegistry
from opdnd.commands.schemas import LevelUp, SetFlatModifier
from opdnd.errors import AccessDenied, ValidationError
from opdnd.models import Character


@pytest.fixture
def registry(service):
    return CommandRegistry(service)


def test_every_command_is_registered(registry):
    names = registry.command_names
    assert "character.level_up" in names
    assert "dm.set_flat_modifier" in names
    assert all(n.startswith(("character.", "dm.")) for n in names)


def test_parse_builds_typed_command(registry, human):
    command = registry.parse({"name": "character.level_up", "character_id": human.id})
    assert isinstance(command, LevelUp)


def test_execute_player_command(registry, service, human):
    command = registry.parse({"name": "character.apply_damage", "character_id": human.id, "amount": 6})
    result = registry.execute(command)
    assert isinstance(result, Character)
    assert service.get_character(human.id).current_health == 14


def test_renamed_arguments_reach_the_service(registry):
    created = registry.execute(
        registry.parse(
            {
                "name": "character.create",
                "character_name": "Usopp",
                "passcode": "sniper",
                "race_key": "Human",
            }
        )
    )
    assert created.name == "Usopp"

    with_skill = registry.execute(
        registry.parse(
            {"name": "character.add_skill", "character_id": created.id, "skill_name": "Lying", "description": "Expert"}
        )
    )
    assert with_skill.skills[0].name == "Lying"


def test_dm_command_requires_dm(registry, service, human):
    command = SetFlatModifier(character_id=human.id, channel="health_mod", value=5)
    with pytest.raises(AccessDenied):
        registry.execute(command)
    assert service.get_character(human.id).flat_modifiers.health_mod == 0

    registry.execute(command, as_dm=True)
    assert service.get_character(human.id).derived_final.max_health == 25


def test_dm_list_includes_hidden(registry, service, human):
    service.set_hidden(human.id, True)
    assert registry.execute(registry.parse({"name": "character.list"})) == []
    listed = registry.execute(registry.parse({"name": "dm.list"}), as_dm=True)
    assert [c.id for c in listed] == [human.id]


def test_login_command(registry, human):
    command = registry.parse({"name": "character.login", "character_id": human.id, "passcode": "wrong"})
    with pytest.raises(AccessDenied):
        registry.execute(command)


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "character.fly", "character_id": "x"},
        {"character_id": "x"},
        {"name": "character.apply_damage", "character_id": "x"},
        {"name": "character.apply_damage", "character_id": "x", "amount": "lots"},
        {"name": "character.level_up", "character_id": "x", "extra": 1},
        {"name": "dm.set_flat_modifier", "character_id": "x", "channel": "luck_mod", "value": 1},
        {"name": "character.level_up", "character_id": ""},
    ],
)
def test_malformed_payloads(registry, payload):
    with pytest.raises(ValidationError):
        registry.parse(payload)


def test_payload_must_be_an_object(registry):
    with pytest.raises(ValidationError):
        registry.parse(["character.list"])


def test_service_errors_propagate(registry, human):
    command = registry.parse({"name": "character.apply_damage", "character_id": human.id, "amount": -1})
    with pytest.raises(ValidationError):
        registry.execute(command)


def test_describe(registry):
    described = {d["name"]: d for d in registry.describe()}
    damage = described["character.apply_damage"]
    assert damage["dm_only"] is False
    assert set(damage["required"]) == {"character_id", "amount"}
    assert "name" not in damage["parameters"]
    assert described["dm.delete"]["dm_only"] is True
    assert described["dm.delete"]["description"] == "Irreversible."
