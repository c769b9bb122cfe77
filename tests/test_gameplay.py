import random
import re

import pytest

from opdnd.errors import FruitNotFound, InsufficientResource, InvalidAmount, UnknownRace, ValidationError
from opdnd.services.character_service import CharacterService


@pytest.fixture
def stormy(service, human):
    """The Human fixture holding the Storm Storm Fruit."""
    return service.set_devil_fruit(human.id, "Storm Storm Fruit")


# --- RESOURCE POOL / RESTS ---

def test_spend_and_regain_resource(service, human):
    assert service.spend_resource(human.id, 30).current_resource == 75
    assert service.spend_resource(human.id, 500).current_resource == 0
    assert service.regain_resource(human.id, 40).current_resource == 40
    assert service.regain_resource(human.id, 500).current_resource == 105


def test_resource_amounts_must_be_non_negative(service, human):
    with pytest.raises(InvalidAmount):
        service.spend_resource(human.id, -1)
    with pytest.raises(InvalidAmount):
        service.regain_resource(human.id, -1)


def test_long_rest(service, human):
    service.apply_damage(human.id, 15)
    service.spend_resource(human.id, 100)
    rested = service.long_rest(human.id)
    assert rested.current_health == 15
    assert rested.current_resource == 105

    service.apply_damage(human.id, 2)
    assert service.long_rest(human.id).current_health == 20


def test_short_rest(service, human):
    service.spend_resource(human.id, 100)
    # 5 + floor(105 * 0.5)
    assert service.short_rest(human.id).current_resource == 57
    assert service.short_rest(human.id).current_resource == 105


# --- SKILLS ---

def test_spend_skill_point(service, human):
    assert service.spend_skill_point(human.id).skill_points == 3
    service.set_skill_points(human.id, 0)
    with pytest.raises(InsufficientResource):
        service.spend_skill_point(human.id)


def test_add_skill(service, human):
    updated = service.add_skill(human.id, "Haki", "Observation")
    assert [(s.name, s.description) for s in updated.skills] == [("Haki", "Observation")]
    with pytest.raises(ValidationError):
        service.add_skill(human.id, " ")


# --- ACTIONS ---

def test_default_actions_always_available(service, human):
    names = [a.name for a in service.available_actions(human.id)]
    assert names[:3] == ["Move", "Run", "Swim"]
    assert "Unarmed Strike" in names


def test_equipment_actions_are_listed_once(service, human):
    service.add_equipment_slot(human.id, "Sword")
    service.add_equipment_slot(human.id, "Sword")
    service.add_equipment_slot(human.id, "", 1, "Rope")
    equipment = [a for a in service.available_actions(human.id) if a.kind == "equipment"]
    assert [(a.name, a.resource_cost) for a in equipment] == [("Use Sword", 2)]


def test_fruit_actions_are_listed(service, stormy):
    fruit = [a for a in service.available_actions(stormy.id) if a.kind == "devil_fruit"]
    assert [a.name for a in fruit] == ["Gust", "Lightning Strike", "Wind Ride"]
    assert fruit[2].per_turn_cost == 4


def test_custom_actions(service, human):
    service.add_custom_action(human.id, "Gomu Punch", 12)
    custom = [a for a in service.available_actions(human.id) if a.kind == "custom"]
    assert [(a.name, a.resource_cost) for a in custom] == [("Gomu Punch", 12)]

    with pytest.raises(ValidationError):
        service.add_custom_action(human.id, "Dodge", 1)
    with pytest.raises(InvalidAmount):
        service.add_custom_action(human.id, "Kick", -3)


def test_use_action_spends_resource(service, human):
    assert service.use_action(human.id, "Dodge").current_resource == 95
    service.add_equipment_slot(human.id, "Rifle")
    assert service.use_action(human.id, "Use Rifle").current_resource == 92


def test_use_action_needs_enough_resource(service, human):
    service.spend_resource(human.id, 100)
    with pytest.raises(InsufficientResource):
        service.use_action(human.id, "Dodge")
    assert service.get_character(human.id).current_resource == 5


def test_use_unknown_action(service, human):
    with pytest.raises(ValidationError):
        service.use_action(human.id, "Gear Second")


def test_sustained_action_becomes_effect_once(service, stormy):
    service.use_action(stormy.id, "Wind Ride")
    updated = service.use_action(stormy.id, "Wind Ride")
    assert [(e.name, e.per_turn_cost) for e in updated.active_effects] == [("Wind Ride", 4)]
    assert updated.current_resource == 105 - 16

    # one-shot actions add no effect
    assert len(service.use_action(stormy.id, "Gust").active_effects) == 1


def test_upkeep_charges_effects(service, stormy):
    service.use_action(stormy.id, "Wind Ride")
    assert service.apply_upkeep(stormy.id).current_resource == 105 - 8 - 4


def test_upkeep_ends_effects_when_unaffordable(service, stormy):
    service.use_action(stormy.id, "Wind Ride")
    service.spend_resource(stormy.id, 95)
    updated = service.apply_upkeep(stormy.id)
    assert updated.active_effects == []
    assert updated.current_resource == 2


def test_remove_active_effect(service, stormy):
    service.use_action(stormy.id, "Wind Ride")
    assert service.remove_active_effect(stormy.id, "Wind Ride").active_effects == []
    with pytest.raises(ValidationError):
        service.remove_active_effect(stormy.id, "Wind Ride")


def test_changing_fruit_ends_its_effects(service, stormy):
    service.use_action(stormy.id, "Wind Ride")
    assert service.set_devil_fruit(stormy.id, "Berry Berry Fruit").active_effects == []


# --- DM CREATION ---

def test_create_custom_character(service):
    npc = service.create_custom_character("Buggy", "Human", fruit_name="zip zip fruit", hidden=True)
    assert npc.hidden is True
    assert npc.passcode == "0000"
    assert npc.fruit.name == "Zip Zip Fruit"
    assert (npc.current_health, npc.current_resource) == (20, 105)


def test_create_custom_character_validates(service):
    with pytest.raises(FruitNotFound):
        service.create_custom_character("Buggy", "Human", fruit_name="Chop Chop Fruit")
    with pytest.raises(UnknownRace):
        service.create_custom_character("Buggy", "Pirate")
    with pytest.raises(ValidationError):
        service.create_custom_character("", "Human")
    assert service.create_custom_character("Alvida", "Human", fruit_name="none").fruit is None


def test_create_random_character(store, reference):
    service = CharacterService(store, reference, backoff=0, rng=random.Random(42))
    for _ in range(25):
        npc = service.create_random_character()
        assert npc.hidden is True
        assert npc.passcode == "0000"
        assert re.fullmatch(r"NPC \d{3}", npc.name)
        assert npc.race in reference.race_keys
        assert all(6 <= v <= 20 for v in npc.base_stats.model_dump().values())
        assert npc.current_health == npc.derived_final.max_health
    assert len(store.records) == 25


def test_random_character_can_be_visible(service):
    assert service.create_random_character(hidden=False).hidden is False
