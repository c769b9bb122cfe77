import random
import threading
import time

import pytest

from opdnd.errors import (
    AccessDenied,
    CharacterNotFound,
    FruitNotFound,
    InsufficientResource,
    InvalidAmount,
    PersistenceFailure,
    UnknownRace,
    UnknownStat,
    ValidationError,
)
from opdnd.services.character_service import CharacterService
from opdnd.services.invariant_validator import validate_character


# --- CREATION ---

def test_create_human(service, store, human):
    assert human.level == 1
    assert human.skill_points == 4
    assert human.base_stats.model_dump() == {k: 10 for k in ("str", "dex", "con", "int", "wis", "cha")}
    assert human.derived_baseline.base_health == 20
    assert human.derived_baseline.base_resource == 105
    assert human.derived_baseline.base_reflex == 7
    assert (human.current_health, human.current_resource) == (20, 105)
    assert human.melee_profile.flat_bonus == 0
    assert human.fruit is None
    assert ("insert", human.id) in store.calls
    assert store.records[human.id]["name"] == "Luffy"


def test_create_applies_racial_bonuses(service):
    fishman = service.create_character("Jinbe", "pw", "Fishman")
    assert fishman.base_stats.str == 13
    assert fishman.base_stats.wis == 9
    assert fishman.skill_points == 3
    # STR 13 -> +1 melee bonus
    assert fishman.melee_profile.flat_bonus == 1
    assert fishman.melee_profile.dice_expression == "1d6"


def test_create_with_random_fruit(service, reference):
    character = service.create_character("Ace", "pw", "Human", start_with_fruit=True)
    assert character.fruit is not None
    assert character.fruit.name in [f.name for f in reference.devil_fruits]


@pytest.mark.parametrize("name, passcode", [("", "pw"), ("  ", "pw"), ("Nami", ""), ("Nami", None)])
def test_create_requires_name_and_passcode(service, store, name, passcode):
    with pytest.raises(ValidationError):
        service.create_character(name, passcode, "Human")
    assert store.records == {}
    assert service.list_characters(include_hidden=True) == []


def test_create_unknown_race(service, store):
    with pytest.raises(UnknownRace):
        service.create_character("Nami", "pw", "Elf")
    assert store.records == {}


def test_ids_are_unique(service):
    ids = {service.create_character(f"C{i}", "pw", "Human").id for i in range(20)}
    assert len(ids) == 20


# --- LEVEL UP ---

def test_level_up_restores_pools(service, human):
    service.apply_damage(human.id, 15)
    service.spend_resource(human.id, 50)
    leveled = service.level_up(human.id)
    assert leveled.level == 2
    assert leveled.skill_points == 7
    assert leveled.derived_final.max_health == 24
    assert leveled.derived_final.max_resource == 110
    assert leveled.derived_final.reflex == 7
    assert (leveled.current_health, leveled.current_resource) == (24, 110)


def test_health_mod_survives_level_ups(service, human):
    boosted = service.set_flat_modifier(human.id, "health_mod", 5)
    assert boosted.derived_final.max_health == 25

    service.level_up(human.id)
    after = service.level_up(human.id)
    assert after.flat_modifiers.health_mod == 5
    assert after.derived_baseline.base_health == 28
    assert after.derived_final.max_health == 33
    assert after.current_health == 33


# --- ABILITY SCORES ---

def test_increase_ability_score_spends_a_point(service, human):
    updated = service.increase_ability_score(human.id, "con")
    assert updated.base_stats.con == 11
    assert updated.skill_points == 3
    assert updated.derived_final.max_health == 21
    # clamp only, no restore
    assert updated.current_health == 20


def test_increase_ability_score_without_points(service, store, human):
    service.set_skill_points(human.id, 0)
    before = service.get_character(human.id)
    writes = len(store.calls)

    with pytest.raises(InsufficientResource):
        service.increase_ability_score(human.id, "str")

    after = service.get_character(human.id)
    assert after.base_stats == before.base_stats
    assert after.skill_points == 0
    assert len(store.calls) == writes


def test_increase_unknown_stat(service, human):
    with pytest.raises(UnknownStat):
        service.increase_ability_score(human.id, "luck")


def test_stat_keys_are_case_insensitive(service, human):
    assert service.increase_ability_score(human.id, "DEX").base_stats.dex == 11


def test_set_ability_score_ignores_skill_points_and_floors_at_one(service, human):
    service.set_skill_points(human.id, 0)
    raised = service.set_ability_score(human.id, "str", 4)
    assert raised.base_stats.str == 14
    assert raised.skill_points == 0

    lowered = service.set_ability_score(human.id, "str", -50)
    assert lowered.base_stats.str == 1


# --- POOLS ---

def test_damage_never_goes_below_zero(service, human):
    service.set_flat_modifier(human.id, "health_mod", 5)
    hurt = service.apply_damage(human.id, 25 + 10)
    assert hurt.derived_final.max_health == 25
    assert hurt.current_health == 0


def test_negative_damage_is_rejected(service, human):
    with pytest.raises(InvalidAmount):
        service.apply_damage(human.id, -5)
    assert service.get_character(human.id).current_health == 20


@pytest.mark.parametrize("amount", ["abc", 2.5, True, None])
def test_non_numeric_amounts_are_rejected(service, human, amount):
    with pytest.raises(InvalidAmount):
        service.apply_damage(human.id, amount)


def test_numeric_strings_are_accepted(service, human):
    assert service.apply_damage(human.id, "5").current_health == 15


def test_heal_is_capped(service, human):
    service.apply_damage(human.id, 8)
    assert service.heal(human.id, 3).current_health == 15
    assert service.heal(human.id, 100).current_health == 20


def test_heal_rejects_negative(service, human):
    with pytest.raises(InvalidAmount):
        service.heal(human.id, -1)


# --- DM OVERRIDES ---

def test_negative_modifier_clamps_pools(service, human):
    weakened = service.set_flat_modifier(human.id, "health_mod", -10)
    assert weakened.derived_final.max_health == 10
    assert weakened.current_health == 10

    # raising the max again does not refill
    restored = service.set_flat_modifier(human.id, "health_mod", 0)
    assert restored.derived_final.max_health == 20
    assert restored.current_health == 10


def test_modifier_is_absolute_not_delta(service, human):
    service.set_flat_modifier(human.id, "reflex_mod", 3)
    again = service.set_flat_modifier(human.id, "reflex_mod", 3)
    assert again.flat_modifiers.reflex_mod == 3
    assert again.derived_final.reflex == 10


def test_modifier_accepts_camel_case_channel(service, human):
    assert service.set_flat_modifier(human.id, "resourceMod", "+5").derived_final.max_resource == 110


def test_modifier_rejects_bad_input(service, human):
    with pytest.raises(ValidationError):
        service.set_flat_modifier(human.id, "luck_mod", 1)
    with pytest.raises(ValidationError):
        service.set_flat_modifier(human.id, "health_mod", "five")


def test_adjust_level_up_clamps_instead_of_restoring(service, human):
    service.apply_damage(human.id, 5)
    updated = service.adjust_level(human.id, 2)
    assert updated.level == 3
    assert updated.skill_points == 7
    assert updated.derived_final.max_health == 28
    assert updated.current_health == 15


def test_adjust_level_floors(service, human):
    updated = service.adjust_level(human.id, -5)
    assert updated.level == 1
    assert updated.skill_points == 1
    again = service.adjust_level(human.id, -1)
    assert again.skill_points == 0


def test_adjust_level_down_clamps_pools(service, human):
    service.level_up(human.id)
    lowered = service.adjust_level(human.id, -1)
    assert lowered.derived_final.max_health == 20
    assert lowered.current_health == 20
    assert lowered.current_resource == 105


def test_adjust_level_zero_is_rejected(service, human):
    with pytest.raises(ValidationError):
        service.adjust_level(human.id, 0)


def test_skill_point_overrides(service, human):
    assert service.adjust_skill_points(human.id, 2).skill_points == 6
    assert service.adjust_skill_points(human.id, -10).skill_points == 0
    assert service.set_skill_points(human.id, -3).skill_points == 0
    assert service.set_skill_points(human.id, 9).skill_points == 9


def test_set_melee_profile(service, human):
    updated = service.set_melee_profile(human.id, " 2d4 + 1 ", 3)
    assert updated.melee_profile.dice_expression == "2d4+1"
    assert updated.melee_profile.flat_bonus == 3
    # no recomputation of derived values
    assert updated.derived_final == human.derived_final

    assert service.set_melee_profile(human.id, "", 0).melee_profile.dice_expression == "1d6"

    with pytest.raises(ValidationError):
        service.set_melee_profile(human.id, "a few dice", 0)


def test_set_devil_fruit(service, human):
    updated = service.set_devil_fruit(human.id, "storm storm fruit")
    assert updated.fruit.name == "Storm Storm Fruit"
    assert updated.fruit.ability_text

    with pytest.raises(FruitNotFound):
        service.set_devil_fruit(human.id, "Gum Gum Fruit")
    assert service.get_character(human.id).fruit.name == "Storm Storm Fruit"

    assert service.set_devil_fruit(human.id, "none").fruit is None
    service.set_devil_fruit(human.id, "Zip Zip Fruit")
    assert service.set_devil_fruit(human.id, None).fruit is None


def test_set_hidden_and_listing(service, human):
    service.set_hidden(human.id, True)
    assert service.list_characters() == []
    assert [c.id for c in service.list_characters(include_hidden=True)] == [human.id]


# --- COPY / DELETE ---

def test_copy_is_independent(service, store, human):
    service.increase_ability_score(human.id, "str")
    service.add_equipment_slot(human.id, "Sword")
    copy = service.copy_character(human.id)

    assert copy.id != human.id
    assert copy.name == "Luffy (Copy)"
    assert copy.base_stats == service.get_character(human.id).base_stats
    assert ("insert", copy.id) in store.calls

    service.set_ability_score(copy.id, "str", 5)
    service.update_equipment_slot(copy.id, 0, "quantity", 4)
    original = service.get_character(human.id)
    assert original.base_stats.str == 11
    assert original.equipment[0].quantity == 1


def test_copy_keeps_current_pools(service, human):
    service.apply_damage(human.id, 7)
    assert service.copy_character(human.id).current_health == 13


def test_delete(service, store, human):
    service.delete_character(human.id)
    assert human.id not in store.records
    with pytest.raises(CharacterNotFound):
        service.get_character(human.id)
    with pytest.raises(CharacterNotFound):
        service.level_up(human.id)
    assert human.id not in service._locks


def test_missing_character(service):
    with pytest.raises(CharacterNotFound) as exc:
        service.apply_damage("nope", 1)
    assert "nope" in str(exc.value)


# --- EQUIPMENT ---

def test_equipment_slots(service, human):
    service.add_equipment_slot(human.id, "Sword")
    service.add_equipment_slot(human.id, "", 1, "Straw hat")
    updated = service.update_equipment_slot(human.id, 0, "quantity", "2")
    assert [(s.item_key, s.quantity) for s in updated.equipment] == [("Sword", 2), ("", 1)]
    # equipment does not feed derivation
    assert updated.derived_final == human.derived_final

    described = service.describe_equipment(human.id)
    assert described[0]["stats"]["damage"] == "Melee + 1d6"
    assert described[1]["description"] == "Straw hat"

    remaining = service.remove_equipment_slot(human.id, 0)
    assert [s.custom_description for s in remaining.equipment] == ["Straw hat"]


def test_equipment_validation(service, human):
    with pytest.raises(ValidationError):
        service.add_equipment_slot(human.id, "Lightsaber")
    service.add_equipment_slot(human.id, "Pistol")
    with pytest.raises(ValidationError):
        service.update_equipment_slot(human.id, 3, "quantity", 2)
    with pytest.raises(ValidationError):
        service.update_equipment_slot(human.id, 0, "quantity", 0)
    with pytest.raises(ValidationError):
        service.update_equipment_slot(human.id, 0, "weight", "heavy")
    with pytest.raises(ValidationError):
        service.remove_equipment_slot(human.id, -1)


# --- ACCESS ---

def test_authenticate(service, human):
    assert service.authenticate(human.id, "1234").id == human.id
    with pytest.raises(AccessDenied):
        service.authenticate(human.id, "0000")


def test_verify_dm_pin(service):
    assert service.verify_dm_pin("5637")
    assert not service.verify_dm_pin("1111")


# --- PERSISTENCE FAILURES ---

def test_permanent_failure_leaves_state_unchanged(service, store, human):
    store.fail_next(transient=False)
    with pytest.raises(PersistenceFailure):
        service.level_up(human.id)
    assert service.get_character(human.id).level == 1
    assert store.records[human.id]["level"] == 1


def test_transient_failures_are_retried(service, store, human):
    store.fail_next(count=2, transient=True)
    leveled = service.level_up(human.id)
    assert leveled.level == 2
    assert store.records[human.id]["level"] == 2
    assert store.calls.count(("upsert", human.id)) == 3


def test_retries_run_out(service, store, human):
    store.fail_next(count=3, transient=True)
    with pytest.raises(PersistenceFailure):
        service.apply_damage(human.id, 5)
    assert service.get_character(human.id).current_health == 20


def test_failed_create_is_not_kept(service, store):
    store.fail_next()
    with pytest.raises(PersistenceFailure):
        service.create_character("Zoro", "pw", "Human")
    assert service.list_characters(include_hidden=True) == []


def test_failed_delete_keeps_character(service, store, human):
    store.fail_next()
    with pytest.raises(PersistenceFailure):
        service.delete_character(human.id)
    assert service.get_character(human.id).id == human.id


def test_returned_records_are_copies(service, human):
    human.base_stats.str = 99
    assert service.get_character(human.id).base_stats.str == 10


# --- RELOAD ---

def test_reload_rebuilds_and_reconciles(store, reference, human):
    record = store.records[human.id]
    record["derived_final"]["max_health"] = 999
    record["current_health"] = 500
    store.records["broken"] = {"id": "broken", "name": "?"}
    bad_race = dict(record, id="elf", race="Elf")
    store.records["elf"] = bad_race

    fresh = CharacterService(store, reference, backoff=0)
    assert fresh.reload() == 1

    loaded = fresh.get_character(human.id)
    assert loaded.derived_final.max_health == 20
    assert loaded.current_health == 20
    # the stale record was written back
    assert store.records[human.id]["derived_final"]["max_health"] == 20
    assert ("upsert", "broken") not in store.calls


def test_reload_skips_records_that_are_not_objects(store, reference, human):
    store.records["list"] = [1, 2, 3]
    store.records["text"] = "Luffy"
    fresh = CharacterService(store, reference, backoff=0)
    assert fresh.reload() == 1
    assert [c.id for c in fresh.list_characters()] == [human.id]


def test_reload_skips_duplicate_ids(store, reference, human):
    store.list_characters = lambda: [dict(store.records[human.id]), dict(store.records[human.id], name="Twin")]
    fresh = CharacterService(store, reference, backoff=0)
    assert fresh.reload() == 1
    assert fresh.get_character(human.id).name == "Luffy"


def test_reload_failure_keeps_previous_map(service, store, human):
    store.records[human.id]["current_health"] = 500
    store.fail_next()
    with pytest.raises(PersistenceFailure):
        service.reload()
    assert service.get_character(human.id).current_health == 20


# --- CONCURRENCY ---

def test_concurrent_damage_is_serialized(service, store, human):
    upsert = store.upsert

    def slow_upsert(character_id, record):
        time.sleep(0.001)
        upsert(character_id, record)

    store.upsert = slow_upsert
    hits = 16
    barrier = threading.Barrier(hits)
    errors = []

    def hit():
        barrier.wait()
        try:
            service.apply_damage(human.id, 1)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=hit) for _ in range(hits)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert service.get_character(human.id).current_health == 20 - hits
    assert store.records[human.id]["current_health"] == 20 - hits


# --- INVARIANTS ---

def test_invariants_hold_over_random_mutations(service, reference):
    rng = random.Random(7)
    ids = [service.create_character(f"P{i}", "pw", race).id for i, race in enumerate(reference.race_keys[:4])]
    operations = [
        lambda cid: service.level_up(cid),
        lambda cid: service.increase_ability_score(cid, rng.choice(["str", "con", "int", "wis", "dex"])),
        lambda cid: service.apply_damage(cid, rng.randint(0, 40)),
        lambda cid: service.heal(cid, rng.randint(0, 40)),
        lambda cid: service.spend_resource(cid, rng.randint(0, 80)),
        lambda cid: service.set_flat_modifier(cid, rng.choice(["health_mod", "resource_mod", "reflex_mod"]), rng.randint(-60, 30)),
        lambda cid: service.adjust_level(cid, rng.choice([-2, -1, 1, 2])),
        lambda cid: service.set_ability_score(cid, rng.choice(["con", "dex", "int"]), rng.randint(-8, 8)),
        lambda cid: service.short_rest(cid),
    ]

    for _ in range(300):
        cid = rng.choice(ids)
        try:
            character = rng.choice(operations)(cid)
        except InsufficientResource:
            character = service.get_character(cid)
        assert 0 <= character.current_health <= character.derived_final.max_health
        assert 0 <= character.current_resource <= character.derived_final.max_resource
        assert validate_character(character, reference) == []
