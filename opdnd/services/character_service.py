"""
Character Reconciler
====================
Owns the authoritative in-memory map of characters and is the single choke
point every mutation passes through.

Pipeline (``_apply_mutation``):
1.  **Copy:** Deep-copy the current record; the live one is never touched.
2.  **Mutate:** Apply the operation's field edits to the copy.
3.  **Derive:** Recompute baseline and final stats from the fundamental inputs.
4.  **Pools:** Clamp current health/resource into range (or full-restore).
5.  **Check:** Run the invariant validator; a failure here is a bug.
6.  **Persist:** Write through to the store (with retry).
7.  **Swap:** Only now replace the in-memory record.

Any exception before step 7 leaves both the map and the store untouched.

The store is a write-through cache of the map. It is read only by ``reload()``.
Mutations of one character are serialized by a per-id lock; there is no
cross-instance concurrency token (see ``opdnd.database.store``).
"""

import logging
import random
import re
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional

import pydantic

from opdnd.config import DEFAULT_DM_PIN, Settings
from opdnd.data.reference_data import ReferenceData
from opdnd.database.store import CharacterStore
from opdnd.errors import (
    AccessDenied,
    CatalogLookupError,
    CharacterNotFound,
    InsufficientResource,
    InvalidAmount,
    InvariantViolation,
    UnknownStat,
    ValidationError,
)
from opdnd.models.character import (
    DEFAULT_MELEE_DICE,
    EQUIPMENT_FIELDS,
    MODIFIER_CHANNELS,
    STAT_KEYS,
    AbilityScores,
    ActiveEffect,
    Character,
    CustomAction,
    EquipmentSlot,
    FruitRef,
    MeleeProfile,
    Skill,
)
from opdnd.models.reference import ActionOption, DevilFruit, Race
from opdnd.rules import actions as action_rules
from opdnd.rules.derivation import CANONICAL_FORMULAS, FormulaSet, ability_modifier, derive
from opdnd.services import state_service
from opdnd.services.invariant_validator import validate_character

logger = logging.getLogger(__name__)

LEVEL_UP_SKILL_POINTS = 3
LONG_REST_HEAL = 10
SHORT_REST_RESOURCE_FRACTION = 0.5
RANDOM_STAT_SPREAD = 2
RANDOM_STAT_RANGE = (6, 20)
RANDOM_FRUIT_CHANCE = 0.4
NPC_PASSCODE = "0000"

DICE_RE = re.compile(r"^\s*(\d+)\s*d\s*(\d+)\s*([+-]\s*\d+)?\s*$", re.IGNORECASE)

# camelCase channel names used by older records and clients
_CHANNEL_ALIASES = {"healthMod": "health_mod", "resourceMod": "resource_mod", "reflexMod": "reflex_mod"}


# =============================================================================
# INPUT COERCION
# =============================================================================

def _to_int(value: Any, what: str) -> int:
    """Accept ints, integral floats and numeric strings ("+5"); reject the rest."""
    if isinstance(value, bool):
        raise ValidationError(f"{what} must be an integer, got {value!r}.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{what} must be an integer, got {value!r}.")


def _amount(value: Any, what: str = "Amount") -> int:
    try:
        amount = _to_int(value, what)
    except ValidationError as e:
        raise InvalidAmount(str(e)) from None
    if amount < 0:
        raise InvalidAmount(f"{what} must be >= 0, got {amount}.")
    return amount


def _required(value: Optional[str], what: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{what} must not be empty.")
    return text


def _stat_key(stat: str) -> str:
    key = (stat or "").strip().lower()
    if key not in STAT_KEYS:
        raise UnknownStat(f"Unknown ability score '{stat}'. Expected one of {', '.join(STAT_KEYS)}.")
    return key


def _channel(channel: str) -> str:
    key = _CHANNEL_ALIASES.get(channel, channel)
    if key not in MODIFIER_CHANNELS:
        raise ValidationError(f"Unknown modifier channel '{channel}'. Expected one of {', '.join(MODIFIER_CHANNELS)}.")
    return key


def _dice(expression: Optional[str]) -> str:
    text = (expression or "").strip()
    if not text:
        return DEFAULT_MELEE_DICE
    if not DICE_RE.match(text):
        raise ValidationError(f"Invalid dice expression '{expression}'. Expected e.g. '1d6' or '2d4+1'.")
    return re.sub(r"\s+", "", text).lower()


class CharacterService:
    def __init__(
        self,
        store: CharacterStore,
        reference: Optional[ReferenceData] = None,
        formulas: FormulaSet = CANONICAL_FORMULAS,
        retries: int = 3,
        backoff: float = 0.2,
        dm_pin: str = DEFAULT_DM_PIN,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.reference = reference or ReferenceData.default()
        self.formulas = formulas
        self.retries = retries
        self.backoff = backoff
        self.dm_pin = dm_pin
        self.rng = rng or random.Random()

        self._characters: Dict[str, Character] = {}
        self._map_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    @classmethod
    def from_settings(
        cls,
        store: CharacterStore,
        settings: Settings,
        reference: Optional[ReferenceData] = None,
        rng: Optional[random.Random] = None,
    ) -> "CharacterService":
        return cls(
            store,
            reference=reference,
            retries=settings.persist_retries,
            backoff=settings.persist_backoff,
            dm_pin=settings.dm_pin,
            rng=rng,
        )

    # =========================================================================
    # RECONCILIATION CORE
    # =========================================================================

    def _lock_for(self, character_id: str) -> threading.Lock:
        with self._map_lock:
            return self._locks.setdefault(character_id, threading.Lock())

    def _current(self, character_id: str) -> Character:
        with self._map_lock:
            character = self._characters.get(character_id)
        if character is None:
            raise CharacterNotFound(character_id)
        return character

    def _other_ids(self, character_id: str) -> List[str]:
        with self._map_lock:
            return [cid for cid in self._characters if cid != character_id]

    def _reconcile(self, character: Character, restore_pools: bool = False) -> Character:
        """Recompute derived stats in place and bring the pools back into range."""
        race = self.reference.race(character.race)
        baseline, final = derive(race, character.base_stats, character.level, character.flat_modifiers, self.formulas)
        character.derived_baseline = baseline
        character.derived_final = final

        if restore_pools:
            character.current_health = final.max_health
            character.current_resource = final.max_resource
        else:
            character.current_health = min(max(0, character.current_health), final.max_health)
            character.current_resource = min(max(0, character.current_resource), final.max_resource)
        return character

    def _check(self, character: Character, check_ids: bool = False):
        other_ids = self._other_ids(character.id) if check_ids else None
        problems = validate_character(character, self.reference, self.formulas, other_ids)
        if problems:
            raise InvariantViolation(character.id, problems)

    def _store_in_map(self, character: Character):
        with self._map_lock:
            self._characters[character.id] = character

    def _apply_mutation(
        self,
        character_id: str,
        mutate: Callable[[Character], None],
        operation: str,
        restore_pools: bool = False,
    ) -> Character:
        with self._lock_for(character_id):
            draft = self._current(character_id).model_copy(deep=True)
            mutate(draft)
            self._reconcile(draft, restore_pools)
            self._check(draft)
            state_service.save(self.store, draft.id, draft.to_record(), self.retries, self.backoff)
            self._store_in_map(draft)
        logger.debug(f"character:{character_id} {operation}")
        return draft.model_copy(deep=True)

    def _new_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex
            with self._map_lock:
                if candidate not in self._characters:
                    return candidate

    def _add(self, character: Character, operation: str) -> Character:
        """Reconcile, validate and insert a brand new record."""
        with self._lock_for(character.id):
            self._reconcile(character, restore_pools=operation != "copy")
            self._check(character, check_ids=True)
            state_service.create(self.store, character.id, character.to_record(), self.retries, self.backoff)
            self._store_in_map(character)
        logger.info(f"character:{character.id} {operation} '{character.name}' ({character.race})")
        return character.model_copy(deep=True)

    def _build(
        self,
        name: str,
        passcode: str,
        race: Race,
        base_stats: AbilityScores,
        fruit: Optional[DevilFruit] = None,
        hidden: bool = False,
    ) -> Character:
        return Character(
            id=self._new_id(),
            name=name,
            passcode=passcode,
            race=race.key,
            hidden=hidden,
            level=1,
            base_stats=base_stats,
            skill_points=race.starting_skill_points,
            melee_profile=MeleeProfile(flat_bonus=ability_modifier(base_stats.str)),
            fruit=FruitRef(name=fruit.name, ability_text=fruit.ability_text) if fruit else None,
        )

    @staticmethod
    def _racial_stats(race: Race) -> AbilityScores:
        return AbilityScores(**{k: max(1, 10 + race.stat_bonuses.get(k, 0)) for k in STAT_KEYS})

    # =========================================================================
    # LOADING / READS
    # =========================================================================

    def reload(self) -> int:
        """
        Replace the in-memory map with the store's contents.

        Each record is reconciled on the way in; records whose cached derived
        values or pools were stale are written back. Unreadable records,
        unknown races and duplicate ids are skipped with a warning. The map is
        swapped only after every write-back succeeded.

        Returns:
            Number of characters loaded
        """
        records = state_service.load_all(self.store, self.retries, self.backoff)

        loaded: Dict[str, Character] = {}
        stale: List[Character] = []
        for record in records:
            try:
                character = Character.from_record(record)
            except pydantic.ValidationError as e:
                record_id = record.get("id", "?") if isinstance(record, dict) else "?"
                logger.warning(f"Skipping unreadable character record {record_id}: {e}")
                continue
            if character.id in loaded:
                logger.warning(f"Skipping duplicate character:{character.id}")
                continue

            before = character.model_copy(deep=True)
            try:
                self._reconcile(character)
            except CatalogLookupError as e:
                logger.warning(f"Skipping character:{character.id}: {e}")
                continue
            if character != before:
                stale.append(character)
            loaded[character.id] = character

        for character in stale:
            logger.info(f"character:{character.id} had stale derived values; writing back")
            state_service.save(self.store, character.id, character.to_record(), self.retries, self.backoff)

        with self._map_lock:
            self._characters = loaded
        logger.info(f"Loaded {len(loaded)} characters ({len(stale)} reconciled)")
        return len(loaded)

    def get_character(self, character_id: str) -> Character:
        return self._current(character_id).model_copy(deep=True)

    def list_characters(self, include_hidden: bool = False) -> List[Character]:
        with self._map_lock:
            characters = list(self._characters.values())
        return [c.model_copy(deep=True) for c in characters if include_hidden or not c.hidden]

    def authenticate(self, character_id: str, passcode: str) -> Character:
        character = self._current(character_id)
        if (passcode or "").strip() != character.passcode:
            logger.info(f"character:{character_id} rejected passcode")
            raise AccessDenied("Incorrect passcode.")
        return character.model_copy(deep=True)

    def verify_dm_pin(self, pin: str) -> bool:
        return (pin or "").strip() == self.dm_pin

    # =========================================================================
    # CREATION / DELETION
    # =========================================================================

    def create_character(self, name: str, passcode: str, race_key: str, start_with_fruit: bool = False) -> Character:
        """
        Player character creation.

        Ability scores start at 10 plus the race's bonuses; the melee bonus
        defaults to the STR modifier. Pools start full.
        """
        name = _required(name, "Name")
        passcode = _required(passcode, "Passcode")
        race = self.reference.race(race_key)

        fruit = self.rng.choice(self.reference.devil_fruits) if start_with_fruit and self.reference.devil_fruits else None
        character = self._build(name, passcode, race, self._racial_stats(race), fruit)
        return self._add(character, "create")

    def create_custom_character(
        self,
        name: str,
        race_key: str,
        fruit_name: Optional[str] = None,
        hidden: bool = False,
        passcode: str = NPC_PASSCODE,
    ) -> Character:
        name = _required(name, "Name")
        passcode = _required(passcode, "Passcode")
        race = self.reference.race(race_key)
        fruit = None
        if fruit_name and fruit_name.strip().lower() != "none":
            fruit = self.reference.find_fruit(fruit_name)

        character = self._build(name, passcode, race, self._racial_stats(race), fruit, hidden)
        return self._add(character, "create_custom")

    def create_random_character(self, hidden: bool = True) -> Character:
        """Random NPC: random race, jittered stats, 40% chance of a Devil Fruit."""
        race = self.reference.race(self.rng.choice(self.reference.race_keys))
        low, high = RANDOM_STAT_RANGE
        stats = AbilityScores(
            **{
                k: min(high, max(low, 10 + race.stat_bonuses.get(k, 0) + self.rng.randint(-RANDOM_STAT_SPREAD, RANDOM_STAT_SPREAD)))
                for k in STAT_KEYS
            }
        )
        fruit = None
        if self.reference.devil_fruits and self.rng.random() < RANDOM_FRUIT_CHANCE:
            fruit = self.rng.choice(self.reference.devil_fruits)

        name = f"NPC {self.rng.randint(100, 999)}"
        character = self._build(name, NPC_PASSCODE, race, stats, fruit, hidden)
        return self._add(character, "create_random")

    def copy_character(self, character_id: str) -> Character:
        """Independent duplicate: new id, deep-copied fields, ' (Copy)' name suffix."""
        with self._lock_for(character_id):
            source = self._current(character_id)
            duplicate = source.model_copy(deep=True, update={"id": self._new_id(), "name": f"{source.name} (Copy)"})
        return self._add(duplicate, "copy")

    def delete_character(self, character_id: str):
        with self._lock_for(character_id):
            self._current(character_id)
            state_service.remove(self.store, character_id, self.retries, self.backoff)
            with self._map_lock:
                self._characters.pop(character_id, None)
                self._locks.pop(character_id, None)
        logger.info(f"character:{character_id} deleted")

    # =========================================================================
    # PROGRESSION
    # =========================================================================

    def level_up(self, character_id: str) -> Character:
        """+1 level, +3 skill points, pools fully restored."""

        def mutate(c: Character):
            c.level += 1
            c.skill_points += LEVEL_UP_SKILL_POINTS

        return self._apply_mutation(character_id, mutate, "level_up", restore_pools=True)

    def increase_ability_score(self, character_id: str, stat: str) -> Character:
        key = _stat_key(stat)

        def mutate(c: Character):
            if c.skill_points <= 0:
                raise InsufficientResource(f"{c.name} has no skill points to spend.")
            setattr(c.base_stats, key, c.base_stats.get(key) + 1)
            c.skill_points -= 1

        return self._apply_mutation(character_id, mutate, f"increase_ability_score {key}")

    def spend_skill_point(self, character_id: str) -> Character:
        """Skill-tree spend: costs one skill point, no stat change."""

        def mutate(c: Character):
            if c.skill_points <= 0:
                raise InsufficientResource(f"{c.name} has no skill points to spend.")
            c.skill_points -= 1

        return self._apply_mutation(character_id, mutate, "spend_skill_point")

    def add_skill(self, character_id: str, name: str, description: str = "") -> Character:
        name = _required(name, "Skill name")
        return self._apply_mutation(
            character_id,
            lambda c: c.skills.append(Skill(name=name, description=(description or "").strip())),
            f"add_skill {name}",
        )

    # =========================================================================
    # POOLS
    # =========================================================================

    def apply_damage(self, character_id: str, amount: Any) -> Character:
        amount = _amount(amount, "Damage")

        def mutate(c: Character):
            c.current_health = max(0, c.current_health - amount)

        return self._apply_mutation(character_id, mutate, f"apply_damage {amount}")

    def heal(self, character_id: str, amount: Any) -> Character:
        amount = _amount(amount, "Heal amount")

        def mutate(c: Character):
            c.current_health = min(c.derived_final.max_health, c.current_health + amount)

        return self._apply_mutation(character_id, mutate, f"heal {amount}")

    def spend_resource(self, character_id: str, amount: Any) -> Character:
        amount = _amount(amount, "Resource amount")

        def mutate(c: Character):
            c.current_resource = max(0, c.current_resource - amount)

        return self._apply_mutation(character_id, mutate, f"spend_resource {amount}")

    def regain_resource(self, character_id: str, amount: Any) -> Character:
        amount = _amount(amount, "Resource amount")

        def mutate(c: Character):
            c.current_resource = min(c.derived_final.max_resource, c.current_resource + amount)

        return self._apply_mutation(character_id, mutate, f"regain_resource {amount}")

    def long_rest(self, character_id: str) -> Character:
        """+10 health (capped) and a full resource pool."""

        def mutate(c: Character):
            c.current_health = min(c.derived_final.max_health, c.current_health + LONG_REST_HEAL)
            c.current_resource = c.derived_final.max_resource

        return self._apply_mutation(character_id, mutate, "long_rest")

    def short_rest(self, character_id: str) -> Character:
        """Regain half the resource pool (rounded down, capped)."""

        def mutate(c: Character):
            regained = int(c.derived_final.max_resource * SHORT_REST_RESOURCE_FRACTION)
            c.current_resource = min(c.derived_final.max_resource, c.current_resource + regained)

        return self._apply_mutation(character_id, mutate, "short_rest")

    # =========================================================================
    # DM OVERRIDES
    # =========================================================================

    def set_flat_modifier(self, character_id: str, channel: str, value: Any) -> Character:
        """Set one modifier channel to an absolute value. Pools are clamped, never restored."""
        key = _channel(channel)
        value = _to_int(value, "Modifier value")
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c.flat_modifiers, key, value),
            f"set_flat_modifier {key}={value}",
        )

    def adjust_level(self, character_id: str, delta: Any) -> Character:
        delta = _to_int(delta, "Level change")
        if delta == 0:
            raise ValidationError("Level change must not be zero.")

        def mutate(c: Character):
            c.level = max(1, c.level + delta)
            step = LEVEL_UP_SKILL_POINTS if delta > 0 else -LEVEL_UP_SKILL_POINTS
            c.skill_points = max(0, c.skill_points + step)

        return self._apply_mutation(character_id, mutate, f"adjust_level {delta:+d}")

    def set_ability_score(self, character_id: str, stat: str, delta: Any) -> Character:
        """Shift one ability score by ``delta`` (floor 1), ignoring skill points."""
        key = _stat_key(stat)
        delta = _to_int(delta, "Ability score change")
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c.base_stats, key, max(1, c.base_stats.get(key) + delta)),
            f"set_ability_score {key} {delta:+d}",
        )

    def adjust_skill_points(self, character_id: str, delta: Any) -> Character:
        delta = _to_int(delta, "Skill point change")
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c, "skill_points", max(0, c.skill_points + delta)),
            f"adjust_skill_points {delta:+d}",
        )

    def set_skill_points(self, character_id: str, value: Any) -> Character:
        value = _to_int(value, "Skill points")
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c, "skill_points", max(0, value)),
            f"set_skill_points {value}",
        )

    def set_melee_profile(self, character_id: str, dice_expression: Optional[str], flat_bonus: Any) -> Character:
        profile = MeleeProfile(dice_expression=_dice(dice_expression), flat_bonus=_to_int(flat_bonus, "Melee bonus"))
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c, "melee_profile", profile),
            f"set_melee_profile {profile.describe()}",
        )

    def set_devil_fruit(self, character_id: str, fruit_name: Optional[str]) -> Character:
        """
        Assign a fruit by name (case-insensitive) or remove it with None / "" /
        "none". Active effects that came from the previous fruit end with it.
        """
        text = (fruit_name or "").strip()
        fruit = None if not text or text.lower() == "none" else self.reference.find_fruit(text)

        def mutate(c: Character):
            if c.fruit:
                old_actions = {a.action_name for a in self.reference.fruit_actions(c.fruit.name)}
                c.active_effects = [e for e in c.active_effects if e.name not in old_actions]
            c.fruit = FruitRef(name=fruit.name, ability_text=fruit.ability_text) if fruit else None

        return self._apply_mutation(character_id, mutate, f"set_devil_fruit {fruit.name if fruit else None}")

    def set_hidden(self, character_id: str, hidden: bool) -> Character:
        return self._apply_mutation(
            character_id,
            lambda c: setattr(c, "hidden", bool(hidden)),
            f"set_hidden {bool(hidden)}",
        )

    # =========================================================================
    # EQUIPMENT
    # =========================================================================

    def _check_item_key(self, item_key: Optional[str]) -> str:
        key = (item_key or "").strip()
        if key and self.reference.equipment_item(key) is None:
            raise ValidationError(f"'{key}' is not in the equipment catalog.")
        return key

    @staticmethod
    def _slot_index(character: Character, index: Any) -> int:
        position = _to_int(index, "Equipment slot index")
        if not 0 <= position < len(character.equipment):
            raise ValidationError(f"No equipment slot at index {position}.")
        return position

    def add_equipment_slot(
        self,
        character_id: str,
        item_key: str = "",
        quantity: Any = 1,
        custom_description: str = "",
    ) -> Character:
        slot = EquipmentSlot(
            item_key=self._check_item_key(item_key),
            quantity=self._quantity(quantity),
            custom_description=(custom_description or "").strip(),
        )
        return self._apply_mutation(
            character_id,
            lambda c: c.equipment.append(slot),
            f"add_equipment_slot {slot.item_key or 'custom'}",
        )

    @staticmethod
    def _quantity(value: Any) -> int:
        quantity = _to_int(value, "Quantity")
        if quantity < 1:
            raise ValidationError(f"Quantity must be >= 1, got {quantity}.")
        return quantity

    def update_equipment_slot(self, character_id: str, index: Any, field: str, value: Any) -> Character:
        if field not in EQUIPMENT_FIELDS:
            raise ValidationError(f"Unknown equipment field '{field}'. Expected one of {', '.join(EQUIPMENT_FIELDS)}.")
        if field == "item_key":
            value = self._check_item_key(value)
        elif field == "quantity":
            value = self._quantity(value)
        else:
            value = str(value or "").strip()

        def mutate(c: Character):
            position = self._slot_index(c, index)
            setattr(c.equipment[position], field, value)

        return self._apply_mutation(character_id, mutate, f"update_equipment_slot {index} {field}")

    def remove_equipment_slot(self, character_id: str, index: Any) -> Character:
        def mutate(c: Character):
            del c.equipment[self._slot_index(c, index)]

        return self._apply_mutation(character_id, mutate, f"remove_equipment_slot {index}")

    def describe_equipment(self, character_id: str) -> List[Dict[str, Any]]:
        """Each slot resolved against the catalog; custom slots keep their text."""
        character = self._current(character_id)
        described = []
        for index, slot in enumerate(character.equipment):
            item = self.reference.equipment_item(slot.item_key) if slot.item_key else None
            described.append(
                {
                    "index": index,
                    "name": slot.item_key or "Custom",
                    "quantity": slot.quantity,
                    "description": slot.custom_description or (item.description if item else ""),
                    "stats": item.visible_stats() if item else {},
                    "use_cost": item.use_cost if item else 0,
                }
            )
        return described

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def available_actions(self, character_id: str) -> List[ActionOption]:
        return action_rules.available_actions(self._current(character_id), self.reference)

    def add_custom_action(self, character_id: str, name: str, resource_cost: Any = 0) -> Character:
        name = _required(name, "Action name")
        cost = _amount(resource_cost, "Action cost")

        def mutate(c: Character):
            if action_rules.find_action(c, self.reference, name):
                raise ValidationError(f"An action named '{name}' already exists.")
            c.custom_actions.append(CustomAction(name=name, resource_cost=cost))

        return self._apply_mutation(character_id, mutate, f"add_custom_action {name}")

    def use_action(self, character_id: str, action_name: str) -> Character:
        """
        Pay an action's resource cost. Actions with a per-turn cost also become
        an active effect (once) that ``apply_upkeep`` keeps charging.
        """

        def mutate(c: Character):
            action = action_rules.find_action(c, self.reference, action_name)
            if action is None:
                raise ValidationError(f"'{action_name}' is not an available action.")
            if c.current_resource < action.resource_cost:
                raise InsufficientResource(
                    f"{action.name} costs {action.resource_cost}, only {c.current_resource} available."
                )
            c.current_resource -= action.resource_cost
            if action.per_turn_cost and all(e.name != action.name for e in c.active_effects):
                c.active_effects.append(ActiveEffect(name=action.name, per_turn_cost=action.per_turn_cost))

        return self._apply_mutation(character_id, mutate, f"use_action {action_name}")

    def remove_active_effect(self, character_id: str, name: str) -> Character:
        def mutate(c: Character):
            remaining = [e for e in c.active_effects if e.name != name]
            if len(remaining) == len(c.active_effects):
                raise ValidationError(f"'{name}' is not an active effect.")
            c.active_effects = remaining

        return self._apply_mutation(character_id, mutate, f"remove_active_effect {name}")

    def apply_upkeep(self, character_id: str) -> Character:
        """Charge every active effect's per-turn cost; drop them all if unaffordable."""

        def mutate(c: Character):
            total = sum(e.per_turn_cost for e in c.active_effects)
            if c.current_resource >= total:
                c.current_resource -= total
            else:
                logger.info(f"character:{c.id} cannot sustain effects ({total} > {c.current_resource}); ending them")
                c.active_effects = []

        return self._apply_mutation(character_id, mutate, "apply_upkeep")
