"""
Character sheet models.

Fundamental inputs (race, base stats, level, flat modifiers) are stored next to
the derived outputs (baseline and final). The derived blocks are caches: they are
always recomputed by the reconciler and never edited directly.
"""

import builtins
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

STAT_KEYS = ("str", "dex", "con", "int", "wis", "cha")
StatKey = Literal["str", "dex", "con", "int", "wis", "cha"]

MODIFIER_CHANNELS = ("health_mod", "resource_mod", "reflex_mod")
ModifierChannel = Literal["health_mod", "resource_mod", "reflex_mod"]

EQUIPMENT_FIELDS = ("item_key", "quantity", "custom_description")
EquipmentField = Literal["item_key", "quantity", "custom_description"]

DEFAULT_MELEE_DICE = "1d6"


class AbilityScores(BaseModel):
    # Field names are the sheet stat keys; "str" and "int" shadow the builtins
    # inside this class body, hence builtins.int in the annotations.
    str: builtins.int = Field(10, ge=1)
    dex: builtins.int = Field(10, ge=1)
    con: builtins.int = Field(10, ge=1)
    int: builtins.int = Field(10, ge=1)
    wis: builtins.int = Field(10, ge=1)
    cha: builtins.int = Field(10, ge=1)

    def get(self, stat: StatKey) -> builtins.int:
        return getattr(self, stat)


class FlatModifiers(BaseModel):
    """DM-only additive overrides. Survive level-ups and stat changes."""

    health_mod: int = 0
    resource_mod: int = 0
    reflex_mod: int = 0


class DerivedBaseline(BaseModel):
    base_health: int = 0
    base_resource: int = 0
    base_reflex: int = 0


class DerivedFinal(BaseModel):
    max_health: int = 1
    max_resource: int = 0
    reflex: int = 0


class MeleeProfile(BaseModel):
    dice_expression: str = DEFAULT_MELEE_DICE
    flat_bonus: int = 0

    def describe(self) -> str:
        return f"{self.dice_expression} + {self.flat_bonus}"


class FruitRef(BaseModel):
    name: str
    ability_text: str = ""


class EquipmentSlot(BaseModel):
    """Either names a catalog item (item_key) or is a free-text custom entry."""

    item_key: str = ""
    quantity: int = Field(1, ge=1)
    custom_description: str = ""


class ActiveEffect(BaseModel):
    name: str
    per_turn_cost: int = Field(0, ge=0)


class Skill(BaseModel):
    name: str
    description: str = ""


class CustomAction(BaseModel):
    name: str
    resource_cost: int = Field(0, ge=0)


class Character(BaseModel):
    # --- IDENTITY ---
    id: str = Field(..., description="Opaque unique id, primary key in the store.")
    name: str
    passcode: str = Field(..., description="Plaintext shared-secret gate, not real auth.")
    race: str
    hidden: bool = False

    # --- FUNDAMENTAL INPUTS ---
    level: int = Field(1, ge=1)
    base_stats: AbilityScores = Field(default_factory=AbilityScores)
    skill_points: int = Field(0, ge=0)
    flat_modifiers: FlatModifiers = Field(default_factory=FlatModifiers)

    # --- DERIVED (cache, recomputed on every mutation) ---
    derived_baseline: DerivedBaseline = Field(default_factory=DerivedBaseline)
    derived_final: DerivedFinal = Field(default_factory=DerivedFinal)

    # --- LIVE POOLS ---
    current_health: int = 0
    current_resource: int = 0

    # --- FLAVOR / LOADOUT ---
    melee_profile: MeleeProfile = Field(default_factory=MeleeProfile)
    fruit: Optional[FruitRef] = None
    equipment: List[EquipmentSlot] = Field(default_factory=list)
    active_effects: List[ActiveEffect] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    custom_actions: List[CustomAction] = Field(default_factory=list)

    def to_record(self) -> dict:
        """JSON-ready form written to the store."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: dict) -> "Character":
        return cls.model_validate(record)
