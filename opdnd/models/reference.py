"""Rows of the immutable reference tables loaded at startup."""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from opdnd.models.character import StatKey


class Race(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    description: str = ""
    stat_bonuses: Dict[StatKey, int] = Field(default_factory=dict)
    base_health: int
    base_resource: int
    base_reflex: int
    run_speed: int = 30
    starting_skill_points: int = 3


class DevilFruit(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    ability_text: str = ""


class FruitAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    action_name: str
    resource_cost: int = 0
    per_turn_resource_cost: int = 0


# Catalog cells hold "n/a" where a stat does not apply
CatalogValue = Union[int, str]


class EquipmentItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    damage_expression: str = "n/a"
    durability: CatalogValue = "n/a"
    use_cost: int = 0
    ammo_capacity: CatalogValue = "n/a"
    range: str = "n/a"
    weight: str = "light"
    description: str = ""

    def visible_stats(self) -> Dict[str, CatalogValue]:
        """Stats worth showing on a sheet (drops the 'n/a' placeholders)."""
        stats = {
            "damage": self.damage_expression,
            "range": self.range,
            "ammo": self.ammo_capacity,
            "durability": self.durability,
        }
        shown = {k: v for k, v in stats.items() if v not in (None, "", "n/a")}
        shown["weight"] = self.weight or "n/a"
        return shown


class DefaultAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    resource_cost: int = 0


class ActionOption(BaseModel):
    """One entry of a character's action list, whatever its source."""

    name: str
    resource_cost: int = 0
    per_turn_cost: int = 0
    kind: str = "default"  # default | equipment | devil_fruit | custom
    item_name: Optional[str] = None
