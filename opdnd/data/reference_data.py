"""
Lookup container over the static tables.

Built once at startup (``ReferenceData.default()``) and shared read-only by the
derivation engine and the character service.
"""

from typing import Dict, List, Optional, Sequence

from opdnd.errors import FruitNotFound, UnknownRace
from opdnd.models.reference import DefaultAction, DevilFruit, EquipmentItem, FruitAction, Race


class ReferenceData:
    def __init__(
        self,
        races: Sequence[Race],
        devil_fruits: Sequence[DevilFruit],
        fruit_actions: Dict[str, Sequence[FruitAction]],
        equipment: Sequence[EquipmentItem],
        default_actions: Sequence[DefaultAction],
    ):
        self._races: Dict[str, Race] = {r.key: r for r in races}
        self.devil_fruits: tuple = tuple(devil_fruits)
        self._fruit_actions = {name: tuple(actions) for name, actions in fruit_actions.items()}
        self._equipment: Dict[str, EquipmentItem] = {item.name: item for item in equipment}
        self.default_actions: tuple = tuple(default_actions)

    @classmethod
    def default(cls) -> "ReferenceData":
        from opdnd.data.actions import DEFAULT_ACTIONS
        from opdnd.data.devil_fruits import DEVIL_FRUITS, FRUIT_ACTIONS
        from opdnd.data.equipment import EQUIPMENT
        from opdnd.data.races import RACES

        return cls(RACES, DEVIL_FRUITS, FRUIT_ACTIONS, EQUIPMENT, DEFAULT_ACTIONS)

    # --- races ---

    @property
    def race_keys(self) -> List[str]:
        return list(self._races)

    def race(self, key: str) -> Race:
        try:
            return self._races[key]
        except KeyError:
            raise UnknownRace(f"Race '{key}' is not in the race table.") from None

    # --- devil fruits ---

    def find_fruit(self, name: str) -> DevilFruit:
        """Case-insensitive lookup by fruit name."""
        wanted = (name or "").strip().lower()
        for fruit in self.devil_fruits:
            if fruit.name.lower() == wanted:
                return fruit
        raise FruitNotFound(f"Devil Fruit '{name}' not found.")

    def fruit_actions(self, fruit_name: str) -> tuple:
        return self._fruit_actions.get(fruit_name, ())

    # --- equipment ---

    def equipment_item(self, name: str) -> Optional[EquipmentItem]:
        return self._equipment.get(name)
