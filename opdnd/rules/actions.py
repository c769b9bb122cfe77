"""Action list for a character: defaults, equipment uses, fruit actions, custom."""

from typing import List, Optional

from opdnd.data.reference_data import ReferenceData
from opdnd.models.character import Character
from opdnd.models.reference import ActionOption


def equipment_actions(character: Character, reference: ReferenceData) -> List[ActionOption]:
    """One 'Use <item>' per distinct catalog item in the equipment list."""
    seen = set()
    actions = []
    for slot in character.equipment:
        if not slot.item_key or slot.item_key in seen:
            continue
        seen.add(slot.item_key)
        item = reference.equipment_item(slot.item_key)
        actions.append(
            ActionOption(
                name=f"Use {slot.item_key}",
                resource_cost=item.use_cost if item else 0,
                kind="equipment",
                item_name=slot.item_key,
            )
        )
    return actions


def fruit_actions(character: Character, reference: ReferenceData) -> List[ActionOption]:
    if not character.fruit:
        return []
    return [
        ActionOption(
            name=a.action_name,
            resource_cost=a.resource_cost,
            per_turn_cost=a.per_turn_resource_cost,
            kind="devil_fruit",
        )
        for a in reference.fruit_actions(character.fruit.name)
    ]


def available_actions(character: Character, reference: ReferenceData) -> List[ActionOption]:
    defaults = [
        ActionOption(name=a.name, resource_cost=a.resource_cost, kind="default")
        for a in reference.default_actions
    ]
    custom = [
        ActionOption(name=a.name, resource_cost=a.resource_cost, kind="custom")
        for a in character.custom_actions
    ]
    return defaults + equipment_actions(character, reference) + fruit_actions(character, reference) + custom


def find_action(character: Character, reference: ReferenceData, name: str) -> Optional[ActionOption]:
    for action in available_actions(character, reference):
        if action.name == name:
            return action
    return None
