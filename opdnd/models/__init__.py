from opdnd.models.character import (
    AbilityScores,
    ActiveEffect,
    Character,
    CustomAction,
    DerivedBaseline,
    DerivedFinal,
    EquipmentSlot,
    FlatModifiers,
    FruitRef,
    MeleeProfile,
    Skill,
)
from opdnd.models.reference import (
    ActionOption,
    DefaultAction,
    DevilFruit,
    EquipmentItem,
    FruitAction,
    Race,
)

__all__ = [
    "AbilityScores",
    "ActiveEffect",
    "Character",
    "CustomAction",
    "DerivedBaseline",
    "DerivedFinal",
    "EquipmentSlot",
    "FlatModifiers",
    "FruitRef",
    "MeleeProfile",
    "Skill",
    "ActionOption",
    "DefaultAction",
    "DevilFruit",
    "EquipmentItem",
    "FruitAction",
    "Race",
]
