"""
Command objects.

Each mutation (and the few reads a client needs) is a discrete, validated
request. ``name`` identifies the command on the wire, ``handler`` is the
``CharacterService`` method it runs and ``dm_only`` gates it behind the DM PIN.
"""

from typing import Any, ClassVar, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from opdnd.models.character import EquipmentField, ModifierChannel, StatKey


class Command(BaseModel):
    model_config = ConfigDict(extra="forbid")

    handler: ClassVar[str] = ""
    dm_only: ClassVar[bool] = False
    # field name -> service parameter name, where "name" is taken by the command id
    renames: ClassVar[Dict[str, str]] = {}

    def arguments(self) -> Dict[str, Any]:
        """Keyword arguments for the service method."""
        args = self.model_dump(exclude={"name"})
        return {self.renames.get(k, k): v for k, v in args.items()}


class CharacterCommand(Command):
    character_id: str = Field(..., min_length=1, description="Target character id.")


class DMCommand(Command):
    dm_only: ClassVar[bool] = True


class DMCharacterCommand(CharacterCommand):
    dm_only: ClassVar[bool] = True


# --- READS ---

class ListCharacters(Command):
    """Visible (non-hidden) characters."""
    name: Literal["character.list"] = "character.list"
    handler: ClassVar[str] = "list_characters"


class Login(CharacterCommand):
    """Check a character's passcode and return the sheet."""
    name: Literal["character.login"] = "character.login"
    handler: ClassVar[str] = "authenticate"
    passcode: str


class GetCharacter(CharacterCommand):
    name: Literal["character.get"] = "character.get"
    handler: ClassVar[str] = "get_character"


class AvailableActions(CharacterCommand):
    name: Literal["character.available_actions"] = "character.available_actions"
    handler: ClassVar[str] = "available_actions"


class DescribeEquipment(CharacterCommand):
    name: Literal["character.describe_equipment"] = "character.describe_equipment"
    handler: ClassVar[str] = "describe_equipment"


# --- PLAYER ---

class CreateCharacter(Command):
    """Create a player character. Stats start at 10 plus racial bonuses."""
    name: Literal["character.create"] = "character.create"
    handler: ClassVar[str] = "create_character"
    character_name: str
    renames: ClassVar[Dict[str, str]] = {"character_name": "name"}
    passcode: str
    race_key: str
    start_with_fruit: bool = False


class LevelUp(CharacterCommand):
    """+1 level, +3 skill points, full restore."""
    name: Literal["character.level_up"] = "character.level_up"
    handler: ClassVar[str] = "level_up"


class IncreaseAbilityScore(CharacterCommand):
    """Spend one skill point for +1 on a stat."""
    name: Literal["character.increase_ability_score"] = "character.increase_ability_score"
    handler: ClassVar[str] = "increase_ability_score"
    stat: StatKey


class SpendSkillPoint(CharacterCommand):
    name: Literal["character.spend_skill_point"] = "character.spend_skill_point"
    handler: ClassVar[str] = "spend_skill_point"


class AddSkill(CharacterCommand):
    name: Literal["character.add_skill"] = "character.add_skill"
    handler: ClassVar[str] = "add_skill"
    skill_name: str
    renames: ClassVar[Dict[str, str]] = {"skill_name": "name"}
    description: str = ""


class ApplyDamage(CharacterCommand):
    name: Literal["character.apply_damage"] = "character.apply_damage"
    handler: ClassVar[str] = "apply_damage"
    amount: int


class Heal(CharacterCommand):
    name: Literal["character.heal"] = "character.heal"
    handler: ClassVar[str] = "heal"
    amount: int


class SpendResource(CharacterCommand):
    name: Literal["character.spend_resource"] = "character.spend_resource"
    handler: ClassVar[str] = "spend_resource"
    amount: int


class RegainResource(CharacterCommand):
    name: Literal["character.regain_resource"] = "character.regain_resource"
    handler: ClassVar[str] = "regain_resource"
    amount: int


class LongRest(CharacterCommand):
    name: Literal["character.long_rest"] = "character.long_rest"
    handler: ClassVar[str] = "long_rest"


class ShortRest(CharacterCommand):
    name: Literal["character.short_rest"] = "character.short_rest"
    handler: ClassVar[str] = "short_rest"


class AddEquipmentSlot(CharacterCommand):
    name: Literal["character.add_equipment_slot"] = "character.add_equipment_slot"
    handler: ClassVar[str] = "add_equipment_slot"
    item_key: str = ""
    quantity: int = 1
    custom_description: str = ""


class UpdateEquipmentSlot(CharacterCommand):
    name: Literal["character.update_equipment_slot"] = "character.update_equipment_slot"
    handler: ClassVar[str] = "update_equipment_slot"
    index: int
    field: EquipmentField
    value: Union[int, str]


class RemoveEquipmentSlot(CharacterCommand):
    name: Literal["character.remove_equipment_slot"] = "character.remove_equipment_slot"
    handler: ClassVar[str] = "remove_equipment_slot"
    index: int


class AddCustomAction(CharacterCommand):
    name: Literal["character.add_custom_action"] = "character.add_custom_action"
    handler: ClassVar[str] = "add_custom_action"
    action_name: str
    renames: ClassVar[Dict[str, str]] = {"action_name": "name"}
    resource_cost: int = 0


class UseAction(CharacterCommand):
    """Pay an action's cost; sustained actions become active effects."""
    name: Literal["character.use_action"] = "character.use_action"
    handler: ClassVar[str] = "use_action"
    action_name: str


class RemoveActiveEffect(CharacterCommand):
    name: Literal["character.remove_active_effect"] = "character.remove_active_effect"
    handler: ClassVar[str] = "remove_active_effect"
    effect: str
    renames: ClassVar[Dict[str, str]] = {"effect": "name"}


class ApplyUpkeep(CharacterCommand):
    """Charge the per-turn cost of active effects."""
    name: Literal["character.apply_upkeep"] = "character.apply_upkeep"
    handler: ClassVar[str] = "apply_upkeep"


# --- DM ---

class ListAllCharacters(DMCommand):
    """Every character, hidden NPCs included."""
    name: Literal["dm.list"] = "dm.list"
    handler: ClassVar[str] = "list_characters"
    include_hidden: Literal[True] = True


class CreateCustomCharacter(DMCommand):
    name: Literal["dm.create_custom"] = "dm.create_custom"
    handler: ClassVar[str] = "create_custom_character"
    character_name: str
    renames: ClassVar[Dict[str, str]] = {"character_name": "name"}
    race_key: str
    fruit_name: Optional[str] = None
    hidden: bool = False
    passcode: str = "0000"


class CreateRandomCharacter(DMCommand):
    """Random NPC, hidden by default."""
    name: Literal["dm.create_random"] = "dm.create_random"
    handler: ClassVar[str] = "create_random_character"
    hidden: bool = True


class SetFlatModifier(DMCharacterCommand):
    """Set a modifier channel to an absolute value."""
    name: Literal["dm.set_flat_modifier"] = "dm.set_flat_modifier"
    handler: ClassVar[str] = "set_flat_modifier"
    channel: ModifierChannel
    value: int


class AdjustLevel(DMCharacterCommand):
    name: Literal["dm.adjust_level"] = "dm.adjust_level"
    handler: ClassVar[str] = "adjust_level"
    delta: int


class SetAbilityScore(DMCharacterCommand):
    """Shift a stat by delta, ignoring skill points."""
    name: Literal["dm.set_ability_score"] = "dm.set_ability_score"
    handler: ClassVar[str] = "set_ability_score"
    stat: StatKey
    delta: int


class AdjustSkillPoints(DMCharacterCommand):
    name: Literal["dm.adjust_skill_points"] = "dm.adjust_skill_points"
    handler: ClassVar[str] = "adjust_skill_points"
    delta: int


class SetSkillPoints(DMCharacterCommand):
    name: Literal["dm.set_skill_points"] = "dm.set_skill_points"
    handler: ClassVar[str] = "set_skill_points"
    value: int


class SetMeleeProfile(DMCharacterCommand):
    name: Literal["dm.set_melee_profile"] = "dm.set_melee_profile"
    handler: ClassVar[str] = "set_melee_profile"
    dice_expression: str = "1d6"
    flat_bonus: int = 0


class SetDevilFruit(DMCharacterCommand):
    """Assign a Devil Fruit by name, or remove it with null / "none"."""
    name: Literal["dm.set_devil_fruit"] = "dm.set_devil_fruit"
    handler: ClassVar[str] = "set_devil_fruit"
    fruit_name: Optional[str] = None


class SetHidden(DMCharacterCommand):
    name: Literal["dm.set_hidden"] = "dm.set_hidden"
    handler: ClassVar[str] = "set_hidden"
    hidden: bool


class CopyCharacter(DMCharacterCommand):
    name: Literal["dm.copy"] = "dm.copy"
    handler: ClassVar[str] = "copy_character"


class DeleteCharacter(DMCharacterCommand):
    """Irreversible."""
    name: Literal["dm.delete"] = "dm.delete"
    handler: ClassVar[str] = "delete_character"
