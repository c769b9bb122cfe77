from opdnd.models.reference import DefaultAction

# Available to every character regardless of loadout
DEFAULT_ACTIONS = [
    DefaultAction(name="Move", resource_cost=0),
    DefaultAction(name="Run", resource_cost=0),
    DefaultAction(name="Swim", resource_cost=0),
    DefaultAction(name="Dash", resource_cost=0),
    DefaultAction(name="Dodge", resource_cost=10),
    DefaultAction(name="Jump", resource_cost=6),
    DefaultAction(name="Equip", resource_cost=2),
    DefaultAction(name="Block", resource_cost=5),
    DefaultAction(name="Unarmed Strike", resource_cost=5),
]
