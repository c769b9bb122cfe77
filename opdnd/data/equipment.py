from opdnd.models.reference import EquipmentItem as Item

EQUIPMENT = [
    # Weapons / Melee
    Item(name="Sword", damage_expression="Melee + 1d6", use_cost=2, range="Melee range", weight="light", description="A balanced blade for close combat."),
    Item(name="Hammer", damage_expression="Melee + 1d8", use_cost=2, range="Melee range", weight="heavy", description="A heavy striking tool used as a weapon."),
    Item(name="Shield", damage_expression="Melee", use_cost=1, range="Melee range", weight="heavy", description="Defensive equipment; can be used to bash."),
    Item(name="Axe", damage_expression="Melee + 1d8", use_cost=2, range="Melee range", weight="heavy", description="Single-hand or two-handed chopping weapon."),
    Item(name="Spear", damage_expression="Melee + 1d4", use_cost=2, range="Melee range + 5", weight="light", description="A thrusting spear with a bit of extra reach."),
    Item(name="Trident", damage_expression="Melee + 1d4", use_cost=2, range="Melee range + 5", weight="light", description="Three-pronged spear often used at sea."),
    Item(name="Knife", damage_expression="Melee + 1d4", use_cost=1, range="Melee range", weight="light", description="A small blade for close quarters."),
    Item(name="Knuckles", damage_expression="Melee + 1d4", use_cost=1, range="Melee range", weight="light", description="Reinforced striking implements."),
    Item(name="Chains", damage_expression="Melee + 1d6", use_cost=2, range="Melee range + 10", weight="heavy", description="Length of chain used to strike and entangle."),
    Item(name="Sythe", damage_expression="Melee + 1d6", use_cost=2, range="Melee range + 5", weight="heavy", description="Curved blade on a long handle; unwieldy but strong."),
    Item(name="Shigure", damage_expression="Melee + 1d8", use_cost=2, range="Melee range", weight="light", description="Named blade of fine craft."),
    # Ranged Firearms / Bows
    Item(name="Pistol", damage_expression="2d6", durability=8, use_cost=2, ammo_capacity=6, range="30ft - 60ft", weight="light", description="A standard 6-shot firearm."),
    Item(name="Rifle", damage_expression="2d8", durability=6, use_cost=3, ammo_capacity=1, range="30ft - 120ft", weight="heavy", description="Long gun with extended range."),
    Item(name="CrossBow", damage_expression="2d4", use_cost=2, ammo_capacity=1, range="30ft - 60ft", weight="light", description="Mechanical bow that fires bolts."),
    Item(name="Long Neck Rifle", damage_expression="2d8", durability=6, use_cost=3, ammo_capacity=1, range="30ft - 240ft", weight="heavy", description="Extreme-range rifle."),
    Item(name="Pistol+MagAttach", damage_expression="2d6", durability=10, use_cost=2, ammo_capacity=12, range="30ft - 60ft", weight="light", description="Pistol with an attached magazine for more shots."),
    # Tools / Misc
    Item(name="Fishing Rod", damage_expression="0", durability=20, use_cost=1, range="60ft", weight="light", description="Basic rod for fishing; also handy for utility."),
    # Dials
    Item(name="Ball Dial", use_cost=2, range="30ft", description="Skypiea dial that stores kinetic energy."),
    Item(name="Breath Dial", use_cost=2, description="Stores and releases breath/air."),
    Item(name="Flame Dial", damage_expression="2d6", use_cost=3, range="30ft", description="Produces flames from stored energy."),
    Item(name="Flash Dial", use_cost=2, description="Emits a blinding flash."),
    Item(name="Impact Dial", damage_expression="Depends", use_cost=3, range="5ft", description="Absorbs impact to release later."),
    Item(name="Lamp Dial", use_cost=1, description="Produces light."),
    Item(name="Reject Dial", damage_expression="Depends", use_cost=5, range="5ft", description="Powerful, risky output of stored force."),
    Item(name="Water Dial", use_cost=2, description="Stores water for later use."),
    # Explosives / Throwables
    Item(name="Hand Grenade", damage_expression="3d4", use_cost=3, ammo_capacity=1, range="60ft", description="Thrown explosive."),
    Item(name="Flare", use_cost=1, ammo_capacity=1, range="60ft", description="Signal flare."),
    Item(name="Lighter", use_cost=1, range="Melee Range", description="Creates flame."),
    Item(name="BlastPouch", damage_expression="2d8", use_cost=3, ammo_capacity=1, range="Melee Range", description="Small explosive packet."),
    Item(name="Disposable CL", damage_expression="3d10", use_cost=4, ammo_capacity=1, range="30ft - 60ft", description="Disposable explosive charge."),
    Item(name="CannonBall", damage_expression="3d8", use_cost=4, ammo_capacity=1, range="60ft - 120ft", weight="heavy", description="Cannon projectile."),
    Item(name="Explosive Barrel", damage_expression="4d10", use_cost=5, ammo_capacity=1, range="30ft", weight="heavy", description="Large explosive barrel."),
    # Utility / Kits
    Item(name="Medical Tools", use_cost=1, description="Precision tools for medical use."),
    Item(name="Medic Kit", use_cost=2, description="Supplies for stabilizing wounds."),
    Item(name="Ship Repairs", use_cost=2, weight="heavy", description="Tools & materials for ship repair."),
    Item(name="Iron Dial", damage_expression="Depends", use_cost=3, range="30ft", description="Dial that stores and releases metallic force."),
    Item(name="Fluid Pouch", use_cost=1, description="General container for liquids."),
]
