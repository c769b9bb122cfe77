from opdnd.models.reference import DevilFruit, FruitAction

DEVIL_FRUITS = [
    DevilFruit(
        name="Command Command Fruit",
        ability_text="Allows the user to issue verbal commands that force non-player characters or enemies to act or pause against their will. If the command is resisted, they lose 1 turn instead.",
    ),
    DevilFruit(
        name="Vector Vector Fruit",
        ability_text="Allows the user to set a vector on a target they touch. The target is launched in the direction and distance of the vector set. Can be used on objects or people. Great for traversal or force launching.",
    ),
    DevilFruit(
        name="Pavo Pavo Fruit",
        ability_text="Allows the user to generate explosions at points they designate with feathers. The feathers stick to enemies or surfaces. After being placed, the user can trigger the explosions at will.",
    ),
    DevilFruit(
        name="Berry Berry Fruit",
        ability_text="Allows the user to manipulate, generate, or fire currency as a weapon. Sharp-edged coins can be launched with high velocity. Also allows absorption of currency into the body for mass and form.",
    ),
    DevilFruit(
        name="Storm Storm Fruit",
        ability_text="Grants the user control over wind and storms. Can summon heavy gusts, lightning, and storm clouds. Also allows limited flight by riding currents of wind.",
    ),
    DevilFruit(
        name="Zip Zip Fruit",
        ability_text="User can create zippers on any surface. Used to open portals, containers, or even split objects. Can create zipper-pockets to store items in space.",
    ),
    DevilFruit(
        name="Color Color Fruit",
        ability_text="User can drain the color from an object or person. Colorless entities become intangible or frozen. The user can re-apply color to animate or restore them.",
    ),
    DevilFruit(
        name="Lock Lock Fruit",
        ability_text="The user can 'lock' the position or state of an object. A locked door cannot be opened. A locked body cannot move. Locks last 1 turn unless broken by overwhelming force.",
    ),
]

# Starting actions granted by each fruit
FRUIT_ACTIONS = {
    "Command Command Fruit": [
        FruitAction(action_name="Command", resource_cost=15),
        FruitAction(action_name="Halt", resource_cost=10),
    ],
    "Vector Vector Fruit": [
        FruitAction(action_name="Set Vector", resource_cost=8),
        FruitAction(action_name="Vector Launch", resource_cost=12),
    ],
    "Pavo Pavo Fruit": [
        FruitAction(action_name="Place Feather", resource_cost=4),
        FruitAction(action_name="Detonate", resource_cost=10),
    ],
    "Berry Berry Fruit": [
        FruitAction(action_name="Coin Volley", resource_cost=8),
        FruitAction(action_name="Gold Plating", resource_cost=10, per_turn_resource_cost=3),
    ],
    "Storm Storm Fruit": [
        FruitAction(action_name="Gust", resource_cost=6),
        FruitAction(action_name="Lightning Strike", resource_cost=14),
        FruitAction(action_name="Wind Ride", resource_cost=8, per_turn_resource_cost=4),
    ],
    "Zip Zip Fruit": [
        FruitAction(action_name="Zip Portal", resource_cost=10),
        FruitAction(action_name="Zipper Pocket", resource_cost=5),
    ],
    "Color Color Fruit": [
        FruitAction(action_name="Drain Color", resource_cost=12, per_turn_resource_cost=5),
        FruitAction(action_name="Restore Color", resource_cost=6),
    ],
    "Lock Lock Fruit": [
        FruitAction(action_name="Lock", resource_cost=10),
        FruitAction(action_name="Unlock", resource_cost=2),
    ],
}
