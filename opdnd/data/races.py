from opdnd.models.reference import Race

RACES = [
    Race(
        key="Human",
        description="Humans are average in every way. +4 skill points at start. Default race with no bonuses or penalties.",
        stat_bonuses={},
        base_health=20,
        base_resource=100,
        base_reflex=5,
        run_speed=30,
        starting_skill_points=4,
    ),
    Race(
        key="Fishman",
        description="Swim speed 60ft, can breathe underwater, +3 STR, +1 CON, +1 DEX, -1 WIS",
        stat_bonuses={"str": 3, "con": 1, "dex": 1, "wis": -1},
        base_health=22,
        base_resource=100,
        base_reflex=6,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="SharkFishman",
        description="Same as Fishman with enhanced bite and combat traits",
        stat_bonuses={"str": 4, "con": 2, "dex": 1, "wis": -1},
        base_health=24,
        base_resource=100,
        base_reflex=6,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="Mink",
        description="Electro Punch trait. High reflex and speed. STR+1, DEX+2, WIS+1",
        stat_bonuses={"str": 1, "dex": 2, "wis": 1},
        base_health=20,
        base_resource=100,
        base_reflex=7,
        run_speed=35,
        starting_skill_points=3,
    ),
    Race(
        key="Skypiean",
        description="Inhabitants of sky islands. DEX+1, INT+2, WIS+1, CON-1",
        stat_bonuses={"dex": 1, "int": 2, "wis": 1, "con": -1},
        base_health=18,
        base_resource=110,
        base_reflex=6,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="Shandian",
        description="Skypiean subrace. Better strength and mobility. STR+2, DEX+1, WIS+1, CON-1",
        stat_bonuses={"str": 2, "dex": 1, "wis": 1, "con": -1},
        base_health=19,
        base_resource=110,
        base_reflex=6,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="Birkian",
        description="Winged skyfolk. INT+1, WIS+2, DEX+1, STR-1",
        stat_bonuses={"int": 1, "wis": 2, "dex": 1, "str": -1},
        base_health=18,
        base_resource=115,
        base_reflex=6,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="ThreeEye",
        description="Rare race that can awaken the Voice of All Things. INT+3, WIS+2, CHA-1",
        stat_bonuses={"int": 3, "wis": 2, "cha": -1},
        base_health=18,
        base_resource=100,
        base_reflex=5,
        run_speed=30,
        starting_skill_points=3,
    ),
    Race(
        key="Dwarf",
        description="Tiny and fast. Jumping masters. STR+1, DEX+2, INT+1, WIS-1",
        stat_bonuses={"str": 1, "dex": 2, "int": 1, "wis": -1},
        base_health=16,
        base_resource=100,
        base_reflex=7,
        run_speed=40,
        starting_skill_points=3,
    ),
    Race(
        key="Giant",
        description="Huge in size. STR+6, DEX-3, INT-1. HP 40, Bar 70",
        stat_bonuses={"str": 6, "dex": -3, "int": -1},
        base_health=40,
        base_resource=70,
        base_reflex=3,
        run_speed=25,
        starting_skill_points=3,
    ),
    Race(
        key="Tontatta",
        description="Tiny but incredibly fast. Reflex 8. STR+2, DEX+1, INT-1, CHA-2. Jump 3x distance.",
        stat_bonuses={"str": 2, "dex": 1, "int": -1, "cha": -2},
        base_health=16,
        base_resource=100,
        base_reflex=8,
        run_speed=70,
        starting_skill_points=3,
    ),
    Race(
        key="Lunarian",
        description="Can ignite flames. Fire resistance. STR+2, CON+2, CHA-1",
        stat_bonuses={"str": 2, "con": 2, "cha": -1},
        base_health=24,
        base_resource=100,
        base_reflex=5,
        run_speed=30,
        starting_skill_points=3,
    ),
]
