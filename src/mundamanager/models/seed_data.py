"""Seed data initialization for catalog tables.

This module fills the reference tables with a small starter catalog so a
fresh database can create gangs, recruit fighters and trade immediately.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from .catalog import EffectType, Equipment, FighterType, GangType, Skill, Territory, VehicleType


def _profile(m, ws, bs, s, t, w, i, a, ld, cl, wil, intel) -> dict[str, int]:
    return {
        "movement": m,
        "weapon_skill": ws,
        "ballistic_skill": bs,
        "strength": s,
        "toughness": t,
        "wounds": w,
        "initiative": i,
        "attacks": a,
        "leadership": ld,
        "cool": cl,
        "willpower": wil,
        "intelligence": intel,
    }


def seed_gang_types(session: Session) -> None:
    """Seed gang types and the fighter types each of them can recruit.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if session.execute(select(GangType).limit(1)).scalar_one_or_none() is not None:
        return

    goliath = GangType(name="House Goliath")
    escher = GangType(name="House Escher")
    enforcers = GangType(name="Palanite Enforcers", alignment="Law Abiding")
    session.add_all([goliath, escher, enforcers])
    session.flush()

    fighter_types = [
        FighterType(
            gang_type=goliath,
            name="Forge Tyrant",
            fighter_class="Leader",
            cost=135,
            stats=_profile(4, 3, 4, 4, 4, 2, 4, 2, 5, 5, 6, 7),
            special_rules=["Leader", "Gang Fighter"],
        ),
        FighterType(
            gang_type=goliath,
            name="Forge Boss",
            fighter_class="Champion",
            cost=100,
            stats=_profile(4, 3, 4, 4, 4, 2, 4, 2, 6, 6, 7, 8),
            special_rules=["Gang Fighter"],
        ),
        FighterType(
            gang_type=goliath,
            name="Bully",
            fighter_class="Ganger",
            cost=60,
            stats=_profile(4, 4, 5, 4, 4, 1, 5, 1, 7, 7, 8, 9),
        ),
        FighterType(
            gang_type=goliath,
            name="Forge-born",
            fighter_class="Juve",
            cost=30,
            stats=_profile(5, 5, 6, 3, 3, 1, 4, 1, 8, 8, 9, 10),
        ),
        FighterType(
            gang_type=escher,
            name="Matriarch",
            fighter_class="Leader",
            cost=110,
            stats=_profile(5, 3, 3, 3, 3, 2, 3, 2, 5, 5, 6, 6),
            special_rules=["Leader", "Gang Fighter"],
        ),
        FighterType(
            gang_type=escher,
            name="Sister",
            fighter_class="Ganger",
            cost=55,
            stats=_profile(5, 4, 4, 3, 3, 1, 3, 1, 7, 7, 8, 8),
        ),
        FighterType(
            gang_type=enforcers,
            name="Sergeant",
            fighter_class="Leader",
            cost=130,
            stats=_profile(4, 3, 3, 3, 3, 2, 4, 2, 5, 5, 6, 7),
            special_rules=["Leader"],
        ),
        FighterType(
            gang_type=None,
            name="Cyber-mastiff",
            fighter_class="Exotic Beast",
            cost=0,
            is_exotic_beast=True,
            stats=_profile(6, 4, 0, 4, 4, 1, 4, 2, 0, 0, 0, 0),
            special_rules=["Exotic Beast"],
        ),
    ]
    session.add_all(fighter_types)
    session.commit()


def seed_equipment(session: Session) -> None:
    """Seed the trading post equipment list.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if session.execute(select(Equipment).limit(1)).scalar_one_or_none() is not None:
        return

    mastiff = session.execute(
        select(FighterType).where(FighterType.name == "Cyber-mastiff")
    ).scalar_one_or_none()

    equipment = [
        Equipment(equipment_name="Autogun", equipment_type="weapon", cost=15),
        Equipment(equipment_name="Lasgun", equipment_type="weapon", cost=15),
        Equipment(equipment_name="Boltgun", equipment_type="weapon", cost=55),
        Equipment(equipment_name="Plasma pistol", equipment_type="weapon", cost=50),
        Equipment(equipment_name="Flak armour", equipment_type="wargear", cost=10),
        Equipment(equipment_name="Mesh armour", equipment_type="wargear", cost=15),
        Equipment(
            equipment_name="Cyber-mastiff",
            equipment_type="wargear",
            cost=100,
            grants_beast_type=mastiff,
        ),
        Equipment(equipment_name="Ram", equipment_type="vehicle_upgrade", cost=35),
        Equipment(equipment_name="Wheel Spikes", equipment_type="vehicle_upgrade", cost=10),
    ]
    session.add_all(equipment)
    session.commit()


def seed_vehicle_types(session: Session) -> None:
    """Seed vehicle profiles.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if session.execute(select(VehicleType).limit(1)).scalar_one_or_none() is not None:
        return

    session.add_all(
        [
            VehicleType(
                vehicle_type="Cargo-8 Ridgehauler",
                cost=250,
                movement=8,
                front=6,
                side=5,
                rear=4,
                hull_points=4,
                handling=5,
                save=4,
                body_slots=3,
                drive_slots=1,
                engine_slots=1,
                special_rules=["Rough Terrain Modifications"],
            ),
            VehicleType(
                vehicle_type="Outrider Quad",
                cost=125,
                movement=12,
                front=4,
                side=4,
                rear=4,
                hull_points=2,
                handling=6,
                save=5,
                body_slots=1,
                drive_slots=1,
                engine_slots=1,
            ),
        ]
    )
    session.commit()


def seed_skills_and_effects(session: Session) -> None:
    """Seed skills and effect templates.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if session.execute(select(Skill).limit(1)).scalar_one_or_none() is None:
        session.add_all(
            [
                Skill(name="Nerves of Steel", skill_type="Ferocity"),
                Skill(name="Iron Jaw", skill_type="Brawn"),
                Skill(name="Sprint", skill_type="Agility"),
                Skill(name="Fast Shot", skill_type="Shooting"),
            ]
        )

    if session.execute(select(EffectType).limit(1)).scalar_one_or_none() is None:
        session.add_all(
            [
                EffectType(
                    effect_name="Into Recovery",
                    category="injuries",
                    sends_to_recovery=True,
                ),
                EffectType(
                    effect_name="Head Injury",
                    category="injuries",
                    modifiers={"intelligence": 1, "willpower": 1},
                ),
                EffectType(
                    effect_name="Eye Injury",
                    category="injuries",
                    modifiers={"ballistic_skill": 1},
                    sends_to_recovery=True,
                ),
                EffectType(
                    effect_name="True Grit",
                    category="advancements",
                    credits_increase=10,
                    modifiers={"toughness": 1},
                ),
                EffectType(
                    effect_name="Custom Sights",
                    category="user",
                    credits_increase=15,
                ),
                EffectType(
                    effect_name="Persistent Rattle",
                    category="vehicle_damages",
                    modifiers={"handling": 1},
                ),
                EffectType(
                    effect_name="Damaged Bodywork",
                    category="vehicle_damages",
                    credits_increase=-10,
                    modifiers={"front": -1},
                ),
            ]
        )
    session.commit()


def seed_territories(session: Session) -> None:
    """Seed the territory list used by campaigns.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if session.execute(select(Territory).limit(1)).scalar_one_or_none() is not None:
        return

    names = ["Old Ruins", "Settlement", "Drinking Hole", "Tunnels", "Slag Furnace"]
    session.add_all([Territory(territory_name=name) for name in names])
    session.commit()


def seed_catalog(session: Session) -> None:
    """Seed all catalog tables with starter data.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    seed_gang_types(session)
    seed_equipment(session)
    seed_vehicle_types(session)
    seed_skills_and_effects(session)
    seed_territories(session)
