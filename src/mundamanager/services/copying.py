"""Row cloning shared by fighter and gang copies.

A :class:`RowCloner` copies rows into one target gang and remembers which
source id became which clone, so links between copied rows (crew, granted
beasts, equipment effects, loadouts) point at the copies.
"""

from sqlalchemy.orm import Session

from mundamanager.models import (
    Fighter,
    FighterEffect,
    FighterEquipment,
    FighterExoticBeast,
    FighterLoadout,
    FighterSkill,
    Gang,
    Vehicle,
)

STATUS_FLAGS = ("killed", "retired", "enslaved", "starved", "recovery", "captured")
VEHICLE_PROFILE = (
    "movement",
    "front",
    "side",
    "rear",
    "hull_points",
    "handling",
    "save",
    "body_slots",
    "drive_slots",
    "engine_slots",
)


class RowCloner:
    """Clone fighters, vehicles and items into ``gang``.

    Effects are queued and only created by :meth:`finish`, once every item
    they may be attached to has been cloned.
    """

    def __init__(self, session: Session, gang: Gang):
        self.session = session
        self.gang = gang
        self.fighters: dict[int, Fighter] = {}
        self.vehicles: dict[int, Vehicle] = {}
        self.items: dict[int, FighterEquipment] = {}
        self._effects: list[tuple[FighterEffect, Fighter | None, Vehicle | None]] = []

    def item(
        self,
        source: FighterEquipment,
        *,
        fighter: Fighter | None = None,
        vehicle: Vehicle | None = None,
    ) -> FighterEquipment:
        clone = FighterEquipment(
            gang=self.gang,
            fighter=fighter,
            vehicle=vehicle,
            gang_stash=fighter is None and vehicle is None,
            equipment_id=source.equipment_id,
            purchase_cost=source.purchase_cost,
            original_cost=source.original_cost,
            is_master_crafted=source.is_master_crafted,
        )
        self.session.add(clone)
        self.items[source.id] = clone
        return clone

    def fighter(
        self, source: Fighter, *, name: str | None = None, keep_status: bool = True
    ) -> Fighter:
        """Clone a fighter with its carried items, skills, effects and loadouts.

        Vehicles and owned beasts are not part of the fighter's clone.
        """
        clone = Fighter(
            gang=self.gang,
            fighter_type_id=source.fighter_type_id,
            fighter_name=name or source.fighter_name,
            label=source.label,
            fighter_class=source.fighter_class,
            credits=source.credits,
            cost_adjustment=source.cost_adjustment,
            xp=source.xp,
            kills=source.kills,
            note=source.note,
            special_rules=list(source.special_rules),
            stats=dict(source.stats),
        )
        for flag in STATUS_FLAGS:
            setattr(clone, flag, getattr(source, flag) if keep_status else False)
        self.session.add(clone)
        self.fighters[source.id] = clone

        for item in source.equipment:
            self.item(item, fighter=clone)
        for skill in source.skills:
            self.session.add(
                FighterSkill(
                    fighter=clone,
                    skill_id=skill.skill_id,
                    xp_cost=skill.xp_cost,
                    credits_increase=skill.credits_increase,
                    is_advance=skill.is_advance,
                )
            )
        for loadout in source.loadouts:
            self.session.add(
                FighterLoadout(
                    fighter=clone,
                    loadout_name=loadout.loadout_name,
                    is_active=loadout.is_active,
                    equipment=[
                        self.items[item.id] for item in loadout.equipment if item.id in self.items
                    ],
                )
            )
        self._effects.extend((effect, clone, None) for effect in source.effects)
        return clone

    def vehicle(self, source: Vehicle, *, crew: Fighter | None = None) -> Vehicle:
        clone = Vehicle(
            gang=self.gang,
            fighter=crew,
            vehicle_type_id=source.vehicle_type_id,
            vehicle_name=source.vehicle_name,
            cost=source.cost,
            special_rules=list(source.special_rules),
            **{stat: getattr(source, stat) for stat in VEHICLE_PROFILE},
        )
        self.session.add(clone)
        self.vehicles[source.id] = clone

        for item in source.equipment:
            self.item(item, vehicle=clone)
        self._effects.extend((effect, None, clone) for effect in source.effects)
        return clone

    def beast_link(self, source: FighterExoticBeast) -> FighterExoticBeast:
        link = FighterExoticBeast(
            owner=self.fighters[source.owner_id],
            beast=self.fighters[source.beast_id],
            fighter_equipment=self.items[source.fighter_equipment_id],
        )
        self.session.add(link)
        return link

    def finish(self) -> None:
        """Create the queued effects and flush so every clone has an id."""
        for source, fighter, vehicle in self._effects:
            item_id = source.fighter_equipment_id
            self.session.add(
                FighterEffect(
                    fighter=fighter,
                    vehicle=vehicle,
                    fighter_equipment=self.items.get(item_id) if item_id is not None else None,
                    effect_type_id=source.effect_type_id,
                    effect_name=source.effect_name,
                    category=source.category,
                    credits_increase=source.credits_increase,
                    xp_cost=source.xp_cost,
                    modifiers=dict(source.modifiers or {}),
                )
            )
        self._effects.clear()
        self.session.flush()
